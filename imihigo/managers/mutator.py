"""
Mutator for point updates on a Contract.

Every function takes a Contract and returns a new one; the input is never
touched. Only the nodes on the path from the pillar to the edited node are
copied, everything else is shared with the input.

An id that does not exist in the contract is a no-op: callers may still be
holding an id from a template that has since been deselected.
"""

from typing import Any

from imihigo.exceptions import ValidationError
from imihigo.models.base import Indicator, NodeKind
from imihigo.models.contract import Contract
from imihigo.utils import validate_quarter

INDICATOR_FIELDS = ("name", "baseline", "source_of_data")


def _update_indicator(contract: Contract, indicator_id: str, transform) -> Contract:
    ref = contract.get_ref(indicator_id)
    if ref is None or ref.kind != NodeKind.INDICATOR:
        return contract
    return contract.replace_node(indicator_id, transform)


def set_achievement(
    contract: Contract, indicator_id: str, quarter: int, value: Any
) -> Contract:
    """Replace one quarter's achievement on one indicator.

    annual_target is not recomputed.

    Args:
        contract: Contract to update.
        indicator_id: Id of the indicator.
        quarter: Quarter number 1..4.
        value: New achievement (coerced to a number >= 0).

    Returns:
        New Contract, or the input Contract if the id is unknown.

    Raises:
        InvalidQuarterError: If quarter is not 1..4.
    """
    quarter = validate_quarter(quarter)
    return _update_indicator(
        contract, indicator_id, lambda ind: ind.with_achievement(quarter, value)
    )


def set_quarter_target(
    contract: Contract, indicator_id: str, quarter: int, value: Any
) -> Contract:
    """Replace one quarter's target and re-derive the indicator's annual target.

    Raises:
        InvalidQuarterError: If quarter is not 1..4.
    """
    quarter = validate_quarter(quarter)
    return _update_indicator(
        contract, indicator_id, lambda ind: ind.with_quarter_target(quarter, value)
    )


def rename_node(contract: Contract, node_id: str, name: Any) -> Contract:
    """Rename any node (pillar through indicator)."""
    return contract.replace_node(node_id, lambda node: node.renamed(name))


def check_indicator_field(field: str) -> str:
    """Raise ValidationError unless field is an editable free-text field."""
    if field not in INDICATOR_FIELDS:
        raise ValidationError(
            f"Unknown indicator field '{field}'. Expected one of: {', '.join(INDICATOR_FIELDS)}."
        )
    return field


def apply_indicator_field(indicator: Indicator, field: str, value: Any) -> Indicator:
    """Set one free-text field on an indicator.

    Raises:
        ValidationError: If field is not an editable free-text field.
    """
    check_indicator_field(field)
    if field == "name":
        return indicator.renamed(value)
    if field == "baseline":
        return indicator.with_baseline(value)
    return indicator.with_source_of_data(value)


def update_indicator_field(
    contract: Contract, indicator_id: str, field: str, value: Any
) -> Contract:
    """Set name, baseline or source_of_data on one indicator.

    Raises:
        ValidationError: If field is not an editable free-text field.
    """
    check_indicator_field(field)
    return _update_indicator(
        contract, indicator_id, lambda ind: apply_indicator_field(ind, field, value)
    )
