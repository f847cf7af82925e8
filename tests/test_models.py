"""
Tests for the node models.
"""
import pytest
from pydantic import ValidationError

from imihigo.exceptions import InvalidQuarterError
from imihigo.models.base import (
    Baseline,
    Indicator,
    NodeKind,
    Output,
    Pillar,
    QuarterlyData,
    Quarters,
    Sector,
)


class TestQuarters:
    """Test the four-quarter record."""

    def test_defaults_to_four_zeroed_quarters(self):
        quarters = Quarters()
        assert [q for q, _ in quarters.items()] == [1, 2, 3, 4]
        assert all(data == QuarterlyData(target=0, achievement=0) for _, data in quarters.items())

    def test_accepts_string_and_integer_keys(self):
        by_str = Quarters.model_validate({"1": {"target": 5}, "4": {"achievement": 2}})
        by_int = Quarters.model_validate({1: {"target": 5}, 4: {"achievement": 2}})
        assert by_str == by_int
        assert by_int.get(1).target == 5
        assert by_int.get(4).achievement == 2

    def test_accepts_four_item_sequence(self):
        quarters = Quarters.model_validate([{"target": q} for q in (1, 2, 3, 4)])
        assert quarters.total_target() == 10

    def test_rejects_partial_sequence(self):
        with pytest.raises(ValidationError):
            Quarters.model_validate([{"target": 1}, {"target": 2}])

    def test_mapping_may_omit_quarters(self):
        quarters = Quarters.model_validate({"2": {"target": 3}})
        assert quarters.get(1) == QuarterlyData()
        assert quarters.get(2).target == 3

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            Quarters.model_validate({"1": {"target": 1}, "5": {"target": 2}})
        with pytest.raises(ValidationError):
            Quarters.model_validate({0: {"target": 1}})

    def test_get_rejects_quarter_out_of_range(self):
        with pytest.raises(InvalidQuarterError):
            Quarters().get(5)

    def test_dumps_with_numeric_string_keys(self):
        dumped = Quarters().model_dump(by_alias=True)
        assert list(dumped.keys()) == ["1", "2", "3", "4"]

    def test_figures_are_coerced(self):
        data = QuarterlyData(target="250", achievement="")
        assert data.target == 250.0
        assert data.achievement == 0.0


class TestBaseline:
    """Test the tagged baseline value."""

    def test_numeric_text(self):
        baseline = Baseline.model_validate("500")
        assert baseline.text == "500"
        assert baseline.value == 500.0

    def test_text_with_unit_reads_leading_number(self):
        baseline = Baseline.model_validate("20 schools")
        assert baseline.text == "20 schools"
        assert baseline.value == 20.0

    def test_non_numeric_text_reads_as_zero(self):
        baseline = Baseline.model_validate("not measured")
        assert baseline.text == "not measured"
        assert baseline.value == 0.0

    def test_number_input_keeps_display_text(self):
        baseline = Baseline.model_validate(7)
        assert baseline.text == "7"
        assert baseline.value == 7.0

    def test_serializes_to_authored_text(self):
        indicator = Indicator(id="i", baseline="about 40")
        assert indicator.model_dump(by_alias=True)["baseline"] == "about 40"
        assert str(indicator.baseline) == "about 40"


class TestIndicator:
    """Test indicator updates."""

    def test_new_indicator_is_empty(self):
        indicator = Indicator()
        assert indicator.name == ""
        assert indicator.annual_target == 0
        assert indicator.baseline.text == ""
        assert indicator.source_of_data == ""
        assert indicator.kind == NodeKind.INDICATOR
        assert indicator.children == ()

    def test_ids_are_unique(self):
        assert len({Indicator().id for _ in range(50)}) == 50

    def test_with_achievement_keeps_annual_target(self):
        indicator = Indicator(annual_target=999)
        updated = indicator.with_achievement(2, 40)
        assert updated.quarter(2).achievement == 40
        assert updated.annual_target == 999
        assert indicator.quarter(2).achievement == 0

    def test_with_quarter_target_derives_annual_target(self):
        indicator = Indicator().with_quarter_target(1, 100).with_quarter_target(3, "50")
        assert indicator.annual_target == 150
        assert indicator.annual_target == indicator.quarters.total_target()

    def test_models_are_frozen(self):
        indicator = Indicator()
        with pytest.raises(ValidationError):
            indicator.name = "changed"

    def test_camel_case_aliases(self):
        indicator = Indicator.model_validate(
            {"id": "x", "name": "n", "sourceOfData": "survey", "annualTarget": "12"}
        )
        assert indicator.source_of_data == "survey"
        assert indicator.annual_target == 12.0
        dumped = indicator.model_dump(mode="json", by_alias=True)
        assert dumped["sourceOfData"] == "survey"
        assert dumped["annualTarget"] == 12.0


class TestHierarchy:
    """Test parent/child rules."""

    def test_children_follow_hierarchy(self):
        output = Output(id="op").with_child_appended(Indicator(id="i"))
        assert [child.id for child in output.children] == ["i"]

    def test_wrong_child_type_is_rejected(self):
        with pytest.raises(ValueError):
            Pillar().with_child_appended(Output())

    def test_indicator_cannot_have_children(self):
        with pytest.raises(ValueError):
            Indicator().with_child_appended(Indicator())

    def test_append_leaves_original_untouched(self):
        pillar = Pillar(id="p")
        grown = pillar.with_child_appended(Sector(id="s"))
        assert pillar.sectors == ()
        assert len(grown.sectors) == 1
        assert grown.id == pillar.id

    def test_nested_validation_from_json(self):
        pillar = Pillar.model_validate({
            "id": "p",
            "name": "P",
            "sectors": [{"id": "s", "name": "S", "outcomes": []}],
        })
        assert isinstance(pillar.sectors[0], Sector)
        assert pillar.sectors[0].kind == NodeKind.SECTOR

    def test_none_name_becomes_empty(self):
        assert Pillar(name=None).name == ""
        assert Pillar(id="p", name="A").renamed(None).name == ""
