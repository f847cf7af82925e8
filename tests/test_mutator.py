"""
Tests for mutator point updates.
"""
import pytest

from imihigo.exceptions import InvalidQuarterError, ValidationError
from imihigo.managers import mutator
from imihigo.managers.rollup import RollupEngine


class TestSetAchievement:
    """Test entering quarterly achievements."""

    def test_updates_one_quarter(self, sample_contract):
        updated = mutator.set_achievement(sample_contract, "ind-1", 4, 300)
        indicator = updated.get_indicator("ind-1")
        assert indicator.quarter(4).achievement == 300
        assert indicator.total_achievement() == 900

    def test_annual_target_is_not_recomputed(self, sample_contract):
        updated = mutator.set_achievement(sample_contract, "ind-3", 1, 10)
        assert updated.get_indicator("ind-3").annual_target == 200

    def test_input_contract_is_untouched(self, sample_contract):
        mutator.set_achievement(sample_contract, "ind-1", 4, 300)
        assert sample_contract.get_indicator("ind-1").quarter(4).achievement == 0

    def test_blank_value_reads_as_zero(self, sample_contract):
        updated = mutator.set_achievement(sample_contract, "ind-1", 1, "")
        assert updated.get_indicator("ind-1").quarter(1).achievement == 0

    def test_unknown_id_is_noop(self, sample_contract):
        assert mutator.set_achievement(sample_contract, "ghost", 1, 5) is sample_contract

    def test_non_indicator_id_is_noop(self, sample_contract):
        assert mutator.set_achievement(sample_contract, "op-1", 1, 5) is sample_contract

    @pytest.mark.parametrize("quarter", [0, 5, "1", True])
    def test_invalid_quarter(self, sample_contract, quarter):
        with pytest.raises(InvalidQuarterError):
            mutator.set_achievement(sample_contract, "ind-1", quarter, 5)

    def test_sharing_outside_path(self, sample_contract):
        updated = mutator.set_achievement(sample_contract, "ind-4", 2, 6)
        assert updated.pillars[0] is sample_contract.pillars[0]


class TestSetQuarterTarget:
    """Test quarter targets on an existing contract."""

    def test_annual_target_is_rederived(self, sample_contract):
        updated = mutator.set_quarter_target(sample_contract, "ind-2", 3, 400)
        indicator = updated.get_indicator("ind-2")
        assert indicator.quarter(3).target == 400
        assert indicator.annual_target == 700

    def test_achievements_are_kept(self, sample_contract):
        updated = mutator.set_quarter_target(sample_contract, "ind-1", 1, 300)
        assert updated.get_indicator("ind-1").quarter(1).achievement == 240


class TestTextFields:
    """Test renames and free-text indicator fields."""

    def test_rename_any_level(self, sample_contract):
        updated = mutator.rename_node(sample_contract, "oc-2", "Access to care")
        assert updated.get_node("oc-2").name == "Access to care"

    def test_rename_unknown_id_is_noop(self, sample_contract):
        assert mutator.rename_node(sample_contract, "ghost", "x") is sample_contract

    def test_update_baseline(self, sample_contract):
        updated = mutator.update_indicator_field(sample_contract, "ind-3", "baseline", "35 kits")
        baseline = updated.get_indicator("ind-3").baseline
        assert baseline.text == "35 kits"
        assert baseline.value == 35

    def test_update_source_of_data(self, sample_contract):
        updated = mutator.update_indicator_field(sample_contract, "ind-2", "source_of_data", "District")
        assert updated.get_indicator("ind-2").source_of_data == "District"

    def test_unknown_field(self, sample_contract):
        with pytest.raises(ValidationError):
            mutator.update_indicator_field(sample_contract, "ind-1", "quarters", {})

    def test_index_is_shared_across_updates(self, sample_contract):
        updated = mutator.update_indicator_field(sample_contract, "ind-1", "name", "Tons")
        assert updated.index is sample_contract.index


class TestSequences:
    """Test that rolled-up totals follow a series of point updates."""

    def test_totals_match_indicators_after_updates(self, sample_contract):
        engine = RollupEngine()
        contract = mutator.set_achievement(sample_contract, "ind-1", 4, 300)
        contract = mutator.set_quarter_target(contract, "ind-3", 2, 80)
        contract = mutator.set_achievement(contract, "ind-3", 2, 40)
        contract = mutator.set_quarter_target(contract, "ind-4", 1, 10)
        contract = mutator.set_achievement(contract, "ind-2", 1, "75")

        indicators = list(contract.indicators())
        assert engine.achieved(contract) == sum(ind.total_achievement() for ind in indicators)
        assert engine.target(contract) == sum(ind.annual_target for ind in indicators)
        assert engine.achieved(contract) == 1005 + 300 + 40 - 25
        assert engine.target(contract) == 1600 + 30 + 10
        for quarter in (1, 2, 3, 4):
            assert engine.target(contract, quarter) == sum(
                ind.quarter(quarter).target for ind in indicators
            )
