"""
Test fixtures for the Imihigo test suite.

Provides:
- Temporary directory fixtures (isolated from the working .imihigo/)
- Mock data builders for creating contract trees
- A sample contract with known figures
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator, Optional, Sequence, Tuple

import pytest

from imihigo.constants import reset_config_manager
from imihigo.models.base import Indicator, Outcome, Output, Pillar, Sector
from imihigo.models.contract import Contract


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test isolation."""
    temp_path = Path(tempfile.mkdtemp(prefix="imihigo_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def data_dir(temp_dir: Path) -> Path:
    """Path to an (empty) data directory inside the temp directory."""
    path = temp_dir / ".imihigo"
    path.mkdir(parents=True)
    return path


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, temp_dir: Path):
    """Keep the shared ConfigManager away from any real .imihigo/config.json."""
    monkeypatch.chdir(temp_dir)
    reset_config_manager()
    yield
    reset_config_manager()


# =============================================================================
# Mock Data Builders
# =============================================================================


class MockDataBuilder:
    """Helper class for building contract trees for testing."""

    @staticmethod
    def create_indicator(
        id: str,
        name: str = "Test Indicator",
        quarters: Sequence[Tuple[float, float]] = ((0, 0), (0, 0), (0, 0), (0, 0)),
        baseline: object = "",
        source_of_data: str = "",
        annual_target: Optional[float] = None,
    ) -> Indicator:
        """Create an Indicator; annual target defaults to the sum of quarter targets."""
        if annual_target is None:
            annual_target = sum(target for target, _ in quarters)
        return Indicator(
            id=id,
            name=name,
            baseline=baseline,
            source_of_data=source_of_data,
            annual_target=annual_target,
            quarters={
                str(q): {"target": target, "achievement": achievement}
                for q, (target, achievement) in enumerate(quarters, start=1)
            },
        )

    @staticmethod
    def create_output(id: str, name: str = "Test Output", indicators=()) -> Output:
        return Output(id=id, name=name, indicators=tuple(indicators))

    @staticmethod
    def create_outcome(id: str, name: str = "Test Outcome", outputs=()) -> Outcome:
        return Outcome(id=id, name=name, outputs=tuple(outputs))

    @staticmethod
    def create_sector(id: str, name: str = "Test Sector", outcomes=()) -> Sector:
        return Sector(id=id, name=name, outcomes=tuple(outcomes))

    @staticmethod
    def create_pillar(id: str, name: str = "Test Pillar", sectors=()) -> Pillar:
        return Pillar(id=id, name=name, sectors=tuple(sectors))


@pytest.fixture
def mock_data() -> MockDataBuilder:
    """Provide mock data builder for tree creation."""
    return MockDataBuilder()


# =============================================================================
# Contract Fixtures
# =============================================================================


@pytest.fixture
def sample_contract(mock_data: MockDataBuilder) -> Contract:
    """Create a sample contract with known figures.

    Structure:
        Economic (p-1)
        └── Agriculture (s-1)
            └── Productivity (oc-1)
                ├── Fertilizer (op-1)
                │   ├── ind-1  250/240 250/260 250/100 250/0   baseline "500"
                │   └── ind-2  100/100 x4                        baseline "20 schools"
                └── Seeds (op-2)
                    └── ind-3  50/0 x4                           baseline "n/a"
        Social (p-2)
        └── Health (s-2)
            └── Access (oc-2)
                └── Clinics (op-3)
                    └── ind-4  0/0 0/5 0/0 0/0                   baseline 7

    Totals: achieved 1005, target 1600.
    """
    ind1 = mock_data.create_indicator(
        "ind-1",
        "Fertilizer used (Tons)",
        ((250, 240), (250, 260), (250, 100), (250, 0)),
        baseline="500",
        source_of_data="Ministry of Agriculture Reports",
    )
    ind2 = mock_data.create_indicator(
        "ind-2", "Farmer schools", ((100, 100),) * 4, baseline="20 schools"
    )
    ind3 = mock_data.create_indicator("ind-3", "Seed kits", ((50, 0),) * 4, baseline="n/a")
    ind4 = mock_data.create_indicator(
        "ind-4", "Clinics opened", ((0, 0), (0, 5), (0, 0), (0, 0)), baseline=7
    )

    economic = mock_data.create_pillar("p-1", "Economic", [
        mock_data.create_sector("s-1", "Agriculture", [
            mock_data.create_outcome("oc-1", "Productivity", [
                mock_data.create_output("op-1", "Fertilizer", [ind1, ind2]),
                mock_data.create_output("op-2", "Seeds", [ind3]),
            ]),
        ]),
    ])
    social = mock_data.create_pillar("p-2", "Social", [
        mock_data.create_sector("s-2", "Health", [
            mock_data.create_outcome("oc-2", "Access", [
                mock_data.create_output("op-3", "Clinics", [ind4]),
            ]),
        ]),
    ])
    return Contract([economic, social])


@pytest.fixture
def second_contract(mock_data: MockDataBuilder) -> Contract:
    """A one-indicator contract with distinct ids: target 100, achieved 95."""
    ind = mock_data.create_indicator(
        "ind-b1", "Roads paved (km)", ((25, 30), (25, 25), (25, 20), (25, 20)), baseline="12.5"
    )
    return Contract([
        mock_data.create_pillar("p-b1", "Infrastructure", [
            mock_data.create_sector("s-b1", "Transport", [
                mock_data.create_outcome("oc-b1", "Connectivity", [
                    mock_data.create_output("op-b1", "Roads", [ind]),
                ]),
            ]),
        ]),
    ])
