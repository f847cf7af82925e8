"""
Constants for the Imihigo performance contract tracker.

Note: These constants serve as default fallback values.
Actual values are loaded from <data_dir>/config.json at runtime via ConfigManager.
"""
from pathlib import Path
from typing import Any, Optional
import json

# =============================================================================
# Default Fallback Values
# These are used if config.json doesn't exist or doesn't specify a value.
# =============================================================================

# Storage defaults
DEFAULT_DATA_DIR = ".imihigo"
TEMPLATES_FILENAME = "templates.json"
SELECTED_INDEX_FILENAME = "selected-index.json"
CONFIG_FILENAME = "config.json"

# Status classification thresholds (percent)
DEFAULT_ON_TRACK_THRESHOLD = 90.0
DEFAULT_WARNING_THRESHOLD = 70.0

# Percentage rounding
DEFAULT_PERCENTAGE_ROUND_PRECISION = 1
EXPORT_PERCENTAGE_PRECISION = 2

# Status command defaults
DEFAULT_STATUS_HEADER_WIDTH = 25

# Hierarchy
QUARTERS = (1, 2, 3, 4)
DEFAULT_PILLAR_NAME_TEMPLATE = "Pillar {index}"
UNNAMED_PILLAR = "Unnamed Pillar"

# Export (not configurable)
EXPORT_FILENAME_TEMPLATE = "imihigo_report_{date}.csv"
EXPORT_HEADERS = [
    "Pillar", "Sector", "Outcome", "Output", "Indicator",
    "Baseline", "Source of Data", "Annual Target",
    "Q1 Target", "Q1 Achievement", "Q2 Target", "Q2 Achievement",
    "Q3 Target", "Q3 Achievement", "Q4 Target", "Q4 Achievement",
    "Total Achievement", "Progress %",
]

# Seed contract used when no stored templates exist (stored JSON shape)
SEED_TEMPLATE = [
    {
        "id": "p-1",
        "name": "Economic Development Pillar",
        "sectors": [
            {
                "id": "s-1",
                "name": "Agriculture & Livestock",
                "outcomes": [
                    {
                        "id": "oc-1",
                        "name": "Increased agricultural productivity",
                        "outputs": [
                            {
                                "id": "op-1",
                                "name": "Fertilizer distribution improved",
                                "indicators": [
                                    {
                                        "id": "ind-1",
                                        "name": "Quantity of chemical fertilizers used by farmers (Tons)",
                                        "baseline": "500",
                                        "sourceOfData": "Ministry of Agriculture Reports",
                                        "annualTarget": 1000,
                                        "quarters": {
                                            "1": {"target": 250, "achievement": 240},
                                            "2": {"target": 250, "achievement": 260},
                                            "3": {"target": 250, "achievement": 100},
                                            "4": {"target": 250, "achievement": 0},
                                        },
                                    }
                                ],
                            }
                        ],
                    }
                ],
            }
        ],
    }
]


# =============================================================================
# Config Loader
# Load values from <data_dir>/config.json at runtime.
# =============================================================================

_config_manager_instance: Optional['ConfigManager'] = None


class ConfigManager:
    """
    Manages loading configuration from a config.json file with fallback to defaults.

    This class is independent of StorageManager to avoid cyclic dependencies.
    StorageManager handles persistence; ConfigManager handles runtime access.

    Usage:
        # With default path (.imihigo/config.json)
        config = ConfigManager()
        on_track = config.get_float('on_track_threshold', DEFAULT_ON_TRACK_THRESHOLD)

        # With custom data directory
        config = ConfigManager(data_dir=Path("/srv/imihigo"))
    """

    def __init__(self, config_path: Optional[Path] = None, data_dir: Optional[Path] = None) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Direct path to config.json file. Takes precedence over data_dir.
            data_dir: Path to the data directory. Config path will be data_dir/config.json.
        """
        self._config: Optional[dict] = None

        if config_path is not None:
            self._config_path = config_path
        elif data_dir is not None:
            self._config_path = Path(data_dir) / CONFIG_FILENAME
        else:
            self._config_path = Path(DEFAULT_DATA_DIR) / CONFIG_FILENAME

    def _load_config(self) -> dict:
        """Load config from config.json file."""
        if self._config is not None:
            return self._config

        if self._config_path.exists():
            try:
                with open(self._config_path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                self._config = loaded if isinstance(loaded, dict) else {}
            except (ValueError, OSError):
                self._config = {}
        else:
            self._config = {}

        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value with fallback to default.

        Args:
            key: Configuration key name.
            default: Default value if key not found.

        Returns:
            Config value or default.
        """
        config = self._load_config()
        return config.get(key, default)

    def get_int(self, key: str, default: int) -> int:
        """Get an integer config value with fallback."""
        value = self.get(key, default)
        try:
            return int(value) if value is not None else default
        except (TypeError, ValueError):
            return default

    def get_float(self, key: str, default: float) -> float:
        """Get a float config value with fallback."""
        value = self.get(key, default)
        try:
            return float(value) if value is not None else default
        except (TypeError, ValueError):
            return default

    @property
    def config_path(self) -> Path:
        """Get the config file path."""
        return self._config_path


def get_config_manager(reset: bool = False) -> ConfigManager:
    """
    Get the singleton ConfigManager instance with default path.

    Args:
        reset: If True, reset the singleton and create a new instance.

    Returns:
        ConfigManager singleton instance.
    """
    global _config_manager_instance
    if _config_manager_instance is None or reset:
        _config_manager_instance = ConfigManager()
    return _config_manager_instance


def reset_config_manager() -> None:
    """Reset the singleton ConfigManager instance (useful for testing)."""
    global _config_manager_instance
    _config_manager_instance = None


def get_on_track_threshold(config: Optional[ConfigManager] = None) -> float:
    """Get the on-track threshold from config or default."""
    return (config or get_config_manager()).get_float('on_track_threshold', DEFAULT_ON_TRACK_THRESHOLD)


def get_warning_threshold(config: Optional[ConfigManager] = None) -> float:
    """Get the warning threshold from config or default."""
    return (config or get_config_manager()).get_float('warning_threshold', DEFAULT_WARNING_THRESHOLD)


def get_percentage_round_precision(config: Optional[ConfigManager] = None) -> int:
    """Get percentage round precision from config or default."""
    return (config or get_config_manager()).get_int('percentage_round_precision', DEFAULT_PERCENTAGE_ROUND_PRECISION)


def get_status_header_width(config: Optional[ConfigManager] = None) -> int:
    """Get status header width from config or default."""
    return (config or get_config_manager()).get_int('status_header_width', DEFAULT_STATUS_HEADER_WIDTH)
