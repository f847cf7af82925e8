"""
Storage manager for the Imihigo tracker.

Handles loading and saving of the JSON files in the data directory:
templates.json, selected-index.json and config.json.

Loading is forgiving: a missing, corrupt or invalid templates file is
reported and replaced by the seed contract so the tracker always starts with
a valid template list.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional

import click
from pydantic import ValidationError

from imihigo.constants import (
    CONFIG_FILENAME,
    DEFAULT_DATA_DIR,
    SEED_TEMPLATE,
    SELECTED_INDEX_FILENAME,
    TEMPLATES_FILENAME,
)
from imihigo.exceptions import StorageError
from imihigo.models.contract import Contract, check_unique_ids
from imihigo.models.files import ConfigFile, SelectionFile, TemplatesFile


def seed_templates() -> List[Contract]:
    """The template list used when nothing usable is stored."""
    return [Contract.from_json(SEED_TEMPLATE)]


class StorageManager:
    """
    Manages persistence of templates to JSON files in the data directory.

    Handles atomic writes to prevent data corruption.
    """

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize the StorageManager with a data directory path.

        Args:
            data_dir: Path to the data directory. Defaults to .imihigo/ in current directory.
        """
        self.data_dir = Path(data_dir) if data_dir else Path(DEFAULT_DATA_DIR)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def templates_path(self) -> Path:
        return self.data_dir / TEMPLATES_FILENAME

    @property
    def selected_index_path(self) -> Path:
        return self.data_dir / SELECTED_INDEX_FILENAME

    @property
    def config_path(self) -> Path:
        return self.data_dir / CONFIG_FILENAME

    def _atomic_write(self, file_path: Path, data: Any) -> None:
        """Write data to a JSON file atomically to prevent corruption.

        Args:
            file_path: Path to the file to write.
            data: JSON-serializable data.

        Raises:
            StorageError: If writing to file fails.
        """
        temp_fd, temp_path = tempfile.mkstemp(
            dir=self.data_dir, prefix=".tmp_imihigo_", suffix=".json"
        )

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as temp_file:
                json.dump(data, temp_file, indent=2)
            os.replace(temp_path, file_path)
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"Failed to write to {file_path}: {e}")

    def _read_json(self, file_path: Path) -> Any:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)

    # =========================================================================
    # Templates
    # =========================================================================

    def load_templates(self) -> List[Contract]:
        """Load templates.json, falling back to the seed contract.

        Never raises: a missing, empty, corrupt or invalid file (including one
        where two templates share a node id) is reported on stderr and
        treated as no stored data.
        """
        if not self.templates_path.exists():
            return seed_templates()

        try:
            data = self._read_json(self.templates_path)
            if isinstance(data, list):
                data = {"templates": data}
            stored = TemplatesFile.model_validate(data)
            templates = [Contract(pillars) for pillars in stored.templates]
            check_unique_ids(templates)
        except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
            click.echo(f"  ⚠ Could not load {TEMPLATES_FILENAME}, using seed data: {e}", err=True)
            return seed_templates()

        return templates or seed_templates()

    def save_templates(self, templates: List[Contract]) -> None:
        """Save every contract to templates.json."""
        self._atomic_write(
            self.templates_path,
            {"templates": [contract.to_json() for contract in templates]},
        )

    # =========================================================================
    # Selected index
    # =========================================================================

    def load_selected_index(self) -> Optional[int]:
        """Load the selected template index.

        Defaults to 0 when no selection is stored or it cannot be read.
        """
        if not self.selected_index_path.exists():
            return 0

        try:
            data = self._read_json(self.selected_index_path)
            if not isinstance(data, dict):
                data = {"selected_index": data}
            return SelectionFile.model_validate(data).selected_index
        except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
            click.echo(f"  ⚠ Could not load {SELECTED_INDEX_FILENAME}, selecting first template: {e}", err=True)
            return 0

    def save_selected_index(self, index: Optional[int]) -> None:
        """Save the selected index; None removes the stored selection."""
        if index is None:
            try:
                self.selected_index_path.unlink()
            except FileNotFoundError:
                pass
            return
        self._atomic_write(
            self.selected_index_path, SelectionFile(selected_index=index).model_dump(mode="json")
        )

    # =========================================================================
    # Config File
    # =========================================================================

    def load_config(self) -> ConfigFile:
        """Load config.json and return as ConfigFile model."""
        if not self.config_path.exists():
            return ConfigFile()

        try:
            data = self._read_json(self.config_path)
            return ConfigFile.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
            raise StorageError(f"Failed to load {CONFIG_FILENAME}: {e}")

    def save_config(self, data: ConfigFile) -> None:
        """Save ConfigFile model to config.json."""
        self._atomic_write(self.config_path, data.model_dump(mode="json"))

