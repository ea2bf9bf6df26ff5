"""
Settings file persistence.

Reads and writes <config_dir>/netcustomers.json and validates it into
AppSettings. Any failure to read or validate surfaces as ValueError so the
CLI can report a configuration error without a traceback.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from netcustomers.domain.config import AppSettings

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "netcustomers.json"

# Settings holding paths that are relative to the config directory
PATH_SETTINGS = ("data_dir", "remote_dir", "log_file")


class ConfigRepository:
    """Loads and saves AppSettings under one config directory."""

    def __init__(self, config_dir: Path):
        self.config_dir = Path(config_dir)

    @property
    def settings_path(self) -> Path:
        return self.config_dir / SETTINGS_FILENAME

    def read_raw(self) -> dict[str, Any] | None:
        """
        Parsed settings object, or None when there is no settings file.

        Raises:
            ValueError: Unreadable JSON, or a top level that is not an object
        """
        path = self.settings_path
        if not path.is_file():
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Cannot parse %s: %s", path, e)
            raise ValueError(f"Invalid JSON in {path}") from e

        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object")
        return data

    def load_settings(self) -> AppSettings:
        """
        Settings from the file, or defaults when it is absent.

        Relative paths come back anchored at the config directory.

        Raises:
            ValueError: If the file cannot be parsed or validated
        """
        data = self.read_raw()
        if data is None:
            logger.debug("No %s in %s, using defaults", SETTINGS_FILENAME, self.config_dir)
            return self._anchor(AppSettings())

        try:
            settings = AppSettings(**data)
        except PydanticValidationError as e:
            logger.error("Rejected settings in %s: %s", self.settings_path, e)
            raise ValueError(f"Invalid settings: {e}") from e
        return self._anchor(settings)

    def save_settings(self, settings: AppSettings) -> Path:
        """Write settings as pretty-printed UTF-8 JSON."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(settings.model_dump(mode="json"), indent=2, ensure_ascii=False)
        self.settings_path.write_text(payload, encoding="utf-8")
        logger.info("Saved settings to %s", self.settings_path)
        return self.settings_path

    def _anchor(self, settings: AppSettings) -> AppSettings:
        updates = {}
        for name in PATH_SETTINGS:
            value = getattr(settings, name)
            if value is not None and not value.is_absolute():
                updates[name] = self.config_dir / value
        return settings.model_copy(update=updates) if updates else settings
