"""JSON-backed storage for ComparerSettings."""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from branch_comparer.core.exceptions import SettingsError
from branch_comparer.logger import get_logger
from branch_comparer.models.settings import ComparerSettings

logger = get_logger("settings")

SETTINGS_ENV_VAR = "BRANCH_COMPARER_SETTINGS"


def default_settings_path() -> Path:
    """Settings file location, honouring the BRANCH_COMPARER_SETTINGS override."""
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "branch-comparer" / "settings.json"


class SettingsStore:
    """Loads and saves settings to a JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_settings_path()

    def load(self) -> ComparerSettings:
        """Load settings, falling back to defaults when the file is missing."""
        if not self.path.exists():
            logger.debug("No settings file at %s, using defaults", self.path)
            return ComparerSettings()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SettingsError(f"Cannot read settings file {self.path}") from e

        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self.path} must contain a JSON object")

        try:
            return ComparerSettings(**data)
        except ValidationError as e:
            raise SettingsError(f"Invalid settings in {self.path}") from e

    def save(self, settings: ComparerSettings) -> None:
        """Write settings to disk, creating the parent directory if needed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(settings.model_dump(), indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise SettingsError(f"Cannot write settings file {self.path}") from e
        logger.debug("Saved settings to %s", self.path)

    def update(self, **changes) -> ComparerSettings:
        """Apply changes on top of the stored settings, validate and save them."""
        current = self.load()
        data = current.model_dump()
        unknown = set(changes) - set(data)
        if unknown:
            raise SettingsError(f"Unknown setting: {', '.join(sorted(unknown))}")
        data.update(changes)
        try:
            settings = ComparerSettings(**data)
        except ValidationError as e:
            raise SettingsError(f"Invalid value for {', '.join(sorted(changes))}") from e
        self.save(settings)
        return settings
