"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError, PersistenceError
from ..logging.config import get_logger
from ..routine.models import RoutineConfig
from .defaults import DefaultConfig, get_default_config
from .normalizer import normalize_routine_settings, routine_to_settings

logger = get_logger(__name__)

SETTINGS_FILENAME = "routine.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    @property
    def settings_path(self) -> Path:
        return self.config_dir / SETTINGS_FILENAME

    def load_settings_file(self) -> dict[str, Any]:
        """Load saved settings; an absent file means no overrides."""
        if not self.settings_path.exists():
            return {}

        try:
            with open(self.settings_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Settings file is not valid YAML: {e}",
                path=str(self.settings_path)
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Settings file must contain a mapping",
                path=str(self.settings_path),
                context={"type": type(data).__name__}
            )
        return data

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Saved settings file
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_settings_file())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_routine(self, overrides: Optional[dict[str, Any]] = None) -> RoutineConfig:
        """Merged settings coerced into a typed routine configuration."""
        return normalize_routine_settings(self.merge_config(overrides))

    def save_routine_settings(self, config: RoutineConfig) -> None:
        """Write the routine sections of the settings file, keeping other sections."""
        try:
            existing = self.load_settings_file()
        except ConfigurationError:
            logger.warning("Replacing unreadable settings file", path=str(self.settings_path))
            existing = {}

        data = self._deep_merge(existing, routine_to_settings(config))

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, "w") as f:
                yaml.safe_dump(data, f, sort_keys=False)
        except OSError as e:
            raise PersistenceError(
                f"Failed to save settings: {e}",
                operation="save_routine_settings",
                target=str(self.settings_path)
            ) from e

        logger.info("Routine settings saved", path=str(self.settings_path))

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
