"""Configuration Management Package"""

import json
import sys
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional

from cpush import DEFAULT_GENERATOR, RESTART_DELAY_MS, REGENERATE_DELAY_MS


@dataclass
class Config:
    """User configuration with sensible defaults."""
    generator: list[str] = field(default_factory=lambda: list(DEFAULT_GENERATOR))
    remote: Optional[str] = None  # None pushes to the branch's upstream
    dry_run_hooks: bool = False
    persist_state: bool = True
    restart_delay_ms: int = RESTART_DELAY_MS
    regenerate_delay_ms: int = REGENERATE_DELAY_MS

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if (not isinstance(self.generator, list) or not self.generator
                or not all(isinstance(word, str) and word for word in self.generator)):
            warnings.append(f"Invalid generator '{self.generator}', using '{' '.join(defaults.generator)}'")
            self.generator = defaults.generator

        if self.remote is not None and (not isinstance(self.remote, str) or not self.remote.strip()):
            warnings.append(f"Invalid remote '{self.remote}', using upstream")
            self.remote = None

        for name in ('dry_run_hooks', 'persist_state'):
            if not isinstance(getattr(self, name), bool):
                warnings.append(f"Invalid {name} '{getattr(self, name)}', using {str(getattr(defaults, name)).lower()}")
                setattr(self, name, getattr(defaults, name))

        for name in ('restart_delay_ms', 'regenerate_delay_ms'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                warnings.append(f"Invalid {name} '{value}', using {getattr(defaults, name)}")
                setattr(self, name, getattr(defaults, name))

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_FILENAME = ".cpushrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        for path in (Path.cwd() / self.CONFIG_FILENAME, Path.home() / self.CONFIG_FILENAME):
            if path.exists():
                self._config = self._load_from_file(path)
                self._config_path = path
                return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2)
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def save_config(config: Config, global_config: bool = True) -> Path:
    return _manager.save(config, global_config)


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "save_config",
    "get_config_path",
]
