"""
CLI settings, layered from built-in defaults, a YAML file and the environment.

Only the keys in SETTINGS are accepted. Values are parsed when they are
written with `config set` and again when they are read, so a bad value in
the environment or a hand-edited file is reported with where it came from.
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse


class ConfigError(Exception):
    """Raised when a setting is unknown or malformed, or the config file is unusable."""

    pass


def parse_url(raw: Any) -> str:
    value = str(raw).strip().rstrip("/")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("expected an http(s) URL such as http://localhost:8000")
    return value


def parse_timeout(raw: Any) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError("must be a positive number of seconds")
    return value


@dataclass(frozen=True)
class Setting:
    key: str
    env_var: str
    parse: Callable[[Any], Any]
    default: Any = None
    help: str = ""


SETTINGS: Dict[str, Setting] = {
    setting.key: setting
    for setting in (
        Setting(
            "intake_url",
            "INCIDENT_INTAKE_URL",
            parse_url,
            help="Base URL of the intake service",
        ),
        Setting(
            "timeout",
            "INCIDENT_INTAKE_TIMEOUT",
            parse_timeout,
            default=30.0,
            help="Request timeout in seconds",
        ),
    )
}


def lookup_setting(key: str) -> Setting:
    """Find a setting by key, accepting `intake-url` as well as `intake_url`."""
    name = key.strip().lower().replace("-", "_")
    try:
        return SETTINGS[name]
    except KeyError:
        raise ConfigError(
            f"Unknown configuration key '{key}'. Known keys: {', '.join(SETTINGS)}"
        ) from None


class Config:
    """Resolves CLI settings: environment over config file over default."""

    DEFAULT_CONFIG_FILE = Path.home() / ".incident-intake" / "config.yaml"

    def __init__(self, config_file: Optional[Path] = None):
        """
        Args:
            config_file: Path to config file (defaults to ~/.incident-intake/config.yaml)
        """
        self.config_file = config_file or self.DEFAULT_CONFIG_FILE
        self._stored: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            return {}
        try:
            with open(self.config_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {self.config_file}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.config_file} must contain a mapping")
        return data

    def _write(self):
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._stored, f, default_flow_style=False)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to save config to {self.config_file}: {e}")

    @staticmethod
    def _parse(setting: Setting, raw: Any, origin: str) -> Any:
        try:
            return setting.parse(raw)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid {setting.key} value {raw!r} from {origin}: {e}")

    def resolve(self, key: str) -> Tuple[Any, str]:
        """
        Resolve a setting to its effective value and where that value came from.

        Args:
            key: Setting key

        Returns:
            (value, source), where source is "env", "file" or "default"

        Raises:
            ConfigError: If the key is unknown or the value found is malformed
        """
        setting = lookup_setting(key)
        env_value = os.environ.get(setting.env_var)
        if env_value:
            return self._parse(setting, env_value, setting.env_var), "env"
        if setting.key in self._stored:
            raw = self._stored[setting.key]
            return self._parse(setting, raw, str(self.config_file)), "file"
        return setting.default, "default"

    def get(self, key: str) -> Any:
        return self.resolve(key)[0]

    def get_timeout(self) -> float:
        return self.get("timeout")

    def set(self, key: str, value: str) -> Any:
        """
        Validate a setting and store it in the config file.

        Returns:
            The parsed value that was stored

        Raises:
            ConfigError: If the key is unknown or the value does not parse
        """
        setting = lookup_setting(key)
        parsed = self._parse(setting, value, "command line")
        self._stored[setting.key] = parsed
        self._write()
        return parsed

    def unset(self, key: str) -> bool:
        """Remove a setting from the config file. Returns False if it was not stored."""
        setting = lookup_setting(key)
        if setting.key not in self._stored:
            return False
        del self._stored[setting.key]
        self._write()
        return True

    def describe(self) -> List[Tuple[str, Any, str]]:
        """(key, effective value, source) for every known setting."""
        return [(key, *self.resolve(key)) for key in SETTINGS]
