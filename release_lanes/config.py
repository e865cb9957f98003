"""Lane configuration and environment settings"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml  # type: ignore[import]

from .console import console
from .errors import LaneError, UserError

DEFAULT_CONFIG_PATH = Path("lanes.yaml")

# Exported to every fastlane process
FASTLANE_ENVIRONMENT = {
    "FASTLANE_SKIP_UPDATE_CHECK": "1",
    "SPACESHIP_SKIP_2FA_UPGRADE": "1",
    "FASTLANE_DISABLE_COLORS": "1",
}


def fastlane_environment(base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Environment for fastlane child processes"""
    env = dict(os.environ if base is None else base)
    env.update(FASTLANE_ENVIRONMENT)
    return env


class Config:
    """Configuration container for lane settings"""

    def __init__(self, config_dict: Dict[str, Any]):
        self._config = config_dict

    def __getitem__(self, key: str) -> Any:
        """Get a configuration value"""
        try:
            return self._config[key]
        except KeyError:
            raise UserError(f"Missing required configuration key: {key}") from None

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value with a default"""
        return self._config.get(key, default)

    def section(self, key: str) -> "Config":
        """Get a nested mapping as its own Config"""
        value = self._config.get(key) or {}
        if not isinstance(value, dict):
            raise UserError(f"Configuration key '{key}' must be a mapping")
        return Config(value)


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file"""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        console.print(
            f"""
[bold red]Configuration file not found: {config_path}[/bold red]

Lanes read their project paths, bundle identifiers and distribution settings
from a YAML file. Create 'lanes.yaml' in the repository root, for example:

[dim]project_path: "Apps/Apps.xcodeproj"
team_id: "ABCDE12345"
manifest_path: "Sources/MapboxMaps/MapboxMaps.json"
entitlements_path: "Apps/Examples/Examples/Examples.entitlements"[/dim]

Or point to another file with [cyan]--config /path/to/lanes.yaml[/cyan]
"""
        )
        raise LaneError("Configuration file not found")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise LaneError(f"Failed to parse configuration file: {e}")
    except OSError as e:
        raise LaneError(f"Failed to load configuration file: {e}")

    if not config_dict:
        raise LaneError("Configuration file is empty")
    if not isinstance(config_dict, dict):
        raise LaneError("Configuration file must contain a mapping at the top level")

    return Config(config_dict)


@dataclass(frozen=True)
class Settings:
    """Values read from the environment once at startup"""

    project_path: Optional[str] = None
    api_key_path: Optional[str] = None
    github_output: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            environ = os.environ
        return cls(
            project_path=environ.get("PROJECT_PATH") or None,
            api_key_path=environ.get("APP_STORE_CONNECT_API_KEY_PATH") or None,
            github_output=environ.get("GITHUB_OUTPUT") or None,
        )
