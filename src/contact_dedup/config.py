import os
from pathlib import Path

import yaml

from contact_dedup.core.exceptions import ConfigError

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "contact_dedup.yml"
CONFIG_ENV_VAR = "CONTACT_DEDUP_CONFIG"


class DedupConfig:
    def __init__(self, data):
        self.paths = data.get("paths", {}) or {}
        self.matching = data.get("matching", {}) or {}
        self.merge = data.get("merge", {}) or {}
        self.logging = data.get("logging", {}) or {}
        self.debug = data.get("debug", False)


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else CONFIG_PATH


def load_config(path: Path | None = None) -> 'DedupConfig':
    path = path or config_path()
    if not path.exists():
        # Built-in defaults apply everywhere a section is missing.
        return DedupConfig({})

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at top level")

    return DedupConfig(data)


_config_cache = None


def get_config() -> 'DedupConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def reset_config() -> None:
    global _config_cache
    _config_cache = None
