import os
import yaml
from pathlib import Path
from typing import Any, Optional

from playground.utils.logger import LoggerManager

CONFIG_ENV_VAR = "PLAYGROUND_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "playground.yaml"


class ConfigLoader:
    """
    Loads and provides access to a YAML configuration file.
    Supports nested keys via dot notation.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.config = self._load()

    def _load(self) -> dict:
        log = LoggerManager.get_logger(__name__)
        path = self.path
        if not path.exists():
            log.error("config.missing", extra={"extra_data": {"path": str(path)}})
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
            if not isinstance(data, dict):
                log.error("config.invalid_type", extra={"extra_data": {"path": str(path)}})
                raise ValueError(f"Invalid config (expected mapping) at {path}")
            log.debug("config.loaded", extra={"extra_data": {"path": str(path)}})
            return data
        except yaml.YAMLError as e:
            log.error("config.load.fail", extra={"extra_data": {"path": str(path), "error": str(e)}}, exc_info=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """Supports dot notation for nested access."""
        parts = key.split(".")
        val = self.config
        for part in parts:
            if isinstance(val, dict) and part in val:
                val = val[part]
            else:
                return default
        return val

    def as_dict(self) -> dict:
        return self.config


def load_config(path: Optional[str | Path] = None) -> ConfigLoader:
    """Load the playground config.

    Resolution order: explicit path, `PLAYGROUND_CONFIG`, bundled
    `config/playground.yaml`.
    """
    resolved = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    return ConfigLoader(resolved)
