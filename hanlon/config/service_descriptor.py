# hanlon/config/service_descriptor.py
"""
Read-only access to the Hanlon service descriptor (service.yaml).

The server configuration only needs two values from it, the swagger UI
base path and API version, which together form the default web-service root.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_BASE_PATH = "/hanlon/api"
DEFAULT_API_VERSION = "v1"


class ServiceDescriptor:
    """
    Lazily loaded YAML descriptor with dotted-key lookup.

    A missing or unreadable descriptor is treated as empty; lookups then
    fall back to the caller's default.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Optional[Dict[str, Any]] = None
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        with self._lock:
            if self._data is not None:
                return self._data
            try:
                # bytes, so PyYAML detects the encoding and reports bad input as YAMLError
                with open(self.path, "rb") as f:
                    data = yaml.safe_load(f)
            except FileNotFoundError:
                logger.warning(f"⚠️ Service descriptor not found: {self.path}")
                data = {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"⚠️ Could not read service descriptor {self.path}: {e}")
                data = {}

            if not isinstance(data, dict):
                if data:
                    logger.warning(f"⚠️ Service descriptor {self.path} is not a mapping, ignoring it")
                data = {}
            self._data = data
            return self._data

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a value by dot-separated key path.
        Example: get("config.swagger_ui.base_path")
        """
        current: Any = self._load()
        for key in key_path.split("."):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def _get_str(self, key_path: str, default: str) -> str:
        value = self.get(key_path)
        if value is None:
            return default
        return str(value)

    @property
    def base_path(self) -> str:
        return self._get_str("config.swagger_ui.base_path", DEFAULT_BASE_PATH)

    @property
    def api_version(self) -> str:
        return self._get_str("config.swagger_ui.api_version", DEFAULT_API_VERSION)

    @property
    def websvc_root(self) -> str:
        """Default web-service root: ``{base_path}/{api_version}``."""
        return f"{self.base_path}/{self.api_version}"
