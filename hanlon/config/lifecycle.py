# hanlon/config/lifecycle.py
"""
Lazy, lock-guarded holder of the process-wide ServerConfig.

On the first instance() call the holder:
  1. loads the config file (persistence.load),
  2. discards it unless it is a ServerConfig carrying the expected tag,
  3. fills in any field the file lacks from the registry defaults
     (schema upgrade; fields the file sets are kept, even empty ones),
  4. otherwise builds a fresh record from defaults and saves it once,
  5. caches the record. Later calls return the cached reference.

instance() never raises; every failure degrades to defaults.
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from hanlon.settings import Settings

from . import persistence
from .codec import ConfigCodec, YamlConfigCodec
from .field_registry import TAG_FIELD, TAG_VALUE, FieldRegistry
from .server_config import ServerConfig
from .service_descriptor import ServiceDescriptor

logger = logging.getLogger(__name__)


class ServerConfigHolder:
    """
    Owns the single live ServerConfig.

    Concurrent first callers block on the lock; exactly one of them runs the
    load-or-create-and-save sequence.
    """

    def __init__(
        self,
        path: Union[str, Path],
        registry: FieldRegistry,
        codec: Optional[ConfigCodec] = None,
    ):
        self.path = Path(path)
        self.registry = registry
        self.codec = codec or YamlConfigCodec()
        self._instance: Optional[ServerConfig] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServerConfigHolder":
        registry = FieldRegistry(
            descriptor=ServiceDescriptor(settings.service_config_path),
            image_path=settings.image_path,
        )
        return cls(settings.config_path, registry)

    @property
    def is_loaded(self) -> bool:
        return self._instance is not None

    def instance(self) -> ServerConfig:
        """Return the cached configuration, loading or creating it on first use."""
        config = self._instance
        if config is not None:
            return config
        with self._lock:
            if self._instance is None:
                self._instance = self._load_or_create()
            return self._instance

    def _reset_instance(self) -> None:
        """Drop the cached configuration; the next instance() reloads. Testing only."""
        with self._lock:
            self._instance = None

    def _load_or_create(self) -> ServerConfig:
        logger.debug(f"Trying to load config from ({self.path})")
        try:
            config = persistence.load(self.path, self.codec)
        except Exception as e:
            logger.error(f"❌ Unexpected error loading config from ({self.path}): {e}", exc_info=True)
            config = None

        if isinstance(config, ServerConfig) and config.get(TAG_FIELD) == TAG_VALUE:
            self._upgrade(config)
            return config

        logger.warning(f"⚠️ Configuration validation failed loading ({self.path})")
        logger.warning(f"⚠️ Resetting ({self.path}) and using default config")
        config = ServerConfig.from_defaults(self.registry.defaults())

        result = persistence.save(self.path, config, self.codec)
        if not result.ok:
            logger.error(f"❌ [{result.error.category.value}] {result.error}")
        return config

    def _upgrade(self, config: ServerConfig) -> None:
        added = []
        for name, value in self.registry.defaults().items():
            if not config.has(name):
                config.set(name, value)
                added.append(name)
        if added:
            logger.info(f"🔄 Added missing configuration fields from defaults: {', '.join(added)}")


_default_holder: Optional[ServerConfigHolder] = None
_default_holder_lock = threading.Lock()


def get_holder() -> ServerConfigHolder:
    """Return the process-wide holder, configured from the environment."""
    global _default_holder
    with _default_holder_lock:
        if _default_holder is None:
            _default_holder = ServerConfigHolder.from_settings(Settings.from_env())
        return _default_holder


def instance() -> ServerConfig:
    """The process-wide Hanlon server configuration."""
    return get_holder().instance()


def _reset_instance() -> None:
    """
    Forget the process-wide configuration and holder (re-reading settings
    on next use). Testing only.
    """
    global _default_holder
    with _default_holder_lock:
        if _default_holder is not None:
            _default_holder._reset_instance()
        _default_holder = None
