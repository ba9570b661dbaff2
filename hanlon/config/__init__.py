"""
Hanlon server configuration.

The process-wide configuration is obtained with ``instance()``; it is
loaded from the config file on first use, upgraded with any missing
defaults, or created from defaults and saved when no valid file exists.
"""

from .codec import ConfigCodec, YamlConfigCodec
from .field_registry import (
    CLIENT_PREFIX,
    DERIVED_FIELDS,
    FIELD_NAMES,
    FIELDS,
    MK_LOG_LEVELS,
    TAG_FIELD,
    TAG_VALUE,
    FieldRegistry,
    FieldSpec,
)
from .ip_discovery import local_addresses, pick_default_address
from .lifecycle import ServerConfigHolder, _reset_instance, get_holder, instance
from .persistence import CONFIG_HEADER, SaveResult, SaveStatus, load, save
from .server_config import ServerConfig
from .service_descriptor import ServiceDescriptor

__all__ = [
    "CLIENT_PREFIX",
    "CONFIG_HEADER",
    "DERIVED_FIELDS",
    "FIELD_NAMES",
    "FIELDS",
    "MK_LOG_LEVELS",
    "TAG_FIELD",
    "TAG_VALUE",
    "ConfigCodec",
    "FieldRegistry",
    "FieldSpec",
    "SaveResult",
    "SaveStatus",
    "ServerConfig",
    "ServerConfigHolder",
    "ServiceDescriptor",
    "YamlConfigCodec",
    "get_holder",
    "instance",
    "load",
    "local_addresses",
    "pick_default_address",
    "save",
]
