# hanlon/config/codec.py
"""
YAML codec for ServerConfig.

A saved config is a flat, human-editable YAML mapping:

    noun: config
    version: 1
    hanlon_server: 10.0.0.5
    ...

``noun`` is the kind tag. It is checked (together with the rest of the
document envelope) against a JSON schema before any field is read, so a
garbage file, a mapping of some other kind or a partial document without
the tag are all rejected as InvalidConfigError.
"""

import logging
from typing import Any, Dict, Protocol

import yaml
from jsonschema import Draft202012Validator, ValidationError

from hanlon.error_handling import InvalidConfigError

from .field_registry import FIELD_NAMES, FIELDS_BY_NAME, TAG_FIELD, TAG_VALUE
from .server_config import ServerConfig

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
VERSION_FIELD = "version"

CONFIG_DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Hanlon server configuration",
    "type": "object",
    "propertyNames": {"type": "string"},
    "required": [TAG_FIELD],
    "properties": {
        TAG_FIELD: {"const": TAG_VALUE},
        VERSION_FIELD: {"type": "integer", "minimum": 1},
    },
}


class ConfigCodec(Protocol):
    """Boundary between ServerConfig and its on-disk representation."""

    def encode(self, record: ServerConfig) -> bytes:
        ...

    def decode(self, data: bytes) -> ServerConfig:
        ...


class YamlConfigCodec:
    """Encodes ServerConfig as a tagged YAML mapping."""

    def __init__(self):
        Draft202012Validator.check_schema(CONFIG_DOCUMENT_SCHEMA)
        self._validator = Draft202012Validator(CONFIG_DOCUMENT_SCHEMA)

    def encode(self, record: ServerConfig) -> bytes:
        document = record.to_dict()
        document = {TAG_FIELD: document.pop(TAG_FIELD), VERSION_FIELD: SCHEMA_VERSION, **document}
        try:
            text = yaml.safe_dump(
                document,
                default_flow_style=False,
                sort_keys=False,
                explicit_start=True,
                allow_unicode=True,
            )
        except yaml.YAMLError as e:
            raise InvalidConfigError(f"Configuration cannot be encoded as YAML: {e}") from e
        return text.encode("utf-8")

    def decode(self, data: bytes) -> ServerConfig:
        try:
            document = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise InvalidConfigError(f"Malformed YAML: {e}") from e

        try:
            self._validator.validate(document)
        except ValidationError as ve:
            location = " -> ".join(map(str, ve.absolute_path)) or "<document>"
            raise InvalidConfigError(f"Not a server configuration: {ve.message} at {location}") from ve

        unknown = sorted(set(document) - set(FIELD_NAMES) - {TAG_FIELD, VERSION_FIELD})
        if unknown:
            logger.debug(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

        values = {name: document[name] for name in FIELD_NAMES if name in document}
        for name, value in values.items():
            spec = FIELDS_BY_NAME[name]
            if not spec.accepts(value):
                # types are documented, not enforced
                logger.debug(
                    f"Field '{name}' holds {type(value).__name__}, expected {spec.type.__name__}; keeping it as is"
                )
        return ServerConfig(values)
