# hanlon/config/server_config.py
"""
ServerConfig: the in-memory Hanlon server configuration.

A fixed-schema record. Every field from the Field Registry is available
three ways, all going through one accessor table built at import time:

    config.api_port
    config.get("api_port") / config.set("api_port", 8026)
    config["api_port"] / config["api_port"] = 8026

The ``noun`` tag is read-only (set() ignores it), derived fields are
recomputed on every read, and unknown names raise UnknownFieldError.
"""

import threading
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Set

from hanlon.error_handling import UnknownFieldError

from .field_registry import CLIENT_PREFIX, DERIVED_FIELDS, FIELD_NAMES, TAG_FIELD, TAG_VALUE

_MASKED = "********"


class FieldAccessor(NamedTuple):
    getter: Callable[["ServerConfig"], Any]
    setter: Optional[Callable[["ServerConfig", Any], None]]


class ServerConfig:
    """
    Hanlon server configuration record.

    Mutations through set() are serialized by a per-record lock; reads are
    plain dictionary lookups.
    """

    _ACCESSORS: Dict[str, FieldAccessor] = {}

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = {}
        self._lock = threading.RLock()
        for name, value in (values or {}).items():
            self.set(name, value)

    @classmethod
    def from_defaults(cls, defaults: Mapping[str, Any]) -> "ServerConfig":
        """Build a complete record from a registry defaults mapping."""
        return cls(defaults)

    # -- generic accessors -------------------------------------------------

    def get(self, name: str) -> Any:
        """Return the value of a field (None for a known field not yet set)."""
        return self._accessor(name).getter(self)

    def set(self, name: str, value: Any) -> None:
        """Set a field by name. Setting the ``noun`` tag is silently ignored."""
        if name == TAG_FIELD:
            return
        accessor = self._accessor(name)
        if accessor.setter is None:
            raise UnknownFieldError(name, "derived configuration field cannot be set")
        accessor.setter(self, value)

    def has(self, name: str) -> bool:
        """True when ``name`` is currently present on the record."""
        return name in self.keys()

    def keys(self) -> Set[str]:
        """Names of stored fields present on the record, plus the tag."""
        with self._lock:
            return set(self._values) | {TAG_FIELD}

    def client_view(self) -> Dict[str, Any]:
        """Microkernel-facing fields, with the ``mk_`` prefix stripped."""
        with self._lock:
            return {
                name[len(CLIENT_PREFIX):]: value
                for name, value in self._values.items()
                if name.startswith(CLIENT_PREFIX)
            }

    def to_dict(self) -> Dict[str, Any]:
        """Tag plus stored values, in registry order."""
        with self._lock:
            data: Dict[str, Any] = {TAG_FIELD: TAG_VALUE}
            for name in FIELD_NAMES:
                if name in self._values:
                    data[name] = self._values[name]
            return data

    # -- derived fields ----------------------------------------------------

    def service_uri(self) -> str:
        return f"http://{self.get('hanlon_server')}:{self.get('api_port')}"

    def register_path(self) -> str:
        return f"{self.get('websvc_root')}/node/register"

    def checkin_path(self) -> str:
        return f"{self.get('websvc_root')}/node/checkin"

    # -- mapping protocol --------------------------------------------------

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __repr__(self) -> str:
        shown = self.to_dict()
        if shown.get("persist_password"):
            shown["persist_password"] = _MASKED
        return f"{type(self).__name__}({shown!r})"

    @classmethod
    def _accessor(cls, name: str) -> FieldAccessor:
        try:
            return cls._ACCESSORS[name]
        except KeyError:
            raise UnknownFieldError(name) from None


def _stored_accessor(name: str) -> FieldAccessor:
    def getter(config: ServerConfig) -> Any:
        return config._values.get(name)

    def setter(config: ServerConfig, value: Any) -> None:
        with config._lock:
            config._values[name] = value

    return FieldAccessor(getter, setter)


def _build_accessor_table() -> Dict[str, FieldAccessor]:
    table = {name: _stored_accessor(name) for name in FIELD_NAMES}
    table[TAG_FIELD] = FieldAccessor(lambda config: TAG_VALUE, None)
    table["hanlon_uri"] = FieldAccessor(ServerConfig.service_uri, None)
    table["mk_register_path"] = FieldAccessor(ServerConfig.register_path, None)
    table["mk_checkin_path"] = FieldAccessor(ServerConfig.checkin_path, None)
    missing = set(DERIVED_FIELDS) - set(table)
    if missing:
        raise RuntimeError(f"No accessor for derived fields: {sorted(missing)}")
    return table


ServerConfig._ACCESSORS = _build_accessor_table()

# plain attribute access for every field, backed by the same table
for _name, _accessor in ServerConfig._ACCESSORS.items():
    setattr(ServerConfig, _name, property(_accessor.getter, _accessor.setter))
del _name, _accessor
