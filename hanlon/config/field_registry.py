# hanlon/config/field_registry.py
"""
Field Registry: the fixed set of Hanlon server configuration fields.

This is the single source of truth for what a complete ServerConfig looks
like. Schema upgrade of older saved files fills in exactly the keys returned
by FieldRegistry.defaults().
"""

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .ip_discovery import pick_default_address
from .service_descriptor import ServiceDescriptor

logger = logging.getLogger(__name__)

# Read-only kind tag carried by every record and written into the file
TAG_FIELD = "noun"
TAG_VALUE = "config"

# Fields exposed to provisioned Microkernel agents
CLIENT_PREFIX = "mk_"

# Valid values for mk_log_level (not enforced)
MK_LOG_LEVELS = (
    "Logger::FATAL",
    "Logger::ERROR",
    "Logger::WARN",
    "Logger::INFO",
    "Logger::DEBUG",
)

FACT_EXCLUSION_FRAGMENTS = (
    "(^facter.*$)", "(^id$)", "(^kernel.*$)", "(^memoryfree$)", "(^memoryfree_mb$)",
    "(^operating.*$)", "(^osfamily$)", "(^path$)", "(^ps$)",
    "(^ruby.*$)", "(^selinux$)", "(^ssh.*$)", "(^swap.*$)",
    "(^timezone$)", "(^uniqueid$)", "(^uptime.*$)", "(.*json_str$)",
)
FACT_EXCLUSION_PATTERN = "|".join(FACT_EXCLUSION_FRAGMENTS)


@dataclass(frozen=True)
class FieldSpec:
    """A stored configuration field."""
    name: str
    type: type

    @property
    def is_client_field(self) -> bool:
        return self.name.startswith(CLIENT_PREFIX)

    def accepts(self, value: Any) -> bool:
        """True when ``value`` matches the declared type (None always does)."""
        if value is None:
            return True
        if self.type is int and isinstance(value, bool):
            return False
        return isinstance(value, self.type)


FIELDS: Tuple[FieldSpec, ...] = (
    # identity / network
    FieldSpec("hanlon_server", str),  # Address the Hanlon server is reachable at

    # persistence backend
    FieldSpec("persist_mode", str),
    FieldSpec("persist_host", str),
    FieldSpec("persist_port", int),
    FieldSpec("persist_username", str),
    FieldSpec("persist_password", str),
    FieldSpec("persist_timeout", int),  # Backend timeout in seconds

    # web service routing
    FieldSpec("websvc_root", str),  # URL path prefix of the REST API
    FieldSpec("admin_port", int),
    FieldSpec("api_port", int),

    # Microkernel tuning
    FieldSpec("mk_checkin_interval", int),  # Seconds between Microkernel check-ins
    FieldSpec("mk_checkin_skew", int),  # Allowed check-in clock skew in seconds
    FieldSpec("mk_fact_excl_pattern", str),  # Regex of facts not reported by the Microkernel
    FieldSpec("mk_log_level", str),  # One of MK_LOG_LEVELS
    FieldSpec("mk_tce_mirror", str),
    FieldSpec("mk_tce_install_list_uri", str),
    FieldSpec("mk_kmod_install_list_uri", str),
    FieldSpec("mk_gem_mirror", str),
    FieldSpec("mk_gemlist_uri", str),

    FieldSpec("image_path", str),

    FieldSpec("register_timeout", int),
    FieldSpec("force_mk_uuid", str),  # Empty string means unset

    FieldSpec("daemon_min_cycle_time", int),  # Minimum daemon wake-cycle time in seconds

    # seconds without a check-in before a node is removed from the system
    FieldSpec("node_expire_timeout", int),

    # DEPRECATED: use rz_mk_boot_kernel_args instead ("", "debug" or "quiet")
    FieldSpec("rz_mk_boot_debug_level", str),
    # arguments for the Microkernel's linux kernel, e.g. "console=ttyS0"
    FieldSpec("rz_mk_boot_kernel_args", str),
)

FIELD_NAMES: Tuple[str, ...] = tuple(spec.name for spec in FIELDS)
FIELDS_BY_NAME: Mapping[str, FieldSpec] = MappingProxyType({spec.name: spec for spec in FIELDS})

# Computed at read time from stored fields, never stored
DERIVED_FIELDS: Tuple[str, ...] = ("hanlon_uri", "mk_register_path", "mk_checkin_path")

STATIC_DEFAULTS: Mapping[str, Any] = MappingProxyType({
    "persist_mode": "mongo",
    "persist_host": "127.0.0.1",
    "persist_port": 27017,
    "persist_username": "",
    "persist_password": "",
    "persist_timeout": 10,

    "admin_port": 8025,
    "api_port": 8026,

    "mk_checkin_interval": 60,
    "mk_checkin_skew": 5,
    "mk_fact_excl_pattern": FACT_EXCLUSION_PATTERN,
    "mk_log_level": "Logger::ERROR",
    "mk_gem_mirror": "http://localhost:2158/gem-mirror",
    "mk_gemlist_uri": "/gems/gem.list",
    "mk_tce_mirror": "http://localhost:2157",
    "mk_tce_install_list_uri": "/tinycorelinux/tce-install-list",
    "mk_kmod_install_list_uri": "/tinycorelinux/kmod-install-list",

    "register_timeout": 120,
    "force_mk_uuid": "",

    "daemon_min_cycle_time": 30,
    "node_expire_timeout": 300,

    "rz_mk_boot_debug_level": "",
    "rz_mk_boot_kernel_args": "",
})


class FieldRegistry:
    """
    Computes the default value of every stored field, once.

    Args:
        descriptor: service descriptor providing the default websvc_root.
        address_picker: returns the default hanlon_server address.
        image_path: default image storage path.
    """

    def __init__(
        self,
        descriptor: ServiceDescriptor,
        image_path: str,
        address_picker: Callable[[], str] = pick_default_address,
    ):
        self.descriptor = descriptor
        self.image_path = image_path
        self.address_picker = address_picker
        self._defaults: Optional[Mapping[str, Any]] = None
        self._lock = threading.Lock()

    def defaults(self) -> Mapping[str, Any]:
        """Return the read-only mapping of field name to default value."""
        with self._lock:
            if self._defaults is None:
                self._defaults = MappingProxyType(self._build_defaults())
            return self._defaults

    def _build_defaults(self) -> Dict[str, Any]:
        computed = {
            "hanlon_server": self.address_picker(),
            "websvc_root": self.descriptor.websvc_root,
            "image_path": self.image_path,
        }
        defaults = {}
        for name in FIELD_NAMES:
            defaults[name] = computed[name] if name in computed else STATIC_DEFAULTS[name]
        logger.debug(f"Computed {len(defaults)} configuration defaults")
        return defaults
