"""
Error taxonomy shared by the configuration subsystem.
"""

from .error_hierarchy import (
    ErrorCategory,
    HanlonConfigError,
    InvalidConfigError,
    IPDiscoveryError,
    PersistenceWriteError,
    UnknownFieldError,
)

__all__ = [
    "ErrorCategory",
    "HanlonConfigError",
    "InvalidConfigError",
    "IPDiscoveryError",
    "PersistenceWriteError",
    "UnknownFieldError",
]
