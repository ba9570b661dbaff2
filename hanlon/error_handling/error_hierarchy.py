# hanlon/error_handling/error_hierarchy.py
"""
Error hierarchy for the Hanlon server configuration.

Only UnknownFieldError is meant to reach callers: it signals a programming
error (a name outside the fixed schema). Everything else is raised and
absorbed inside the configuration lifecycle, which degrades to defaults.
"""

from enum import Enum
from pathlib import Path
from typing import Union


class ErrorCategory(Enum):
    """Category of a configuration error, shown as a tag in log lines"""
    SCHEMA = "schema"  # Name outside the fixed field set
    CONFIGURATION = "config"  # Saved file undecodable or of the wrong kind
    PERSISTENCE = "persistence"  # Config file could not be written
    NETWORK = "network"  # Local address discovery failed


class HanlonConfigError(Exception):
    """Base class for all configuration errors."""

    category: ErrorCategory = ErrorCategory.CONFIGURATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnknownFieldError(HanlonConfigError, KeyError):
    """Accessor given a name that is not a (settable) configuration field."""

    category = ErrorCategory.SCHEMA

    def __init__(self, name: str, reason: str = "unknown configuration field"):
        super().__init__(f"{reason}: '{name}'")
        self.name = name


class InvalidConfigError(HanlonConfigError):
    """Configuration file is present but undecodable or not a server config."""

    category = ErrorCategory.CONFIGURATION


class PersistenceWriteError(HanlonConfigError):
    """Configuration file could not be created."""

    category = ErrorCategory.PERSISTENCE

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Could not save config to ({path}): {reason}")
        self.path = Path(path)
        self.reason = reason


class IPDiscoveryError(HanlonConfigError):
    """Socket error while probing for a local outbound address."""

    category = ErrorCategory.NETWORK
