# hanlon/config/persistence.py
"""
Reading and writing the Hanlon server configuration file.

save() uses an exclusive-create open (O_CREAT | O_EXCL) with mode 0600, so
an existing file is never overwritten and there is no check-then-write
window for a single writer. Two writers racing to create the file with
different content is not handled: the loser's content is simply dropped.

Neither save() nor load() raises. save() reports its outcome as a
SaveResult, load() returns None for anything it cannot use.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from hanlon.error_handling import InvalidConfigError, PersistenceWriteError

from .codec import ConfigCodec, YamlConfigCodec
from .server_config import ServerConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_MODE = 0o600

# The fixed header injected at the top of any configuration file we write
CONFIG_HEADER = (
    "#\n"
    "# This file is the main configuration for Hanlon\n"
    "#\n"
    "# -- this was system generated --\n"
    "#\n"
    "#\n"
)


class SaveStatus(Enum):
    SAVED = "saved"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save() call."""
    path: Path
    status: SaveStatus
    error: Optional[PersistenceWriteError] = None

    @property
    def ok(self) -> bool:
        return self.status is SaveStatus.SAVED


def save(path: Union[str, Path], record: ServerConfig, codec: Optional[ConfigCodec] = None) -> SaveResult:
    """Create ``path`` holding the header and the encoded record."""
    path = Path(path)
    codec = codec or YamlConfigCodec()

    try:
        payload = CONFIG_HEADER.encode("utf-8") + codec.encode(record)
    except InvalidConfigError as e:
        return _failed(path, SaveStatus.FAILED, str(e))

    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, CONFIG_FILE_MODE)
    except FileExistsError:
        return _failed(path, SaveStatus.ALREADY_EXISTS, "file already exists")
    except OSError as e:
        return _failed(path, SaveStatus.FAILED, e.strerror or str(e))

    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
    except OSError as e:
        # we created it, so a partial file is ours to remove
        try:
            path.unlink()
        except OSError:
            logger.debug(f"Could not remove partially written config {path}")
        return _failed(path, SaveStatus.FAILED, e.strerror or str(e))

    logger.info(f"💾 Configuration saved to {path}")
    return SaveResult(path=path, status=SaveStatus.SAVED)


def _failed(path: Path, status: SaveStatus, reason: str) -> SaveResult:
    error = PersistenceWriteError(path, reason)
    logger.debug(f"[{error.category.value}] {error}")
    return SaveResult(path=path, status=status, error=error)


def load(path: Union[str, Path], codec: Optional[ConfigCodec] = None) -> Optional[ServerConfig]:
    """Read and decode ``path``; None when it is missing, unreadable or invalid."""
    path = Path(path)
    codec = codec or YamlConfigCodec()

    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.debug(f"No configuration file at {path}")
        return None
    except OSError as e:
        logger.warning(f"⚠️ Could not read configuration file {path}: {e}")
        return None

    try:
        return codec.decode(data)
    except InvalidConfigError as e:
        logger.warning(f"⚠️ [{e.category.value}] Invalid configuration file {path}: {e}")
        return None
