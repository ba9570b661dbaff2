# hanlon/settings.py
"""
Process-level settings for the configuration subsystem.

These are the few values the configuration manager itself needs before it
can build a ServerConfig: where the config file lives, where the service
descriptor lives and the image service path used as a default.
They come from the environment (a local .env file is honoured).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).parent.resolve()

DEFAULT_CONFIG_PATH = Path("config") / "hanlon_server.conf"
DEFAULT_SERVICE_CONFIG_PATH = PACKAGE_DIR / "config" / "service.yaml"

ENV_CONFIG_PATH = "HANLON_CONFIG_PATH"
ENV_SERVICE_CONFIG = "HANLON_SERVICE_CONFIG"
ENV_IMAGE_PATH = "HANLON_IMAGE_PATH"


@dataclass(frozen=True)
class Settings:
    """Resolved locations used by the configuration lifecycle."""
    config_path: Path
    service_config_path: Path
    image_path: str

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        When ``environ`` is omitted, ``.env`` is loaded first (without
        overriding variables already set) and ``os.environ`` is used.
        """
        if environ is None:
            load_dotenv(override=False)
            environ = os.environ

        config_path = Path(environ.get(ENV_CONFIG_PATH) or DEFAULT_CONFIG_PATH)
        service_config_path = Path(environ.get(ENV_SERVICE_CONFIG) or DEFAULT_SERVICE_CONFIG_PATH)
        image_path = environ.get(ENV_IMAGE_PATH) or str(Path.cwd() / "image")

        return cls(
            config_path=config_path,
            service_config_path=service_config_path,
            image_path=image_path,
        )
