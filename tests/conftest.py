# tests/conftest.py
"""
Central test configuration for pytest.
Provides isolated configuration files, service descriptors and holders so
that no test touches the real config path or the network.
"""

import os
import sys
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Generator

import pytest
import yaml

# Add project root to Python path for absolute imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from hanlon.config import lifecycle
from hanlon.config.field_registry import FieldRegistry
from hanlon.config.lifecycle import ServerConfigHolder
from hanlon.config.service_descriptor import ServiceDescriptor

TEST_SERVER_ADDRESS = "10.0.0.5"


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for each test. Automatically cleaned up."""
    tmp = Path(tempfile.mkdtemp(prefix="hanlon_config_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def service_descriptor_path(temp_dir: Path) -> Path:
    """A service descriptor with a non-default API root."""
    path = temp_dir / "service.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"config": {"swagger_ui": {"base_path": "/hanlon/api", "api_version": "v1"}}}, f)
    return path


@pytest.fixture
def registry(service_descriptor_path: Path, temp_dir: Path) -> FieldRegistry:
    """Registry with a fixed server address, so no socket is opened."""
    return FieldRegistry(
        descriptor=ServiceDescriptor(service_descriptor_path),
        image_path=str(temp_dir / "image"),
        address_picker=lambda: TEST_SERVER_ADDRESS,
    )


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    return temp_dir / "hanlon_server.conf"


@pytest.fixture
def holder(config_path: Path, registry: FieldRegistry) -> ServerConfigHolder:
    return ServerConfigHolder(config_path, registry)


@pytest.fixture
def hanlon_env(temp_dir: Path, service_descriptor_path: Path) -> Generator[Dict[str, str], None, None]:
    """Point the process-wide holder at temporary files."""
    env = {
        "HANLON_CONFIG_PATH": str(temp_dir / "env_hanlon_server.conf"),
        "HANLON_SERVICE_CONFIG": str(service_descriptor_path),
        "HANLON_IMAGE_PATH": str(temp_dir / "image"),
    }
    original_env = {k: os.environ.get(k) for k in env}
    os.environ.update(env)
    lifecycle._reset_instance()
    yield env
    lifecycle._reset_instance()
    for key, value in original_env.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


def pytest_configure(config):
    """Pytest configuration hook."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration (threads, real files)"
    )


def pytest_runtest_setup(item):
    """Skip tests based on markers and environment."""
    if "integration" in item.keywords and os.getenv("SKIP_INTEGRATION_TESTS", "0") == "1":
        pytest.skip("Skipping integration tests (SKIP_INTEGRATION_TESTS=1)")
