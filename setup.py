# setup.py
"""
Setup script for the Hanlon server configuration core.

This file provides backward compatibility with legacy build tools.
Metadata and dependencies live in `pyproject.toml` (PEP 621); this script
only adds package discovery.

DO NOT edit dependencies or metadata here — manage them in `pyproject.toml`.
"""

import os
from setuptools import setup, find_packages

# Guard against running outside the project root
if not os.path.exists("pyproject.toml"):
    raise RuntimeError(
        "❌ This setup.py must be run from the root of the hanlon-server-config project.\n"
        "Expected 'pyproject.toml' to be present."
    )

packages = find_packages(include=["hanlon", "hanlon.*"])

setup(
    packages=packages,
    include_package_data=True,
    zip_safe=False,
)
