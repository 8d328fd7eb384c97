"""
Repository-level pytest configuration.

Why this exists:
  - Keep configuration lookups independent of the caller's environment
  - Route helper logging through the configured loguru sink
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from web_helpers.common import init_logger


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _safe_env_defaults() -> Generator[None, None, None]:
    """
    Pin the environment name and log level unless the user/CI set them.

    This keeps local runs predictable.
    """
    defaults = {
        "ENV": "dev",
        "LOGGING__LEVEL": "DEBUG",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    init_logger()
    yield
