"""Shared paths for the job_queue_messaging smoke tests.

The smoke suite only checks that every module under ``src/job_queue_messaging``
imports cleanly and passes mypy. It never talks to a broker.
"""

from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).parent.parent
SRC_DIR = PROJECT_ROOT / "src"
PACKAGE_DIR = SRC_DIR / "job_queue_messaging"


@pytest.fixture
def project_root() -> Path:
    """Working directory for mypy, so it picks up the pyproject settings."""
    return PROJECT_ROOT


@pytest.fixture
def package_dir() -> Path:
    """Queue client package that mypy checks."""
    return PACKAGE_DIR
