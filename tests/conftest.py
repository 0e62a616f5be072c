"""
Shared test fixtures for extraction and sandbox tests.
"""

import os
import sys
import tempfile

import pytest

# Ensure project root is on sys.path so 'toolbridge' imports resolve in tests
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from toolbridge.abstractions.dto.tools import SandboxPolicy  # noqa: E402
from toolbridge.infrastructure.tools.extraction import ExtractionEngine  # noqa: E402
from toolbridge.infrastructure.tools.sandbox import SandboxExecutor  # noqa: E402


@pytest.fixture
def temp_workspace():
    """Create a temporary workspace for file operations."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield os.path.realpath(temp_dir)


@pytest.fixture
def policy(temp_workspace):
    return SandboxPolicy(root_directory=temp_workspace, command_timeout=5)


@pytest.fixture
def executor(policy):
    return SandboxExecutor(policy)


@pytest.fixture
def engine():
    return ExtractionEngine()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep TOOLBRIDGE_* settings from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("TOOLBRIDGE_"):
            monkeypatch.delenv(key, raising=False)


def create_test_file(path: str, content: str) -> None:
    """Create a test file with given content."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()
