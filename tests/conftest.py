"""Pytest configuration for iofacade tests.

Ensures the project root is in sys.path so imports work correctly.
"""

import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest

from iofacade.backends import LocalFileSystem, MemoryFileSystem
from iofacade.config import LocalConfig


@pytest.fixture
def local_fs(tmp_path):
    """Local filesystem rooted at a fresh temp directory."""
    return LocalFileSystem(LocalConfig(root=str(tmp_path)))


@pytest.fixture
def memory_fs():
    """Empty in-memory filesystem."""
    return MemoryFileSystem()
