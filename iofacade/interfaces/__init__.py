"""Capability interfaces: ABCs for paths and filesystems.

Re-exports everything from the path and filesystem submodules.
"""

from iofacade.interfaces.filesystem import FileSystem
from iofacade.interfaces.path import (
    Directory,
    File,
    Path,
    SymbolicLink,
)

__all__ = [
    # Filesystem
    "FileSystem",
    # Paths
    "Path",
    "File",
    "Directory",
    "SymbolicLink",
]
