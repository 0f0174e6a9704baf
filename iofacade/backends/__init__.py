"""Backend implementations."""

from iofacade.backends.local import LocalFileSystem
from iofacade.backends.memory import MemoryFileSystem

__all__ = ["LocalFileSystem", "MemoryFileSystem"]
