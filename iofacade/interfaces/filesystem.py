"""FileSystem ABC: path factory and cross-backend entry point."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from iofacade.transfer import copy_path, move_path

if TYPE_CHECKING:
    from iofacade.config import BackendConfig
    from iofacade.interfaces.path import Directory, Path


class FileSystem(ABC):
    """One configured backend.

    Implementations:
    - LocalFileSystem: host filesystem below a chroot-like root
    - MemoryFileSystem: in-process node store
    """

    # Dispatch tag: unique per backend kind, shared by all its instances.
    backend_id: ClassVar[str]
    display_name: ClassVar[str]

    def __init__(self, config: BackendConfig) -> None:
        self._config = config

    @property
    def config(self) -> BackendConfig:
        return self._config

    @abstractmethod
    def get_path(self, raw: str) -> Path:
        """Turn a backend path string into a handle, without any I/O.

        Args:
            raw: Path relative to the configured root; a leading "/" still
                 means the root.

        Raises:
            InvalidPathError: If the string cannot name a location below root
        """
        ...

    @abstractmethod
    def integrate(self, directory: Directory, path: Path) -> Path:
        """Return ``path``'s terminal name placed inside ``directory``.

        Pure computation: no existence checks, ``path`` may live in any
        backend.
        """
        ...

    @abstractmethod
    def native_copy(self, source: Path, destination: Path) -> None:
        """Backend-native copy; both paths are of this backend kind."""
        ...

    @abstractmethod
    def native_move(self, source: Path, destination: Path) -> None:
        """Backend-native move; both paths are of this backend kind."""
        ...

    def is_same_backend(self, other: FileSystem) -> bool:
        return self.backend_id == other.backend_id

    def shares_namespace(self, other: FileSystem) -> bool:
        """True if equal locations in both filesystems name the same entry."""
        return self is other

    def copy(self, source: Path, destination: Path, overwrite: bool = False) -> None:
        copy_path(source, destination, overwrite)

    def move(self, source: Path, destination: Path, overwrite: bool = False) -> None:
        move_path(source, destination, overwrite)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(backend_id={self.backend_id!r})"
