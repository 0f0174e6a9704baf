"""Path capability set: ABCs implemented once per backend.

A backend provides one concrete class per kind (path, file, directory,
symbolic link). The shared behaviour (copy/move dispatch, delete-if-exists,
filtered traversal) lives here as default methods that call the free
functions in ``iofacade.transfer`` and ``iofacade.traversal``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, BinaryIO

from iofacade.errors import PathNotFoundError, UnsupportedConversionError
from iofacade.transfer import copy_path, move_path
from iofacade.traversal import list_entries, list_entries_recursive

if TYPE_CHECKING:
    from iofacade.filter import PathFilter
    from iofacade.interfaces.filesystem import FileSystem


class Path(ABC):
    """Handle identifying one location inside one backend.

    A handle owns no backend resources. Existence and kind are queried on
    demand and never cached, so a handle simply goes stale when its location
    disappears.
    """

    def __init__(self, filesystem: FileSystem, location: str) -> None:
        self._filesystem = filesystem
        self._location = location

    @property
    def filesystem(self) -> FileSystem:
        return self._filesystem

    @property
    def location(self) -> str:
        """Backend-specific location string."""
        return self._location

    @property
    @abstractmethod
    def name(self) -> str:
        """Terminal name segment; empty for a backend root."""
        ...

    # ==================== Kind ====================

    @abstractmethod
    def exists(self) -> bool:
        ...

    @abstractmethod
    def is_file(self) -> bool:
        ...

    @abstractmethod
    def is_directory(self) -> bool:
        ...

    @abstractmethod
    def is_symbolic_link(self) -> bool:
        """True for a link itself; links never report their target's kind."""
        ...

    @abstractmethod
    def _file_view(self) -> File:
        ...

    @abstractmethod
    def _directory_view(self) -> Directory:
        ...

    @abstractmethod
    def _symbolic_link_view(self) -> SymbolicLink:
        ...

    def as_file(self) -> File:
        """View this location as a file.

        A missing location converts fine (so it can be created); an existing
        location of another kind raises UnsupportedConversionError.
        """
        self._check_kind(self.is_file, "file")
        return self._file_view()

    def as_directory(self) -> Directory:
        self._check_kind(self.is_directory, "directory")
        return self._directory_view()

    def as_symbolic_link(self) -> SymbolicLink:
        self._check_kind(self.is_symbolic_link, "symbolic link")
        return self._symbolic_link_view()

    def _check_kind(self, is_kind: Callable[[], bool], kind: str) -> None:
        if self.exists() and not is_kind():
            raise UnsupportedConversionError(f"Not a {kind}", self._location)

    # ==================== Mutation ====================

    @abstractmethod
    def delete(self) -> None:
        """Delete this entry, recursively for directories.

        Raises:
            PathNotFoundError: If the entry does not exist
        """
        ...

    def delete_if_exists(self) -> None:
        """Delete this entry; absence counts as success."""
        if not self.exists():
            return
        try:
            self.delete()
        except PathNotFoundError:
            # Removed concurrently between the check and the delete.
            pass

    def copy(self, destination: Path, overwrite: bool = False) -> None:
        """Copy this entry to ``destination``.

        Without ``overwrite`` an existing destination directory receives the
        entry under its own name (``cp src dir/``); any other occupied
        destination raises PathExistsError.
        """
        copy_path(self, destination, overwrite)

    def move(self, destination: Path, overwrite: bool = False) -> None:
        """Move this entry to ``destination``.

        Across backends this is copy-then-delete and not atomic: a failure
        leaves a partial destination and an intact source.
        """
        move_path(self, destination, overwrite)

    # ==================== Identity ====================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._filesystem is other._filesystem and self._location == other._location

    def __hash__(self) -> int:
        return hash((id(self._filesystem), self._location))

    def __str__(self) -> str:
        return self._location

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._location!r})"


class File(Path):
    """A path that holds bytes."""

    @abstractmethod
    def create(self) -> None:
        """Create an empty file.

        Raises:
            PathExistsError: If anything already exists at this location
        """
        ...

    def create_if_not_exists(self) -> None:
        if not self.exists():
            self.create()

    @abstractmethod
    def open_input_stream(self) -> BinaryIO:
        """Open the file for binary reading.

        Raises:
            PathNotFoundError: If the file does not exist
        """
        ...

    @abstractmethod
    def open_output_stream(self) -> BinaryIO:
        """Open the file for binary writing, truncating it.

        Raises:
            PathNotFoundError: If the file does not exist
        """
        ...


class Directory(Path):
    """A path that contains other paths."""

    @abstractmethod
    def create(self) -> None:
        """Create this directory; its parent must exist."""
        ...

    def create_if_not_exists(self) -> None:
        if not self.exists():
            self.create()

    @abstractmethod
    def _children(self) -> list[Path]:
        """Unfiltered direct children in backend listing order.

        Only called once existence has been established.
        """
        ...

    def list_entries(self, path_filter: PathFilter | None = None) -> list[Path]:
        """Direct children whose filter result is INCLUDE."""
        return list_entries(self, path_filter)

    def list_entries_recursive(self, path_filter: PathFilter | None = None) -> list[Path]:
        """Transitive descendants, filtered; see ``iofacade.traversal``."""
        return list_entries_recursive(self, path_filter)


class SymbolicLink(Path):
    """A path that points at another path of the same backend."""

    @abstractmethod
    def read_link(self) -> Path:
        """Dereference one level; relative targets resolve against the parent.

        Raises:
            InvalidPathError: If the target lies outside the filesystem root
        """
        ...
