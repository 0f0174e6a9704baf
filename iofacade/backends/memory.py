"""In-memory backend.

A flat store of nodes keyed by absolute POSIX location, plus a per-directory
index of child locations. Children are listed in insertion order. Separate
instances are separate stores, but native operations reach across instances
of this backend kind.
"""

from __future__ import annotations

import io
import posixpath
import threading
from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import BinaryIO

from iofacade.config import MemoryConfig
from iofacade.errors import (
    BackendIOError,
    InvalidPathError,
    PathExistsError,
    PathNotFoundError,
    UnsupportedConversionError,
)
from iofacade.interfaces.filesystem import FileSystem
from iofacade.interfaces.path import Directory, File, Path, SymbolicLink

ROOT = "/"


@dataclass
class _DirNode:
    pass


@dataclass
class _FileNode:
    data: bytes = b""


@dataclass
class _LinkNode:
    target: str = ""


_Node = _DirNode | _FileNode | _LinkNode


class MemoryFileSystem(FileSystem):
    """Backend holding its whole tree in process memory."""

    backend_id = "memory"
    display_name = "In-memory store"

    def __init__(self, config: MemoryConfig | None = None) -> None:
        super().__init__(config or MemoryConfig())
        self._nodes: dict[str, _Node] = {ROOT: _DirNode()}
        # directory location -> child locations, in insertion order
        self._children: dict[str, dict[str, None]] = {ROOT: {}}
        self._state_lock = threading.RLock()
        location = ROOT
        for part in self.config.root.strip("/").split("/"):
            if part:
                location = posixpath.join(location, part)
                self._add(location, _DirNode())

    @property
    def root(self) -> str:
        return self.config.root

    def __repr__(self) -> str:
        return f"MemoryFileSystem(label={self.config.label!r}, root={self.root!r})"

    def get_path(self, raw: str) -> MemoryPath:
        if "\x00" in raw:
            raise InvalidPathError("Path contains a NUL character", raw)
        location = _normalize(posixpath.join(self.root, raw.lstrip("/")))
        if not _is_within(location, self.root):
            raise InvalidPathError(f"Path escapes root {self.root}", raw)
        return MemoryPath(self, location)

    def integrate(self, directory: Directory, path: Path) -> MemoryPath:
        if not isinstance(directory.filesystem, MemoryFileSystem):
            raise UnsupportedConversionError("Not an in-memory directory", directory.location)
        if not path.name:
            raise InvalidPathError("Cannot integrate a path without a name", path.location)
        return MemoryPath(directory.filesystem, posixpath.join(directory.location, path.name))

    def native_copy(self, source: Path, destination: Path) -> None:
        source_fs = _memory_filesystem(source)
        target_fs = _memory_filesystem(destination)
        _reject_self_nesting(source, destination)
        target_fs._graft(destination.location, source_fs._snapshot(source.location))

    def native_move(self, source: Path, destination: Path) -> None:
        source_fs = _memory_filesystem(source)
        target_fs = _memory_filesystem(destination)
        _reject_self_nesting(source, destination)
        target_fs._graft(destination.location, source_fs._snapshot(source.location))
        source_fs._remove(source.location)

    def create_symbolic_link(self, raw: str, target: str) -> MemorySymbolicLink:
        """Create a link at ``raw`` pointing at ``target`` (absolute or relative)."""
        link = self.get_path(raw)
        self._add(link.location, _LinkNode(target=target))
        return MemorySymbolicLink(self, link.location)

    # ==================== Node store ====================

    def _node(self, location: str) -> _Node | None:
        return self._nodes.get(location)

    def _add(self, location: str, node: _Node) -> None:
        with self._state_lock:
            if location in self._nodes:
                raise PathExistsError("Path already exists", location)
            parent = posixpath.dirname(location)
            if not isinstance(self._nodes.get(parent), _DirNode):
                raise PathNotFoundError("Parent directory does not exist", location)
            self._nodes[location] = node
            self._children[parent][location] = None
            if isinstance(node, _DirNode):
                self._children[location] = {}

    def _remove(self, location: str) -> None:
        if location == ROOT:
            raise BackendIOError("Cannot delete the store root", location)
        with self._state_lock:
            if location not in self._nodes:
                raise PathNotFoundError("Cannot delete missing path", location)
            for key in list(self._subtree(location)):
                del self._nodes[key]
                self._children.pop(key, None)
            del self._children[posixpath.dirname(location)][location]

    def _child_locations(self, location: str) -> list[str]:
        with self._state_lock:
            return list(self._children.get(location, ()))

    def _subtree(self, location: str) -> Iterator[str]:
        """``location`` and all its descendants, parents before children."""
        yield location
        for child in self._children.get(location, ()):
            yield from self._subtree(child)

    def _snapshot(self, location: str) -> list[tuple[str, _Node]]:
        """Copy a subtree as (suffix, node) pairs, parents before children."""
        with self._state_lock:
            if location not in self._nodes:
                raise PathNotFoundError("No such path", location)
            base = location.rstrip("/")
            return [
                (key[len(base):] if key != location else "", replace(self._nodes[key]))
                for key in self._subtree(location)
            ]

    def _graft(self, location: str, items: list[tuple[str, _Node]]) -> None:
        with self._state_lock:
            for suffix, node in items:
                self._add(location + suffix, node)


class MemoryPath(Path):
    @property
    def name(self) -> str:
        return posixpath.basename(self._location)

    @property
    def _store(self) -> MemoryFileSystem:
        return self._filesystem  # type: ignore[return-value]

    def exists(self) -> bool:
        return self._store._node(self._location) is not None

    def is_file(self) -> bool:
        return isinstance(self._store._node(self._location), _FileNode)

    def is_directory(self) -> bool:
        return isinstance(self._store._node(self._location), _DirNode)

    def is_symbolic_link(self) -> bool:
        return isinstance(self._store._node(self._location), _LinkNode)

    def _file_view(self) -> MemoryFile:
        return MemoryFile(self._filesystem, self._location)

    def _directory_view(self) -> MemoryDirectory:
        return MemoryDirectory(self._filesystem, self._location)

    def _symbolic_link_view(self) -> MemorySymbolicLink:
        return MemorySymbolicLink(self._filesystem, self._location)

    def delete(self) -> None:
        self._store._remove(self._location)


class MemoryFile(MemoryPath, File):
    def create(self) -> None:
        self._store._add(self._location, _FileNode())

    def _file_node(self) -> _FileNode:
        node = self._store._node(self._location)
        if node is None:
            raise PathNotFoundError("No such file", self._location)
        if not isinstance(node, _FileNode):
            raise BackendIOError("Not a file", self._location)
        return node

    def open_input_stream(self) -> BinaryIO:
        return io.BytesIO(self._file_node().data)

    def open_output_stream(self) -> BinaryIO:
        return _MemoryWriter(self._file_node())


class MemoryDirectory(MemoryPath, Directory):
    def create(self) -> None:
        self._store._add(self._location, _DirNode())

    def _children(self) -> list[Path]:
        return [MemoryPath(self._filesystem, key) for key in self._store._child_locations(self._location)]


class MemorySymbolicLink(MemoryPath, SymbolicLink):
    def read_link(self) -> MemoryPath:
        node = self._store._node(self._location)
        if not isinstance(node, _LinkNode):
            raise PathNotFoundError("No such symbolic link", self._location)
        target = node.target
        if not target.startswith("/"):
            target = posixpath.join(posixpath.dirname(self._location), target)
        target = _normalize(target)
        if not _is_within(target, self._store.root):
            raise InvalidPathError(f"Link target {target} escapes root {self._store.root}", self._location)
        return MemoryPath(self._filesystem, target)


class _MemoryWriter(io.BytesIO):
    """Write buffer that lands in its file node on flush and close."""

    def __init__(self, node: _FileNode) -> None:
        super().__init__()
        self._node = node
        node.data = b""

    def flush(self) -> None:
        super().flush()
        if not self.closed:
            self._node.data = self.getvalue()

    def close(self) -> None:
        if not self.closed:
            self._node.data = self.getvalue()
        super().close()


def _normalize(location: str) -> str:
    # posixpath keeps a leading "//"
    return "/" + posixpath.normpath(location).lstrip("/")


def _is_within(location: str, root: str) -> bool:
    return location == root or location.startswith(root.rstrip("/") + "/")


def _memory_filesystem(path: Path) -> MemoryFileSystem:
    if not isinstance(path.filesystem, MemoryFileSystem):
        raise BackendIOError(
            f"Memory backend cannot reach {type(path.filesystem).__name__} paths",
            path.location,
        )
    return path.filesystem


def _reject_self_nesting(source: Path, destination: Path) -> None:
    if source.filesystem is not destination.filesystem:
        return
    if destination.location.startswith(source.location.rstrip("/") + "/"):
        raise BackendIOError("Cannot copy or move a directory into itself", destination.location)
