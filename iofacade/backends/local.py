"""Local filesystem backend.

Direct host I/O below a chroot-like root. Locations are absolute OS paths.
"""

from __future__ import annotations

import os
import shutil
from typing import BinaryIO

from iofacade.config import LocalConfig
from iofacade.errors import (
    BackendIOError,
    InvalidPathError,
    PathNotFoundError,
    UnsupportedConversionError,
    translate_os_errors,
)
from iofacade.interfaces.filesystem import FileSystem
from iofacade.interfaces.path import Directory, File, Path, SymbolicLink


class LocalFileSystem(FileSystem):
    """Backend that operates directly on the local filesystem."""

    backend_id = "local"
    display_name = "Local filesystem"

    def __init__(self, config: LocalConfig | None = None) -> None:
        super().__init__(config or LocalConfig())

    @property
    def root(self) -> str:
        return self.config.root

    def shares_namespace(self, other: FileSystem) -> bool:
        # locations are absolute host paths whatever the root
        return isinstance(other, LocalFileSystem)

    def get_path(self, raw: str) -> LocalPath:
        if "\x00" in raw:
            raise InvalidPathError("Path contains a NUL character", raw)
        location = os.path.normpath(os.path.join(self.root, raw.lstrip("/" + os.sep)))
        if not _is_within(location, self.root):
            raise InvalidPathError(f"Path escapes root {self.root}", raw)
        return LocalPath(self, location)

    def integrate(self, directory: Directory, path: Path) -> LocalPath:
        if not isinstance(directory.filesystem, LocalFileSystem):
            raise UnsupportedConversionError("Not a local directory", directory.location)
        if not path.name:
            raise InvalidPathError("Cannot integrate a path without a name", path.location)
        return LocalPath(directory.filesystem, os.path.join(directory.location, path.name))

    def native_copy(self, source: Path, destination: Path) -> None:
        src = _local_location(source)
        dst = _local_location(destination)
        with translate_os_errors(src):
            if os.path.islink(src):
                os.symlink(os.readlink(src), dst)
            elif os.path.isdir(src):
                shutil.copytree(src, dst, symlinks=True)
            else:
                shutil.copy2(src, dst)

    def native_move(self, source: Path, destination: Path) -> None:
        src = _local_location(source)
        dst = _local_location(destination)
        with translate_os_errors(src):
            shutil.move(src, dst)


class LocalPath(Path):
    @property
    def name(self) -> str:
        return os.path.basename(self._location)

    def exists(self) -> bool:
        return os.path.lexists(self._location)

    def is_file(self) -> bool:
        return os.path.isfile(self._location) and not os.path.islink(self._location)

    def is_directory(self) -> bool:
        return os.path.isdir(self._location) and not os.path.islink(self._location)

    def is_symbolic_link(self) -> bool:
        return os.path.islink(self._location)

    def _file_view(self) -> LocalFile:
        return LocalFile(self._filesystem, self._location)

    def _directory_view(self) -> LocalDirectory:
        return LocalDirectory(self._filesystem, self._location)

    def _symbolic_link_view(self) -> LocalSymbolicLink:
        return LocalSymbolicLink(self._filesystem, self._location)

    def delete(self) -> None:
        if not self.exists():
            raise PathNotFoundError("Cannot delete missing path", self._location)
        with translate_os_errors(self._location):
            if self.is_directory():
                shutil.rmtree(self._location)
            else:
                os.unlink(self._location)


class LocalFile(LocalPath, File):
    def create(self) -> None:
        with translate_os_errors(self._location):
            fd = os.open(self._location, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o666)
            os.close(fd)

    def open_input_stream(self) -> BinaryIO:
        with translate_os_errors(self._location):
            return open(self._location, "rb")

    def open_output_stream(self) -> BinaryIO:
        if not self.exists():
            raise PathNotFoundError("Cannot write to missing file", self._location)
        with translate_os_errors(self._location):
            return open(self._location, "wb")


class LocalDirectory(LocalPath, Directory):
    def create(self) -> None:
        with translate_os_errors(self._location):
            os.mkdir(self._location)

    def _children(self) -> list[Path]:
        with translate_os_errors(self._location):
            names = sorted(os.listdir(self._location))
        return [LocalPath(self._filesystem, os.path.join(self._location, name)) for name in names]


class LocalSymbolicLink(LocalPath, SymbolicLink):
    def read_link(self) -> LocalPath:
        with translate_os_errors(self._location):
            target = os.readlink(self._location)
        if not os.path.isabs(target):
            target = os.path.join(os.path.dirname(self._location), target)
        target = os.path.normpath(target)
        if not _is_within(target, self._filesystem.root):
            raise InvalidPathError(f"Link target {target} escapes root {self._filesystem.root}", self._location)
        return LocalPath(self._filesystem, target)


def _is_within(location: str, root: str) -> bool:
    if location == root:
        return True
    return location.startswith(root.rstrip(os.sep) + os.sep)


def _local_location(path: Path) -> str:
    if not isinstance(path.filesystem, LocalFileSystem):
        raise BackendIOError(
            f"Local backend cannot reach {type(path.filesystem).__name__} paths",
            path.location,
        )
    return path.location
