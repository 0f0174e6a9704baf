"""Copy/move dispatch shared by every backend.

Decides per request between the backend-native operation (source and
effective destination share a backend kind) and the generic transfer, which
recreates directories entry by entry and streams file bytes through a small
fixed buffer.

No locking: two callers copying into the same destination race on the
backend's own delete/create primitives.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from iofacade.errors import BackendIOError, PathExistsError, PathNotFoundError

if TYPE_CHECKING:
    from iofacade.interfaces.path import File, Path

logger = logging.getLogger(__name__)

TRANSFER_CHUNK_SIZE = 1024


def resolve_destination(source: Path, destination: Path, overwrite: bool) -> Path:
    """Compute the effective destination of a copy/move.

    Raises:
        PathExistsError: If not overwriting and the effective destination
                         is occupied
    """
    if overwrite:
        return destination
    effective = destination
    if destination.exists() and destination.is_directory():
        effective = destination.filesystem.integrate(destination.as_directory(), source)
    if effective.exists():
        raise PathExistsError("Destination already exists", effective.location)
    return effective


def _prepare(source: Path, destination: Path, overwrite: bool) -> Path:
    if not source.exists():
        raise PathNotFoundError("Source does not exist", source.location)
    effective = resolve_destination(source, destination, overwrite)
    if _encloses(effective, source):
        raise BackendIOError("Cannot overwrite the source or a directory containing it", effective.location)
    effective.delete_if_exists()
    return effective


def _encloses(ancestor: Path, path: Path) -> bool:
    if not ancestor.filesystem.shares_namespace(path.filesystem):
        return False
    if ancestor.location == path.location:
        return True
    prefix = ancestor.location.rstrip("/" + os.sep)
    return path.location.startswith((prefix + "/", prefix + os.sep))


def copy_path(source: Path, destination: Path, overwrite: bool = False) -> None:
    effective = _prepare(source, destination, overwrite)
    if source.filesystem.is_same_backend(effective.filesystem):
        logger.debug("native copy %r -> %r", source, effective)
        source.filesystem.native_copy(source, effective)
    else:
        logger.debug("generic copy %r -> %r", source, effective)
        generic_transfer(source, effective)


def move_path(source: Path, destination: Path, overwrite: bool = False) -> None:
    effective = _prepare(source, destination, overwrite)
    if source.filesystem.is_same_backend(effective.filesystem):
        logger.debug("native move %r -> %r", source, effective)
        source.filesystem.native_move(source, effective)
    else:
        logger.debug("generic move %r -> %r", source, effective)
        generic_transfer(source, effective)
        # Only reached once the whole copy succeeded.
        source.delete()


def generic_transfer(source: Path, destination: Path) -> None:
    """Backend-agnostic copy of ``source`` to the absent ``destination``.

    Directories are recreated and each direct child is copied into them in
    listing order; the first failure aborts and leaves the partial tree.
    """
    if source.is_symbolic_link():
        # Links have no portable representation; only the source backend
        # knows whether it can reach the destination.
        source.filesystem.native_copy(source, destination)
    elif source.is_directory():
        target = destination.as_directory()
        target.create()
        for child in source.as_directory().list_entries():
            copy_path(child, target)
    elif source.is_file():
        target_file = destination.as_file()
        target_file.create()
        copied = stream_copy(source.as_file(), target_file)
        logger.debug("streamed %d bytes %r -> %r", copied, source, target_file)
    else:
        raise PathNotFoundError("Source vanished during transfer", source.location)


def stream_copy(source: File, destination: File, chunk_size: int = TRANSFER_CHUNK_SIZE) -> int:
    """Stream all bytes of ``source`` into ``destination``.

    Both streams are closed on every exit path.

    Returns:
        Number of bytes copied
    """
    copied = 0
    with source.open_input_stream() as reader, destination.open_output_stream() as writer:
        while True:
            chunk = reader.read(chunk_size)
            if not chunk:
                break
            writer.write(chunk)
            copied += len(chunk)
    return copied
