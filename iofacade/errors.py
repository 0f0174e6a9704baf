"""Error taxonomy shared by every backend.

Each error mixes in the matching builtin so callers may catch either the
facade type or the plain Python one (``FileNotFoundError`` etc.).
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class IOFacadeError(Exception):
    """Base class for all facade errors."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


class PathNotFoundError(IOFacadeError, FileNotFoundError):
    """The operation requires the target to exist, but it does not."""


class PathExistsError(IOFacadeError, FileExistsError):
    """A non-overwriting operation found its destination occupied."""


class UnsupportedConversionError(IOFacadeError, TypeError):
    """A path was asked to be viewed as a kind it is not."""


class BackendIOError(IOFacadeError, OSError):
    """Opaque lower-level failure reported by a backend."""


class InvalidPathError(IOFacadeError, ValueError):
    """A raw path string could not be turned into a path handle."""


class ConfigurationError(IOFacadeError, ValueError):
    """Backend options failed validation or could not be loaded."""


@contextmanager
def translate_os_errors(location: str) -> Iterator[None]:
    """Map ``OSError``s raised inside the block onto the facade taxonomy."""
    try:
        yield
    except IOFacadeError:
        raise
    except FileNotFoundError as e:
        raise PathNotFoundError("No such path", location) from e
    except FileExistsError as e:
        raise PathExistsError("Path already exists", location) from e
    except OSError as e:
        raise BackendIOError(e.strerror or str(e), location) from e
