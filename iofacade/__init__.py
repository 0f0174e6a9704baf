"""iofacade: one Path/File/Directory/SymbolicLink capability set over many storage backends.

Usage:
    from iofacade import FileSystemSettings, create_filesystem

    settings = FileSystemSettings.load("backup")
    fs = create_filesystem(settings)

    local = create_filesystem(FileSystemSettings(backend="local", options={"root": "/srv/data"}))
    local.get_path("reports").copy(fs.get_path("archive"))  # lands in archive/reports
"""

from __future__ import annotations

from iofacade.config import FileSystemSettings, resolve_filesystem_name
from iofacade.errors import (
    BackendIOError,
    ConfigurationError,
    InvalidPathError,
    IOFacadeError,
    PathExistsError,
    PathNotFoundError,
    UnsupportedConversionError,
)
from iofacade.filter import FilterResult, PathFilter, files_only, glob_filter, include_all, predicate_filter
from iofacade.interfaces import Directory, File, FileSystem, Path, SymbolicLink
from iofacade.registry import BackendRegistry, Implementation, default_registry


def create_filesystem(
    settings: FileSystemSettings,
    registry: BackendRegistry | None = None,
) -> FileSystem:
    """Factory: create a FileSystem from settings.

    Args:
        settings: FileSystemSettings (from FileSystemSettings.load() or inline)
        registry: Backends to choose from; a fresh default_registry() if omitted
    """
    if registry is None:
        registry = default_registry()
    return registry.create(settings.backend, settings.options)


__all__ = [
    # Factory
    "create_filesystem",
    "FileSystemSettings",
    "resolve_filesystem_name",
    "BackendRegistry",
    "Implementation",
    "default_registry",
    # Capabilities
    "FileSystem",
    "Path",
    "File",
    "Directory",
    "SymbolicLink",
    # Filters
    "FilterResult",
    "PathFilter",
    "include_all",
    "files_only",
    "glob_filter",
    "predicate_filter",
    # Errors
    "IOFacadeError",
    "PathNotFoundError",
    "PathExistsError",
    "UnsupportedConversionError",
    "BackendIOError",
    "InvalidPathError",
    "ConfigurationError",
]
