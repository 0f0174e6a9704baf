"""Backend registry: caller-owned composition root for filesystems.

There is no process-wide registry: build one with ``default_registry()`` (or
``BackendRegistry()`` for an empty one) and pass it where it is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from iofacade.backends.local import LocalFileSystem
from iofacade.backends.memory import MemoryFileSystem
from iofacade.config import BackendConfig, LocalConfig, MemoryConfig
from iofacade.errors import ConfigurationError
from iofacade.interfaces.filesystem import FileSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Implementation:
    """Registration record of one backend kind."""

    id: str  # also the backend_id dispatch tag of the filesystems it builds
    name: str
    config_type: type[BackendConfig]
    factory: Callable[[BackendConfig], FileSystem]

    @classmethod
    def of(cls, filesystem_type: type[FileSystem], config_type: type[BackendConfig]) -> Implementation:
        return cls(
            id=filesystem_type.backend_id,
            name=filesystem_type.display_name,
            config_type=config_type,
            factory=filesystem_type,
        )


class BackendRegistry:
    """Maps backend ids to implementations and builds configured filesystems."""

    def __init__(self, implementations: Iterable[Implementation] = ()) -> None:
        self._implementations: dict[str, Implementation] = {}
        for implementation in implementations:
            self.register(implementation)

    def register(self, implementation: Implementation) -> None:
        if implementation.id in self._implementations:
            raise ValueError(f"Backend already registered: {implementation.id}")
        self._implementations[implementation.id] = implementation
        logger.debug("Registered filesystem backend %s (%s)", implementation.id, implementation.name)

    def unregister(self, backend_id: str) -> Implementation:
        return self._implementations.pop(backend_id)

    def get(self, backend_id: str) -> Implementation:
        implementation = self._implementations.get(backend_id)
        if implementation is None:
            raise ConfigurationError(
                f"Unknown filesystem backend: {backend_id}. "
                f"Registered backends: {', '.join(sorted(self._implementations)) or '(none)'}"
            )
        return implementation

    def ids(self) -> list[str]:
        return list(self._implementations)

    def validate(self, backend_id: str, options: Mapping[str, Any] | None = None) -> BackendConfig:
        """Validate raw options against the backend's config model."""
        implementation = self.get(backend_id)
        try:
            return implementation.config_type.model_validate(dict(options or {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid options for backend {backend_id}: {e}") from e

    def create(self, backend_id: str, options: Mapping[str, Any] | None = None) -> FileSystem:
        config = self.validate(backend_id, options)
        filesystem = self.get(backend_id).factory(config)
        if filesystem.backend_id != backend_id:
            raise ConfigurationError(
                f"Backend {backend_id} built a filesystem tagged {filesystem.backend_id}"
            )
        logger.info("Created %s filesystem %r", backend_id, filesystem)
        return filesystem

    def __contains__(self, backend_id: object) -> bool:
        return backend_id in self._implementations

    def __iter__(self) -> Iterator[Implementation]:
        return iter(list(self._implementations.values()))

    def __len__(self) -> int:
        return len(self._implementations)


def default_registry() -> BackendRegistry:
    """A fresh registry holding the built-in backends."""
    return BackendRegistry(
        [
            Implementation.of(LocalFileSystem, LocalConfig),
            Implementation.of(MemoryFileSystem, MemoryConfig),
        ]
    )
