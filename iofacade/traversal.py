"""Filtered directory listing and depth-first traversal.

Recursive traversal rules, per visited entry ``e`` (the root itself is never
filtered nor returned):

    directory  INCLUDE              descend, then append e
               EXCLUDE_BUT_DESCEND  descend
               EXCLUDE              skip subtree
    file       INCLUDE              append e
               otherwise            skip
    link       INCLUDE              append e, do not follow
               EXCLUDE_BUT_DESCEND  follow; the target is visited in turn
                                    unless dangling or outside the root
               EXCLUDE              skip

Results are fully materialized lists in backend listing order. A tree
mutated during traversal yields undefined, but safe, results.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from iofacade.errors import InvalidPathError, PathNotFoundError
from iofacade.filter import FilterResult, PathFilter, apply_filter, include_all

if TYPE_CHECKING:
    from iofacade.interfaces.path import Directory, Path

logger = logging.getLogger(__name__)


def list_entries(directory: Directory, path_filter: PathFilter | None = None) -> list[Path]:
    if not directory.exists():
        raise PathNotFoundError("Directory does not exist", directory.location)
    path_filter = path_filter or include_all
    return [
        child
        for child in directory._children()
        if apply_filter(path_filter, child) is FilterResult.INCLUDE
    ]


def list_entries_recursive(directory: Directory, path_filter: PathFilter | None = None) -> list[Path]:
    if not directory.exists():
        raise PathNotFoundError("Directory does not exist", directory.location)
    walker = _Walker(path_filter or include_all)
    for child in directory._children():
        walker.visit(child)
    return walker.result


class _Walker:
    """Accumulates one traversal; remembers followed link targets."""

    def __init__(self, path_filter: PathFilter) -> None:
        self._filter = path_filter
        self._followed: set[tuple[int, str]] = set()
        self.result: list[Path] = []

    def visit(self, entry: Path) -> None:
        verdict = apply_filter(self._filter, entry)

        if entry.is_symbolic_link():
            if verdict is FilterResult.INCLUDE:
                self.result.append(entry)
            elif verdict is FilterResult.EXCLUDE_BUT_DESCEND:
                self._follow(entry)
            return

        if entry.is_directory() and verdict.descends:
            for child in entry.as_directory()._children():
                self.visit(child)

        if verdict is FilterResult.INCLUDE:
            self.result.append(entry)

    def _follow(self, link: Path) -> None:
        try:
            target = link.as_symbolic_link().read_link()
        except InvalidPathError as e:
            logger.warning("Skipping symbolic link %s: %s", link, e)
            return
        if not target.exists():
            logger.warning("Skipping dangling symbolic link %s -> %s", link, target)
            return
        key = (id(target.filesystem), target.location)
        if key in self._followed:
            logger.warning("Skipping already followed link target %s (via %s)", target, link)
            return
        self._followed.add(key)
        self.visit(target)
