"""Tri-state path filters.

A filter maps a path to one of three results:

- INCLUDE: the entry is part of the result (directories are also descended)
- EXCLUDE: the entry is dropped and, for directories, not descended
- EXCLUDE_BUT_DESCEND: the entry is dropped, but directories are descended
  and symbolic links are followed
"""

from __future__ import annotations

import fnmatch
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from iofacade.interfaces.path import Path


class FilterResult(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"
    EXCLUDE_BUT_DESCEND = "exclude_but_descend"

    @property
    def descends(self) -> bool:
        return self is not FilterResult.EXCLUDE


PathFilter = Callable[["Path"], FilterResult]


def include_all(path: Path) -> FilterResult:
    return FilterResult.INCLUDE


def files_only(path: Path) -> FilterResult:
    """Include files, walk through directories and links."""
    if path.is_file():
        return FilterResult.INCLUDE
    return FilterResult.EXCLUDE_BUT_DESCEND


def predicate_filter(predicate: Callable[[Path], bool], descend: bool = True) -> PathFilter:
    """Lift a boolean predicate into the tri-state contract.

    Entries matching ``predicate`` are included. Non-matching directories are
    still descended when ``descend`` is true; everything else is excluded.
    """

    def _filter(path: Path) -> FilterResult:
        if predicate(path):
            return FilterResult.INCLUDE
        if descend and path.is_directory():
            return FilterResult.EXCLUDE_BUT_DESCEND
        return FilterResult.EXCLUDE

    return _filter


def glob_filter(pattern: str, descend: bool = True) -> PathFilter:
    """Include entries whose name matches a shell-style ``pattern``."""
    return predicate_filter(lambda path: fnmatch.fnmatchcase(path.name, pattern), descend=descend)


def apply_filter(path_filter: PathFilter, path: Path) -> FilterResult:
    """Evaluate ``path_filter`` once, rejecting non-tri-state answers."""
    result = path_filter(path)
    if not isinstance(result, FilterResult):
        raise TypeError(f"Path filter must return a FilterResult, got {type(result).__name__}: {result!r}")
    return result
