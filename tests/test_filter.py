"""Tests for iofacade.filter."""

import pytest

from iofacade.filter import (
    FilterResult,
    apply_filter,
    files_only,
    glob_filter,
    include_all,
    predicate_filter,
)
from tests.fakes.backends import make_dirs, write_file


@pytest.fixture
def paths(memory_fs):
    make_dirs(memory_fs, "/docs")
    file = write_file(memory_fs, "/notes.txt", b"")
    link = memory_fs.create_symbolic_link("/link", "/notes.txt")
    return {"dir": memory_fs.get_path("/docs"), "file": file, "link": link}


class TestFilterResult:
    def test_descends(self):
        assert FilterResult.INCLUDE.descends
        assert FilterResult.EXCLUDE_BUT_DESCEND.descends
        assert not FilterResult.EXCLUDE.descends

    def test_string_values(self):
        assert FilterResult("exclude_but_descend") is FilterResult.EXCLUDE_BUT_DESCEND


class TestBuiltinFilters:
    def test_include_all(self, paths):
        assert {include_all(p) for p in paths.values()} == {FilterResult.INCLUDE}

    def test_files_only(self, paths):
        assert files_only(paths["file"]) is FilterResult.INCLUDE
        assert files_only(paths["dir"]) is FilterResult.EXCLUDE_BUT_DESCEND
        assert files_only(paths["link"]) is FilterResult.EXCLUDE_BUT_DESCEND

    def test_glob_filter(self, paths):
        txt = glob_filter("*.txt")
        assert txt(paths["file"]) is FilterResult.INCLUDE
        assert txt(paths["dir"]) is FilterResult.EXCLUDE_BUT_DESCEND
        assert txt(paths["link"]) is FilterResult.EXCLUDE

    def test_glob_filter_is_case_sensitive(self, paths):
        assert glob_filter("*.TXT")(paths["file"]) is FilterResult.EXCLUDE

    def test_predicate_filter_without_descend(self, paths):
        only_docs = predicate_filter(lambda p: p.name == "docs", descend=False)
        assert only_docs(paths["dir"]) is FilterResult.INCLUDE
        assert only_docs(paths["file"]) is FilterResult.EXCLUDE

    def test_glob_filter_without_descend_prunes_directories(self, paths):
        assert glob_filter("*.txt", descend=False)(paths["dir"]) is FilterResult.EXCLUDE


class TestApplyFilter:
    def test_passes_tri_state_through(self, paths):
        assert apply_filter(include_all, paths["file"]) is FilterResult.INCLUDE

    @pytest.mark.parametrize("answer", [True, None, "include"])
    def test_rejects_other_answers(self, paths, answer):
        with pytest.raises(TypeError):
            apply_filter(lambda p: answer, paths["file"])
