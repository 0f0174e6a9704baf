"""Tests for filesystem configuration loading."""

from __future__ import annotations

import json
import os

import pytest
from pydantic import ValidationError

from iofacade.config import (
    ENV_FILESYSTEM,
    FileSystemSettings,
    LocalConfig,
    MemoryConfig,
    resolve_filesystem_name,
)
from iofacade.errors import ConfigurationError


class TestBackendConfigs:
    def test_local_root_is_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert LocalConfig(root="sub").root == os.path.join(str(tmp_path), "sub")

    def test_local_root_expands_user(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert LocalConfig(root="~/data").root == str(tmp_path / "data")

    def test_local_root_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            LocalConfig(root="")

    def test_memory_root_normalized(self):
        assert MemoryConfig(root="//a/./b/../c/").root == "/a/c"
        assert MemoryConfig().root == "/"

    def test_memory_root_must_be_absolute(self):
        with pytest.raises(ValidationError):
            MemoryConfig(root="relative")

    def test_unknown_option_rejected(self):
        with pytest.raises(ValidationError):
            LocalConfig(root="/", colour="blue")


class TestFileSystemSettings:
    """Tests for FileSystemSettings.load/save."""

    def test_missing_local_returns_defaults(self, tmp_path):
        settings = FileSystemSettings.load("local", config_dir=tmp_path)
        assert settings.backend == "local"
        assert settings.options == {}

    def test_missing_named_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileSystemSettings.load("backup", config_dir=tmp_path)

    def test_load_yaml_with_env_vars(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SCRATCH_LABEL", "nightly")
        (tmp_path / "scratch.yaml").write_text(
            "backend: memory\noptions:\n  label: ${SCRATCH_LABEL}\n  root: null\n"
        )

        settings = FileSystemSettings.load("scratch", config_dir=tmp_path)

        assert settings.name == "scratch"
        assert settings.backend == "memory"
        assert settings.options == {"label": "nightly"}

    def test_json_takes_precedence(self, tmp_path):
        (tmp_path / "fs.json").write_text(json.dumps({"backend": "memory"}))
        (tmp_path / "fs.yml").write_text("backend: local\n")
        assert FileSystemSettings.load("fs", config_dir=tmp_path).backend == "memory"

    def test_empty_yaml_uses_defaults(self, tmp_path):
        (tmp_path / "empty.yml").write_text("")
        settings = FileSystemSettings.load("empty", config_dir=tmp_path)
        assert settings.backend == "local"
        assert settings.name == "empty"

    def test_malformed_json(self, tmp_path):
        (tmp_path / "bad.json").write_text("{not json")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            FileSystemSettings.load("bad", config_dir=tmp_path)

    def test_non_mapping(self, tmp_path):
        (tmp_path / "list.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            FileSystemSettings.load("list", config_dir=tmp_path)

    def test_invalid_fields(self, tmp_path):
        (tmp_path / "bad.json").write_text(json.dumps({"options": "not a dict"}))
        with pytest.raises(ConfigurationError, match="Invalid filesystem config"):
            FileSystemSettings.load("bad", config_dir=tmp_path)

    def test_save_then_load(self, tmp_path):
        FileSystemSettings(backend="memory", options={"label": "x"}).save("mine", config_dir=tmp_path / "fs")

        loaded = FileSystemSettings.load("mine", config_dir=tmp_path / "fs")

        assert loaded.backend == "memory"
        assert loaded.options == {"label": "x"}


class TestResolveFilesystemName:
    """Tests for resolve_filesystem_name."""

    def test_cli_arg_wins(self, monkeypatch):
        monkeypatch.setenv(ENV_FILESYSTEM, "from-env")
        assert resolve_filesystem_name("cli") == "cli"

    def test_env(self, monkeypatch):
        monkeypatch.setenv(ENV_FILESYSTEM, "from-env")
        assert resolve_filesystem_name(None) == "from-env"

    def test_default(self, monkeypatch):
        monkeypatch.delenv(ENV_FILESYSTEM, raising=False)
        assert resolve_filesystem_name(None) == "local"
