"""Tests for the path policy."""

import logging
import os
from pathlib import Path

from autoarrange.policy import (
    PathPolicy,
    current_username,
    expand_exclude,
    expand_path,
    normalize_path,
)


class TestExpandPath:
    def test_expands_tilde(self):
        result = expand_path("~/test")
        assert str(result).startswith(str(Path.home()))

    def test_handles_absolute_path(self):
        assert str(expand_path("/absolute/path")) == "/absolute/path"

    def test_expands_username_placeholder(self, monkeypatch):
        monkeypatch.setenv("USERNAME", "alice")
        assert str(expand_path("/home/%USERNAME%/Desktop")) == "/home/alice/Desktop"

    def test_expands_environment_variables(self, monkeypatch):
        monkeypatch.setenv("SCAN_ROOT", "/srv/files")
        assert str(expand_path("$SCAN_ROOT/in")) == "/srv/files/in"


class TestCurrentUsername:
    def test_prefers_username(self, monkeypatch):
        monkeypatch.setenv("USERNAME", "alice")
        monkeypatch.setenv("USER", "bob")
        assert current_username() == "alice"

    def test_falls_back_to_user(self, monkeypatch):
        monkeypatch.delenv("USERNAME", raising=False)
        monkeypatch.setenv("USER", "bob")
        assert current_username() == "bob"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("USERNAME", raising=False)
        monkeypatch.delenv("USER", raising=False)
        assert current_username() == "User"


class TestNormalizePath:
    def test_collapses_dots(self):
        assert normalize_path("/data/a/../b/./c") == os.path.normpath("/data/b/c")

    def test_makes_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert normalize_path("child") == os.path.join(os.getcwd(), "child")


class TestPathPolicy:
    def test_substring_match(self):
        policy = PathPolicy(["node_modules"])
        assert policy.is_excluded("/home/x/project/node_modules")
        assert policy.is_excluded("/home/x/project/node_modules/react/lib")
        assert not policy.is_excluded("/home/x/project/src")

    def test_case_insensitive(self):
        policy = PathPolicy(["Node_Modules"])
        assert policy.is_excluded("/home/x/NODE_MODULES/pkg")

    def test_multi_segment_entry(self):
        policy = PathPolicy(["AppData/Local/Temp"])
        assert policy.is_excluded("/Users/x/appdata/local/temp/session")
        assert not policy.is_excluded("/Users/x/appdata/roaming")

    def test_normalizes_candidate(self):
        policy = PathPolicy(["/data/private"])
        assert policy.is_excluded("/data/public/../private/notes")

    def test_expands_tilde_in_entries(self):
        policy = PathPolicy(["~/secret"])
        assert policy.is_excluded(Path.home() / "secret" / "file")

    def test_blank_entries_ignored(self):
        policy = PathPolicy(["", "  "])
        assert not policy.is_excluded("/anything")
        assert not policy.is_excluded(os.getcwd())

    def test_username_in_entries(self, monkeypatch):
        monkeypatch.setenv("USERNAME", "alice")
        policy = PathPolicy(["/home/%USERNAME%/cache"])
        assert policy.is_excluded("/home/alice/cache/x")

    def test_dollar_entries_kept_literally(self, monkeypatch):
        monkeypatch.setenv("recycle", "/somewhere/else")
        policy = PathPolicy(["$recycle.bin"])
        assert policy.is_excluded("/mnt/c/$Recycle.Bin/S-1-5")
        assert not policy.is_excluded("/somewhere/else.bin")

    def test_empty_policy_excludes_nothing(self):
        assert not PathPolicy([]).is_excluded("/home/x")


class TestExpandExclude:
    def test_environment_variables_not_expanded(self, monkeypatch):
        monkeypatch.setenv("recycle", "/somewhere/else")
        assert expand_exclude("$recycle.bin") == "$recycle.bin"

    def test_expands_tilde(self):
        assert expand_exclude("~/secret").startswith(str(Path.home()))


class TestResolveRoots:
    def test_existing_roots_kept(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        existing, skipped = PathPolicy([]).resolve_roots([str(tmp_path / "a"), str(tmp_path / "b")])
        assert existing == [tmp_path / "a", tmp_path / "b"]
        assert skipped == []

    def test_missing_root_skipped_with_warning(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        missing = tmp_path / "missing"

        existing, skipped = PathPolicy([]).resolve_roots([str(missing), str(tmp_path)])

        assert existing == [tmp_path]
        assert skipped == [str(missing)]
        assert "does not exist" in caplog.text

    def test_file_root_skipped(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        file_root = tmp_path / "file.txt"
        file_root.write_text("x")

        existing, skipped = PathPolicy([]).resolve_roots([str(file_root)])

        assert existing == []
        assert skipped == [str(file_root)]
        assert "not a directory" in caplog.text
