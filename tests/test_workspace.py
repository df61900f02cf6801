"""Workspace lifecycle and archive extraction."""

import zipfile
from datetime import datetime

import pytest

from offline_bundle_installer.errors import ExtractFailure
from offline_bundle_installer.lib.archive import extract_all
from offline_bundle_installer.lib.workspace import create_workspace, list_children, remove_workspace, workspace_path

from .conftest import make_zip


class TestWorkspace:
    def test_path_embeds_timestamp(self, tmp_path):
        p = workspace_path("PowerCLI_Install_", base=str(tmp_path), now=datetime(2024, 5, 6, 7, 8, 9))
        assert p == tmp_path / "PowerCLI_Install_20240506_070809"

    def test_create_replaces_existing_directory(self, tmp_path):
        p = tmp_path / "ws"
        p.mkdir()
        (p / "stale.txt").write_text("old", encoding="utf-8")
        create_workspace(p)
        assert p.is_dir()
        assert list(p.iterdir()) == []

    def test_remove_is_best_effort(self, tmp_path):
        assert remove_workspace(None) is True
        assert remove_workspace(tmp_path / "missing") is True
        p = tmp_path / "ws"
        (p / "a" / "b").mkdir(parents=True)
        assert remove_workspace(p) is True
        assert not p.exists()

    def test_list_children_marks_directories(self, tmp_path):
        (tmp_path / "b.txt").write_text("", encoding="utf-8")
        (tmp_path / "A").mkdir()
        assert list_children(tmp_path) == ["A/", "b.txt"]


class TestExtract:
    def test_extracts_all_members(self, tmp_path):
        bundle = make_zip(tmp_path / "b.zip", {"x/VMware.Vim.8.3.0.nupkg": b"pkg", "top.txt": b"t"})
        dest = tmp_path / "out"
        dest.mkdir()
        names = extract_all(str(bundle), dest)
        assert sorted(names) == ["top.txt", "x/VMware.Vim.8.3.0.nupkg"]
        assert (dest / "x" / "VMware.Vim.8.3.0.nupkg").read_bytes() == b"pkg"

    def test_corrupt_archive(self, tmp_path):
        bad = tmp_path / "bad.zip"
        bad.write_bytes(b"this is not a zip archive")
        dest = tmp_path / "out"
        dest.mkdir()
        with pytest.raises(ExtractFailure):
            extract_all(str(bad), dest)

    def test_rejects_entries_outside_destination(self, tmp_path):
        bundle = tmp_path / "evil.zip"
        with zipfile.ZipFile(bundle, "w") as zf:
            zf.writestr("../escape.txt", b"x")
        dest = tmp_path / "out"
        dest.mkdir()
        with pytest.raises(ExtractFailure, match="escapes"):
            extract_all(str(bundle), dest)
        assert not (tmp_path / "escape.txt").exists()
