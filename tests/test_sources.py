"""Tests for content sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from pcb_review.models.errors import ProjectError
from pcb_review.utils.sources import ContentSource, LocalFileSource, MemoryFileSource


class TestLocalFileSource:
    def test_protocol(self):
        assert isinstance(LocalFileSource(), ContentSource)

    def test_list_and_read(self, sample_project_dir: Path):
        source = LocalFileSource()
        assert source.list_files(str(sample_project_dir)) == [
            "sample_project.kicad_pcb", "sample_project.kicad_sch",
        ]
        path = source.join_path(str(sample_project_dir), "sample_project.kicad_pcb")
        assert source.read_file(path).startswith("(kicad_pcb")

    def test_basename(self):
        source = LocalFileSource()
        assert source.get_basename("/a/b/main.kicad_sch", ".kicad_sch") == "main"
        assert source.get_basename("/a/b/main.kicad_sch") == "main.kicad_sch"

    def test_errors(self, tmp_path: Path):
        source = LocalFileSource()
        with pytest.raises(ProjectError):
            source.list_files(str(tmp_path / "missing"))
        with pytest.raises(ProjectError):
            source.read_file(str(tmp_path / "missing.kicad_pcb"))


class TestMemoryFileSource:
    @pytest.fixture
    def source(self) -> MemoryFileSource:
        return MemoryFileSource({
            "proj/b.kicad_sch": "(kicad_sch)",
            "proj/a.kicad_pcb": "(kicad_pcb)",
            "proj/sub/c.kicad_sch": "(kicad_sch)",
            "top.kicad_pcb": "(kicad_pcb)",
        })

    def test_protocol(self, source: MemoryFileSource):
        assert isinstance(source, ContentSource)

    def test_list_direct_children_only(self, source: MemoryFileSource):
        assert source.list_files("proj") == ["a.kicad_pcb", "b.kicad_sch"]
        assert source.list_files("proj/") == ["a.kicad_pcb", "b.kicad_sch"]
        assert source.list_files(".") == ["top.kicad_pcb"]

    def test_read(self, source: MemoryFileSource):
        assert source.read_file(source.join_path("proj", "a.kicad_pcb")) == "(kicad_pcb)"
        assert source.read_file("./proj/sub/c.kicad_sch") == "(kicad_sch)"

    def test_missing_file(self, source: MemoryFileSource):
        with pytest.raises(ProjectError, match="not loaded"):
            source.read_file("proj/zzz.kicad_pcb")

    def test_basename(self, source: MemoryFileSource):
        assert source.get_basename("proj/sub/c.kicad_sch", ".kicad_sch") == "c"
