"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pcb_review.__main__ import build_parser, main


class TestParser:
    def test_flags(self):
        args = build_parser().parse_args(["proj", "-o", "out", "-r", "-q", "-s", "--log-level", "DEBUG"])
        assert args.project_dir == "proj"
        assert args.output == "out"
        assert args.raw and args.quiet and args.summary
        assert args.log_level == "DEBUG"
        assert not args.serve

    def test_project_dir_required_without_serve(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2
        assert "project_dir is required" in capsys.readouterr().err


class TestRunAnalysis:
    def test_writes_files(self, sample_project_dir: Path, tmp_path: Path, capsys):
        out = tmp_path / "out"
        assert main([str(sample_project_dir), "-o", str(out), "--log-level", "ERROR"]) == 0
        assert sorted(p.name for p in out.iterdir()) == [
            "components.json", "dfm.json", "power.json", "signals.json", "summary.json",
        ]
        printed = capsys.readouterr().out
        assert "Analyzing KiCad project" in printed
        assert "  - summary.json" in printed

    def test_raw_and_summary(self, sample_project_dir: Path, tmp_path: Path, capsys):
        out = tmp_path / "out"
        assert main([str(sample_project_dir), "-o", str(out), "-r", "-s", "--log-level", "ERROR"]) == 0
        assert "PCB ANALYSIS SUMMARY" in capsys.readouterr().out
        summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
        assert summary["overview"]["totalComponents"] == 7

    def test_quiet(self, sample_project_dir: Path, tmp_path: Path, capsys):
        assert main([str(sample_project_dir), "-o", str(tmp_path / "out"), "-q", "-s",
                     "--log-level", "ERROR"]) == 0
        assert capsys.readouterr().out == ""

    def test_missing_pcb_exits_nonzero(self, tmp_path: Path, capsys):
        out = tmp_path / "out"
        assert main([str(tmp_path), "-o", str(out), "--log-level", "ERROR"]) == 1
        assert "Error analyzing project" in capsys.readouterr().err
        assert not out.exists()


class TestServe:
    @pytest.fixture
    def run_calls(self, monkeypatch) -> list[dict]:
        from fastmcp import FastMCP

        calls: list[dict] = []
        monkeypatch.setattr(FastMCP, "run", lambda self, **kwargs: calls.append(kwargs))
        return calls

    def test_sse_uses_configured_host_and_port(self, run_calls: list[dict], monkeypatch):
        monkeypatch.setenv("PCB_REVIEW_SSE_PORT", "9000")
        monkeypatch.setenv("PCB_REVIEW_SSE_HOST", "0.0.0.0")
        assert main(["--serve", "--transport", "sse", "--log-level", "ERROR"]) == 0
        assert run_calls == [{"transport": "sse", "host": "0.0.0.0", "port": 9000}]

    def test_stdio_passes_no_address(self, run_calls: list[dict]):
        assert main(["--serve", "--transport", "stdio", "--log-level", "ERROR"]) == 0
        assert run_calls == [{"transport": "stdio"}]

    def test_sse_flags_override_environment(self, run_calls: list[dict], monkeypatch):
        monkeypatch.setenv("PCB_REVIEW_SSE_PORT", "9000")
        assert main(["--serve", "--transport", "sse", "--sse-host", "localhost", "--sse-port", "9100",
                     "--log-level", "ERROR"]) == 0
        assert run_calls == [{"transport": "sse", "host": "localhost", "port": 9100}]
