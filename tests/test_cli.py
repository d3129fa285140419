"""
Tests for the command line entry point
"""
import sys
from pathlib import Path

import pytest

from chatpreview.core import cli


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)


class TestCli:
    """Test the chatpreview command"""

    def test_parser_defaults(self):
        args = cli.create_parser().parse_args([])
        assert args.lines == []
        assert args.viewport == "800x600"
        assert not args.viewer

    def test_renders_transcript(self, tmp_path: Path, monkeypatch, capsys, fake_http, fake_response, png_bytes):
        fake_http.responses["http://imgur.com/download/abc123"] = fake_response(png_bytes((2000, 1000)))
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "chatpreview",
                "--images-path", str(tmp_path / "images"),
                "check http://imgur.com/abc123",
                "plain text",
            ],
        )

        cli.main()

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "check http://imgur.com/abc123"
        assert lines[1].startswith("[image 1200x600 ")
        assert lines[2] == "plain text"

    def test_fixed_size_option(self, tmp_path: Path, monkeypatch, capsys, fake_http, fake_response, png_bytes):
        fake_http.responses["http://example.com/a.png"] = fake_response(png_bytes((300, 100)))
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "chatpreview",
                "--images-path", str(tmp_path / "images"),
                "--no-rescale",
                "--fixed-size", "50",
                "http://example.com/a.png",
            ],
        )

        cli.main()

        assert "[image 50x50 " in capsys.readouterr().out

    def test_bad_viewport_exits(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["chatpreview", "--viewport", "huge", "hello"])
        with pytest.raises(SystemExit) as excinfo:
            cli.main()
        assert excinfo.value.code == 1
        assert "Error:" in capsys.readouterr().err
