from __future__ import annotations

import base64
import logging
from pathlib import Path

import pytest

from battlemapper.__main__ import EXIT_OK, EXIT_USAGE, build_parser, main

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture(autouse=True)
def no_web_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BATTLEMAPPER_WEB", raising=False)


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.preset == "town"
        assert args.output == "map.png"
        assert args.seed is None
        assert not args.base64

    def test_short_flags(self) -> None:
        args = build_parser().parse_args(
            ["-p", "city", "-W", "30", "-H", "20", "-r", "5", "-b", "2", "-B", "6"]
        )
        assert args.preset == "city"
        assert (args.width, args.height) == (30, 20)
        assert (args.roads, args.buildings, args.building_size) == (5, 2, 6)

    def test_long_aliases(self) -> None:
        args = build_parser().parse_args(
            [
                "-w",
                "32",
                "--road-count",
                "12",
                "-R",
                "3",
                "--building-count",
                "4",
                "--max-steps",
                "40",
            ]
        )
        assert args.width == 32
        assert (args.roads, args.road_width) == (12, 3)
        assert args.buildings == 4
        assert args.max_steps == 40

    def test_max_steps_defaults_to_unbounded(self) -> None:
        args = build_parser().parse_args([])
        assert args.max_steps is None
        assert args.road_width is None

    def test_seed_parsing(self) -> None:
        assert build_parser().parse_args(["-s", "42"]).seed == 42
        assert build_parser().parse_args(["-s", "forest"]).seed == "forest"


class TestMain:
    def test_writes_png(self, tmp_path: Path) -> None:
        out = tmp_path / "out.png"
        assert main(["-p", "outpost", "-s", "3", "-o", str(out)]) == EXIT_OK
        assert out.read_bytes().startswith(PNG_SIGNATURE)

    def test_base64_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-p", "outpost", "-s", "3", "--base64"]) == EXIT_OK
        text = capsys.readouterr().out.strip()
        assert base64.b64decode(text).startswith(PNG_SIGNATURE)

    def test_step_budget_still_writes_partial_map(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        out = tmp_path / "out.png"
        argv = ["-p", "outpost", "-s", "3", "--max-steps", "3", "-o", str(out)]
        with caplog.at_level(logging.WARNING):
            assert main(argv) == EXIT_OK
        assert out.read_bytes().startswith(PNG_SIGNATURE)
        assert any("Partial map" in r.message for r in caplog.records)

    def test_unknown_preset_exit_code(self, tmp_path: Path) -> None:
        out = tmp_path / "out.png"
        assert main(["-p", "castle", "-o", str(out)]) == EXIT_USAGE
        assert not out.exists()

    def test_overcommitted_exit_code(self, tmp_path: Path) -> None:
        out = tmp_path / "out.png"
        argv = ["-W", "5", "-H", "5", "-b", "50", "-r", "0", "-o", str(out)]
        assert main(argv) == EXIT_USAGE
        assert not out.exists()

    def test_invalid_dimensions_exit_code(self, tmp_path: Path) -> None:
        assert main(["-W", "0", "-o", str(tmp_path / "m.png")]) == EXIT_USAGE

    def test_web_mode(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("BATTLEMAPPER_WEB", "1")
        monkeypatch.setenv("QUERY_STRING", "-p=outpost&s=2")
        assert main([]) == 0
        output = capsys.readouterr().out
        headers, body = output.split("\r\n\r\n", 1)
        assert "Status: 200 OK" in headers
        assert base64.b64decode(body).startswith(PNG_SIGNATURE)
