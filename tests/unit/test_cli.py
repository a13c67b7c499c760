"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from main import main, parse_args


def _config(tmp_path: Path) -> str:
    path = tmp_path / "settings.yaml"
    path.write_text(f"database:\n  path: {tmp_path / 'cli.db'}\n")
    return str(path)


class TestParseArgs:
    def test_search_defaults(self) -> None:
        args = parse_args(["search", "backend engineer"])
        assert args.command == "search"
        assert args.platform == "all"
        assert args.location == "all"
        assert args.time_filter == "all"
        assert not args.stream

    def test_recommend_requires_user(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["recommend"])


class TestSearchCommand:
    def test_blank_query_exits_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["search", "   ", "--config", _config(tmp_path)])
        assert exc.value.code == 1
        assert "query must not be empty" in capsys.readouterr().err

    def test_blank_streamed_query_exits_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["search", "   ", "--stream", "--config", _config(tmp_path)])
        assert exc.value.code == 1
        assert "query must not be empty" in capsys.readouterr().err

    def test_missing_config_exits_1(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["search", "engineer", "--config", str(tmp_path / "nope.yaml")])
        assert exc.value.code == 1
