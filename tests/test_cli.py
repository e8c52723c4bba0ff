from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

import main
from conftest import make_tree


@pytest.fixture(autouse=True)
def restore_logging():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_parse_arguments_defaults() -> None:
    args = main.parse_arguments(["media"])

    assert args.input_root == "media"
    assert args.output_root is None
    assert args.write is False
    assert args.log_level == "WARNING"


def test_parse_arguments_flags() -> None:
    args = main.parse_arguments([
        "media", "-o", "/backup", "-s", "go.sh", "-w", "-v",
        "-i", "*.mkv", "-i", "*.avi", "-x", "tmp/", "--hidden",
        "-t", 'mv "{name}" "{destination}"',
    ])

    assert args.output_root == "/backup"
    assert args.script_name == "go.sh"
    assert args.write and args.verbose
    assert args.include_patterns == ["*.mkv", "*.avi"]
    assert args.exclude_patterns == ["tmp/"]
    assert args.include_hidden
    assert args.command_template == 'mv "{name}" "{destination}"'
    assert args.log_level == "INFO"


def test_write_and_dry_run_are_exclusive() -> None:
    assert main.main(["media", "-w", "-n"]) == main.EXIT_USAGE


def test_dry_run_prints_scripts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = make_tree(tmp_path / "library", {"a.txt": None, "sub": {"b.txt": None}})
    config = tmp_path / "settings.json"

    assert main.main([str(source), "-n", "-c", str(config)]) == main.EXIT_OK

    out = capsys.readouterr().out
    assert f"# {source.resolve() / 'run'}" in out
    assert 'cp "a.txt"' in out
    assert "Generated 2 scripts covering 2 files" in out
    assert not (source / "run").exists()
    assert json.loads(config.read_text())["recent_roots"] == [str(source.resolve())]


def test_write_excludes_output_and_scripts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = make_tree(tmp_path / "library", {"a.txt": None, "sub": {"b.txt": None}})
    config = tmp_path / "settings.json"
    argv = [str(source), "-w", "-c", str(config)]

    assert main.main(argv) == main.EXIT_OK
    assert main.main(argv) == main.EXIT_OK

    assert (source / "gen" / "library" / "sub").is_dir()
    assert not (source / "gen" / "library" / "gen").exists()
    script = (source / "run").read_text()
    assert f'cd "{source.resolve() / "gen"}"' not in script
    assert 'cp "run"' not in script
    assert "Wrote 2 scripts" in capsys.readouterr().out


def test_include_filter_and_template(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = make_tree(tmp_path / "library", {"a.mkv": None, "b.txt": None})
    config = tmp_path / "settings.json"

    main.main([str(source), "-n", "-c", str(config), "-i", "*.mkv", "-t", "play {name}"])

    out = capsys.readouterr().out
    assert "play a.mkv\n" in out
    assert "b.txt" not in out


def test_missing_root_returns_failure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main.main([str(tmp_path / "missing"), "-c", str(tmp_path / "settings.json")])

    assert code == main.EXIT_BUILD_FAILED
    assert "Input root is not a directory" in capsys.readouterr().err


def test_sample_tree_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "media"

    assert main.main([str(target), "--sample-tree", "-c", str(tmp_path / "settings.json")]) == main.EXIT_OK

    assert (target / "tv" / "Series 01" / "Season 01").is_dir()
    assert "Generated 64 scripts covering 249 files" in capsys.readouterr().out


def test_sample_tree_over_file_returns_failure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "media"
    target.write_text("not a folder")

    code = main.main([str(target), "--sample-tree", "-c", str(tmp_path / "settings.json")])

    assert code == main.EXIT_BUILD_FAILED
    assert str(target) in capsys.readouterr().err


def test_gitignore_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = make_tree(tmp_path / "media", {"a.mkv": None, "b.log": None, "cache": {"c.mkv": None}})
    (source / ".gitignore").write_text("*.log\ncache/\n")

    assert main.main([str(source), "-n", "--gitignore", "-c", str(tmp_path / "settings.json")]) == main.EXIT_OK

    out = capsys.readouterr().out
    assert 'cp "a.mkv"' in out
    assert "b.log" not in out
    assert "Generated 1 scripts covering 1 files" in out
