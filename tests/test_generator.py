from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from conftest import NamePolicy
from scriptree.core.build.generator import ScriptGenerator, generate
from scriptree.core.models import FolderRecord
from scriptree.core.policy import PatternPolicy


def _entry(folder: Path, name: str) -> SimpleNamespace:
    return SimpleNamespace(name=name, path=str(folder / name), is_dir=lambda: False)


def _record(files: list[str] = (), children: list[str] = ()) -> FolderRecord:
    source = Path("/src/library")
    return FolderRecord(
        source=source,
        destination=Path("/out/library"),
        script_name="run",
        selected_files=[_entry(source, name) for name in files],
        selected_children=[source / name for name in children],
    )


@pytest.mark.unit
def test_files_then_child_blocks() -> None:
    folder = _record(files=["a.txt", "b.txt"], children=["sub", "other"])

    text = generate(folder, NamePolicy())

    assert text == (
        'cp "a.txt" "/out/library"\n'
        'cp "b.txt" "/out/library"\n'
        'cd "/src/library/sub"\n./run\ncd ..\n'
        'cd "/src/library/other"\n./run\ncd ..\n'
    )
    assert folder.generated_text == text
    assert folder.script.commands == ['cp "a.txt" "/out/library"\n', 'cp "b.txt" "/out/library"\n']
    assert folder.script.children == [Path("/src/library/sub"), Path("/src/library/other")]


@pytest.mark.unit
def test_empty_folder_generates_empty_script() -> None:
    folder = _record()

    assert generate(folder, NamePolicy()) == ""
    assert folder.is_generated
    assert folder.script.is_empty


@pytest.mark.unit
def test_generation_is_idempotent() -> None:
    folder = _record(files=["a.txt"], children=["sub"])
    generator = ScriptGenerator(NamePolicy())

    first = generator.generate(folder)
    second = generator.generate(folder)

    assert first == second == folder.generated_text


@pytest.mark.unit
def test_policy_child_template_overrides_recursion_block() -> None:
    folder = _record(children=["sub"])
    policy = PatternPolicy(child_template='pushd "{child}" && call {script} && popd')

    text = generate(folder, policy)

    assert text == 'pushd "/src/library/sub" && call run && popd\n'


@pytest.mark.unit
def test_format_receives_folder_record() -> None:
    seen = []

    class RecordingPolicy(NamePolicy):
        def format(self, entry, folder):
            seen.append((entry.name, folder.destination))
            return f"touch {entry.name}\n"

    folder = _record(files=["a.txt"])
    ScriptGenerator(RecordingPolicy()).generate_all([folder])

    assert seen == [("a.txt", Path("/out/library"))]
    assert folder.generated_text == "touch a.txt\n"
