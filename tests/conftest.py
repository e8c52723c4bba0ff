"""Shared fixtures and tree helpers.

The ``pytest`` console script can run with a sys.path that excludes the
repository root. Ensure ``import main`` resolves to the local module.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Union

import pytest


PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

from scriptree.core.models import FolderRecord  # noqa: E402
from scriptree.core.policy import render_command  # noqa: E402


# A layout maps names to ``None`` (empty file), ``str`` (file content) or a
# nested layout (folder).
Layout = dict[str, Union[None, str, "Layout"]]


def make_tree(root: Path, layout: Layout) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        path = root / name
        if isinstance(value, dict):
            make_tree(path, value)
        else:
            path.write_text(value or name, encoding="utf-8")
    return root


class NamePolicy:
    """Keeps entries whose names are not in ``skip``; formats a cp command."""

    def __init__(self, skip: tuple[str, ...] = (), prefix: Optional[str] = None):
        self.skip = set(skip)
        self.prefix = prefix
        self.seen: list[str] = []

    def keeps(self, name: str) -> bool:
        if name in self.skip:
            return False
        if self.prefix is not None and name.startswith(self.prefix):
            return False
        return True

    def filter(self, entry: os.DirEntry) -> bool:
        self.seen.append(entry.name)
        return self.keeps(entry.name)

    def format(self, entry: os.DirEntry, folder: FolderRecord) -> str:
        return render_command('cp "{name}" "{destination}"', entry, folder)


@pytest.fixture
def root(tmp_path: Path) -> Path:
    path = tmp_path / "library"
    path.mkdir()
    return path.resolve()


@pytest.fixture
def simple_tree(root: Path) -> Path:
    return make_tree(root, {"a.txt": None, "sub": {"b.txt": None}})
