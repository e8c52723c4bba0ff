"""
Sample media-library tree for exercising builds.

Layout under the root:
- movies/Movie NN/ with one video file each
- tv/Series NN/Season NN/ with one episode per video extension
- music/Artist NN/Album NN/ with numbered tracks
"""

from __future__ import annotations

import logging
import shutil
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from scriptree.core.build.writer import make_dir


VIDEO_EXTENSIONS = ['.avi', '.mp4', '.mkv', '.mpeg', '.mpg', '.wmv']
AUDIO_EXTENSIONS = ['.mp3', '.flac', '.wav']


@dataclass
class SampleFolder:
    """A folder of the sample tree with its files and subfolders."""
    path: Path
    files: list[str] = field(default_factory=list)
    children: list['SampleFolder'] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.name

    def add_child(self, name: str) -> 'SampleFolder':
        child = SampleFolder(self.path / name)
        self.children.append(child)
        return child

    def iter_folders(self) -> Iterator['SampleFolder']:
        """Iterate over this folder and all descendants, breadth first."""
        pending = deque([self])
        while pending:
            folder = pending.popleft()
            yield folder
            pending.extend(folder.children)

    def folder_count(self) -> int:
        return sum(1 for _ in self.iter_folders())

    def file_count(self) -> int:
        return sum(len(folder.files) for folder in self.iter_folders())

    def display(self) -> str:
        """Indented listing of the tree."""
        lines = []

        def walk(folder: SampleFolder, indent: int) -> None:
            pad = "    " * indent
            lines.append(f"{pad}{folder.name}/")
            for name in folder.files:
                lines.append(f"{pad}    {name}")
            for child in folder.children:
                walk(child, indent + 1)

        walk(self, 0)
        return "\n".join(lines)

    def create(self) -> None:
        """Create the folders and files on disk. Each file contains its own name."""
        for folder in self.iter_folders():
            make_dir(folder.path)
            for name in folder.files:
                (folder.path / name).write_text(name, encoding='utf-8')
        logging.debug(f"SampleFolder - Created sample tree at {self.path}")

    def destroy(self) -> None:
        """Remove the tree from disk."""
        if self.path.exists():
            shutil.rmtree(self.path)


def _build_movies(root: SampleFolder) -> None:
    movies = root.add_child("movies")
    for i, ext in enumerate(VIDEO_EXTENSIONS, start=1):
        name = f"Movie {i:02d}"
        movies.add_child(name).files.append(name + ext)


def _build_tv(root: SampleFolder) -> None:
    tv = root.add_child("tv")
    count = len(VIDEO_EXTENSIONS)
    for i in range(1, count + 1):
        series_name = f"Series {i:02d}"
        series = tv.add_child(series_name)
        for j, ext in enumerate(VIDEO_EXTENSIONS, start=1):
            season = series.add_child(f"Season {j:02d}")
            season.files.extend(
                f"{series_name}.s{j:02d}e{k:02d}{ext}" for k in range(1, count + 1)
            )


def _build_music(root: SampleFolder) -> None:
    music = root.add_child("music")
    count = len(AUDIO_EXTENSIONS)
    for i in range(1, count + 1):
        artist = music.add_child(f"Artist {i:02d}")
        for j, ext in enumerate(AUDIO_EXTENSIONS, start=1):
            album = artist.add_child(f"Album {j:02d}")
            album.files.extend(
                f"{k:02d} - Title {k}{ext}" for k in range(1, count + 1)
            )


def generate_sample_tree(root: Path | str) -> SampleFolder:
    """Describe the sample tree under ``root`` without touching the disk."""
    tree = SampleFolder(Path(root).absolute())
    _build_movies(tree)
    _build_tv(tree)
    _build_music(tree)
    return tree
