"""
Core data models for the script tree builder.

This module defines the data structures shared by the build pipeline:
- Queue items produced while walking the source tree
- Folder records accumulated during the scan phase
- Structured scripts produced by the generation phase
- Build progress and result models

All models are plain dataclasses and hold no filesystem handles other than
the ``os.DirEntry`` descriptors kept for selected files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Iterator, Optional


# =============================================================================
# Enumerations
# =============================================================================

class BuildStage(Enum):
    """Stage of a build run. Stages only ever move forward."""
    PENDING = auto()
    ENTER_ROOT = auto()
    ENSURE_OUTPUT_ROOT = auto()
    SCAN_ALL = auto()
    GENERATE_ALL = auto()
    ENSURE_DESTINATION_ROOT = auto()
    WRITE_ALL = auto()
    DONE = auto()
    FAILED = auto()


# =============================================================================
# Traversal Models
# =============================================================================

@dataclass(frozen=True)
class QueueItem:
    """A folder waiting to be scanned, paired with its mirrored destination."""
    source: Path
    destination: Path
    depth: int = 0


# =============================================================================
# Script Models
# =============================================================================

DEFAULT_CHILD_TEMPLATE = 'cd "{child}"\n./{script}\ncd ..\n'


@dataclass
class GeneratedScript:
    """
    Structured form of one folder's script.

    ``commands`` holds the policy-formatted text for each selected file and
    ``children`` the child folders whose own scripts are invoked afterwards.
    Text is produced by :meth:`render`.
    """
    script_name: str
    commands: list[str] = field(default_factory=list)
    children: list[Path] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.commands and not self.children

    def render(self, child_renderer: Optional[Callable[[Path], str]] = None) -> str:
        """
        Render the script as text.

        Args:
            child_renderer: Optional callable ``(child) -> str`` producing the
                recursion block for one child. Defaults to the POSIX shell
                ``cd``/run/``cd ..`` block.
        """
        parts = list(self.commands)
        for child in self.children:
            if child_renderer is not None:
                parts.append(child_renderer(child))
            else:
                parts.append(DEFAULT_CHILD_TEMPLATE.format(
                    child=child, script=self.script_name
                ))
        return "".join(parts)


# =============================================================================
# Folder Models
# =============================================================================

@dataclass
class FolderRecord:
    """
    Scan result for one visited source folder.

    Created by the scanner, completed once by the generator, and read by the
    writer.
    """
    source: Path
    destination: Path
    script_name: str
    depth: int = 0
    generated_text: str = ""
    selected_files: list[os.DirEntry] = field(default_factory=list)
    selected_children: list[Path] = field(default_factory=list)
    script: Optional[GeneratedScript] = None

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def script_path(self) -> Path:
        """Location the script is written to."""
        return self.source / self.script_name

    @property
    def is_generated(self) -> bool:
        return self.script is not None

    @property
    def file_names(self) -> list[str]:
        return [entry.name for entry in self.selected_files]

    @property
    def child_names(self) -> list[str]:
        return [child.name for child in self.selected_children]


@dataclass
class BuildProgress:
    """Progress information for a build run."""
    stage: BuildStage
    current_path: str
    folders_done: int
    folders_pending: int = 0


@dataclass
class BuildResult:
    """Complete result of a build run."""
    input_root: Path
    output_root: Path
    destination_root: Path
    folders: list[FolderRecord]
    written: bool = False
    duration: float = 0.0

    @property
    def folder_count(self) -> int:
        return len(self.folders)

    @property
    def file_count(self) -> int:
        return sum(len(folder.selected_files) for folder in self.folders)

    @property
    def summary(self) -> str:
        """Get a summary string."""
        action = "Wrote" if self.written else "Generated"
        return (f"{action} {self.folder_count} scripts covering "
                f"{self.file_count} files in {self.duration:.2f}s")

    def iter_depth(self, depth: int) -> Iterator[FolderRecord]:
        """Iterate over folders at the given depth."""
        for folder in self.folders:
            if folder.depth == depth:
                yield folder

    def get_folder(self, source: Path | str) -> Optional[FolderRecord]:
        """Get the record for a source path."""
        source = Path(source)
        for folder in self.folders:
            if folder.source == source:
                return folder
        return None
