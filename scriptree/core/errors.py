from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(eq=False)
class ScriptreeError(Exception):
    """Base error for build failures. Carries the offending path."""
    message: str
    path: Optional[Path] = None
    kind: str = "generic_error"

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


@dataclass(eq=False)
class DirectoryAccessError(ScriptreeError):
    """A source folder could not be entered or listed."""
    kind: str = "directory_access"


@dataclass(eq=False)
class PathConflictError(ScriptreeError):
    """A destination path exists but is not a directory."""
    kind: str = "path_conflict"


@dataclass(eq=False)
class ScriptWriteError(ScriptreeError):
    """A generated script could not be written."""
    kind: str = "script_write"


@dataclass(eq=False)
class EmptyQueueError(ScriptreeError):
    """Dequeue was called on an empty traversal queue."""
    kind: str = "empty_queue"
