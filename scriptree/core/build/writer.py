"""
Writes generated scripts and creates the mirrored destination tree.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Optional

from scriptree.core.errors import DirectoryAccessError, PathConflictError, ScriptWriteError
from scriptree.core.models import BuildProgress, BuildStage, FolderRecord


SCRIPT_MODE = 0o755


def make_dir(path: Path) -> Path:
    """Create ``path`` if missing; fail if it exists as something else."""
    path = Path(path)
    if path.exists():
        if not path.is_dir():
            raise PathConflictError("Path exists but is not a directory", path=path)
        return path

    try:
        path.mkdir(parents=True, exist_ok=True)
    except FileExistsError as e:
        raise PathConflictError("Path exists but is not a directory", path=path) from e
    except OSError as e:
        raise DirectoryAccessError("Cannot create directory", path=path) from e
    return path


class ScriptWriter:
    """
    Persists folder records.

    For each record the script is written into the source folder (replacing
    any previous script) and the destination folder is created. The first
    failure stops the run; files already written stay on disk.
    """

    def __init__(self, verbose: bool = False, mode: int = SCRIPT_MODE):
        self.verbose = verbose
        self.mode = mode

    def _log(self, message: str) -> None:
        if self.verbose:
            logging.info(f"ScriptWriter - {message}")

    def write_script(self, folder: FolderRecord) -> Path:
        script_path = folder.script_path
        self._log(f"Writing script {script_path}")
        try:
            with open(script_path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(folder.generated_text)
            os.chmod(script_path, self.mode)
        except OSError as e:
            raise ScriptWriteError("Cannot write script", path=script_path) from e
        return script_path

    def write(self, folder: FolderRecord) -> None:
        """Write one folder's script and ensure its destination exists."""
        self.write_script(folder)
        self._log(f"Ensuring destination {folder.destination}")
        make_dir(folder.destination)

    def write_all(
        self,
        folders: Iterable[FolderRecord],
        progress_callback: Optional[Callable[[BuildProgress], None]] = None
    ) -> int:
        """
        Write every folder in order.

        Returns:
            Number of folders written
        """
        folders = list(folders)
        written = 0
        for folder in folders:
            self.write(folder)
            written += 1

            if progress_callback:
                progress_callback(BuildProgress(
                    stage=BuildStage.WRITE_ALL,
                    current_path=str(folder.source),
                    folders_done=written,
                    folders_pending=len(folders) - written,
                ))
        return written
