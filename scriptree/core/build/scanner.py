"""
Folder scanner for the script tree build.

Scans one queued folder at a time:
- Lists immediate entries (no recursion)
- Asks the policy whether to keep each entry
- Queues kept subfolders with their mirrored destination
- Returns a populated folder record

Draining the queue with :meth:`FolderScanner.scan_all` visits the kept
subtree breadth first.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from scriptree.core.build.queue import TraversalQueue
from scriptree.core.errors import DirectoryAccessError
from scriptree.core.models import BuildProgress, BuildStage, FolderRecord, QueueItem
from scriptree.core.policy import BuildPolicy


def list_entries(source: Path) -> list[os.DirEntry]:
    """Return the immediate entries of ``source`` in directory listing order."""
    try:
        with os.scandir(source) as it:
            return list(it)
    except OSError as e:
        raise DirectoryAccessError("Cannot list directory", path=source) from e


def is_folder(entry: os.DirEntry) -> bool:
    """True for a real directory. Symlinks are never treated as folders."""
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError as e:
        raise DirectoryAccessError("Cannot inspect entry", path=Path(entry.path)) from e


class FolderScanner:
    """
    Scans folders taken from a traversal queue.

    Features:
    - Explicit absolute paths, no working directory changes
    - Listing order preserved
    - Optional progress callback
    """

    def __init__(
        self,
        policy: BuildPolicy,
        script_name: str,
        queue: Optional[TraversalQueue] = None,
        verbose: bool = False
    ):
        self.policy = policy
        self.script_name = script_name
        self.queue = queue if queue is not None else TraversalQueue()
        self.verbose = verbose

    def _log(self, message: str) -> None:
        if self.verbose:
            logging.info(f"FolderScanner - {message}")

    def scan(self, source: Path, destination: Path, depth: int = 0) -> FolderRecord:
        """
        Scan one folder.

        Args:
            source: Absolute source folder
            destination: Mirrored destination folder
            depth: Distance from the build root

        Returns:
            FolderRecord with the kept files and child folders
        """
        source = Path(source)
        destination = Path(destination)

        if not source.is_dir():
            raise DirectoryAccessError("Not a directory", path=source)

        entries = list_entries(source)

        folder = FolderRecord(
            source=source,
            destination=destination,
            script_name=self.script_name,
            depth=depth,
        )
        self._log(f"Scanning {source}")

        for entry in entries:
            try:
                keep = self.policy.filter(entry)
            except OSError as e:
                raise DirectoryAccessError("Cannot inspect entry", path=Path(entry.path)) from e
            if not keep:
                continue

            if is_folder(entry):
                child_source = source / entry.name
                child_destination = destination / entry.name
                self.queue.enqueue(child_source, child_destination, depth + 1)
                folder.selected_children.append(child_source)
                self._log(f"Folder {entry.name} selected")
            else:
                folder.selected_files.append(entry)
                self._log(f"File {entry.name} selected")

        return folder

    def scan_item(self, item: QueueItem) -> FolderRecord:
        return self.scan(item.source, item.destination, item.depth)

    def scan_all(
        self,
        progress_callback: Optional[Callable[[BuildProgress], None]] = None
    ) -> list[FolderRecord]:
        """
        Drain the queue, scanning each folder.

        Returns:
            Folder records in breadth-first visitation order
        """
        folders: list[FolderRecord] = []

        while self.queue:
            item = self.queue.dequeue()
            folder = self.scan_item(item)
            folders.append(folder)

            if progress_callback:
                progress_callback(BuildProgress(
                    stage=BuildStage.SCAN_ALL,
                    current_path=str(item.source),
                    folders_done=len(folders),
                    folders_pending=len(self.queue),
                ))

        self._log(f"Scanned {len(folders)} folders")
        return folders
