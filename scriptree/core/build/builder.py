"""
Build orchestration.

Runs the pipeline in fixed order:
- Validate the input root
- Create the output root (write mode only)
- Scan every kept folder breadth first
- Generate every folder's script
- Create the destination root and write scripts (write mode only)

Scanning and generation never touch the filesystem beyond listing, so a
build with ``write=False`` is a dry run returning the records in memory.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from scriptree.core.build.generator import ScriptGenerator
from scriptree.core.build.queue import TraversalQueue
from scriptree.core.build.scanner import FolderScanner
from scriptree.core.build.writer import ScriptWriter, make_dir
from scriptree.core.errors import DirectoryAccessError
from scriptree.core.models import BuildProgress, BuildResult, BuildStage, FolderRecord
from scriptree.core.policy import BuildPolicy


DEFAULT_SCRIPT_NAME = "run"
DEFAULT_OUTPUT_ROOT = "gen"


@dataclass
class BuildOptions:
    """Options for a build run."""
    output_root: str | Path = DEFAULT_OUTPUT_ROOT
    script_name: str = DEFAULT_SCRIPT_NAME
    write: bool = False
    verbose: bool = False


def resolve_output_root(input_root: Path, output_root: Path | str) -> Path:
    """Resolve ``output_root`` against ``input_root`` when it is relative."""
    output_root = Path(output_root)
    if not output_root.is_absolute():
        output_root = input_root / output_root
    return output_root


class Builder:
    """
    Builds per-folder scripts for a source tree.

    ``last_stage`` records how far the most recent run got; it ends at
    ``DONE`` or ``FAILED``.
    """

    def __init__(self, policy: BuildPolicy, options: Optional[BuildOptions] = None):
        self.policy = policy
        self.options = options or BuildOptions()
        self.last_stage = BuildStage.PENDING
        self._queue = TraversalQueue()

    @property
    def pending(self) -> int:
        """Folders still queued. Zero outside of a running scan."""
        return len(self._queue)

    def _log(self, message: str) -> None:
        if self.options.verbose:
            logging.info(f"Builder - {message}")

    def _enter(self, stage: BuildStage) -> None:
        self.last_stage = stage
        self._log(f"Stage {stage.name}")

    def run(
        self,
        input_root: Path | str,
        progress_callback: Optional[Callable[[BuildProgress], None]] = None
    ) -> BuildResult:
        """
        Run a build.

        Args:
            input_root: Existing source directory
            progress_callback: Called once per scanned and per written folder

        Returns:
            BuildResult with folder records in breadth-first order
        """
        start_time = time.time()
        options = self.options
        self.last_stage = BuildStage.PENDING
        self._log(
            f"Build(in: {input_root}, write: {options.write}, verbose: {options.verbose})"
        )

        try:
            with self._queue as queue:
                self._enter(BuildStage.ENTER_ROOT)
                root = Path(input_root).resolve()
                if not root.is_dir():
                    raise DirectoryAccessError("Input root is not a directory", path=root)

                output_root = resolve_output_root(root, options.output_root)

                if options.write:
                    self._enter(BuildStage.ENSURE_OUTPUT_ROOT)
                    make_dir(output_root)

                destination_root = output_root / root.name

                self._enter(BuildStage.SCAN_ALL)
                queue.enqueue(root, destination_root)
                scanner = FolderScanner(
                    self.policy, options.script_name, queue=queue, verbose=options.verbose
                )
                folders = scanner.scan_all(progress_callback)

                self._enter(BuildStage.GENERATE_ALL)
                ScriptGenerator(self.policy, verbose=options.verbose).generate_all(folders)

                if options.write:
                    self._enter(BuildStage.ENSURE_DESTINATION_ROOT)
                    make_dir(destination_root)

                    self._enter(BuildStage.WRITE_ALL)
                    ScriptWriter(verbose=options.verbose).write_all(folders, progress_callback)

        except Exception as e:
            failed_in = self.last_stage
            self.last_stage = BuildStage.FAILED
            if options.verbose:
                logging.error(f"Builder - Build failed during {failed_in.name}: {e}")
            raise

        self._enter(BuildStage.DONE)
        result = BuildResult(
            input_root=root,
            output_root=output_root,
            destination_root=destination_root,
            folders=folders,
            written=options.write,
            duration=time.time() - start_time,
        )
        self._log(result.summary)
        return result


def build(
    input_root: Path | str,
    output_root: Path | str,
    script_name: str,
    policy: BuildPolicy,
    write: bool = False,
    verbose: bool = False,
    progress_callback: Optional[Callable[[BuildProgress], None]] = None
) -> list[FolderRecord]:
    """
    Scan ``input_root``, generate a script per kept folder and optionally
    write them.

    Args:
        input_root: Existing source directory
        output_root: Output base; relative paths resolve against ``input_root``
        script_name: File name of every generated script
        policy: Filter/format policy
        write: Write scripts and create destination folders
        verbose: Log progress messages

    Returns:
        Folder records in breadth-first order
    """
    options = BuildOptions(
        output_root=output_root,
        script_name=script_name,
        write=write,
        verbose=verbose,
    )
    return Builder(policy, options).run(input_root, progress_callback).folders
