"""
Script generation for scanned folders.

Each folder's script formats its selected files through the policy and then
runs every selected child's script:

    cd "<child>"
    ./<script>
    cd ..

Scripts only reference immediate children, so the root script transitively
runs the whole tree.
"""

from __future__ import annotations

import logging
from typing import Iterable

from scriptree.core.models import FolderRecord, GeneratedScript
from scriptree.core.policy import BuildPolicy


class ScriptGenerator:
    """Generates script text for folder records."""

    def __init__(self, policy: BuildPolicy, verbose: bool = False):
        self.policy = policy
        self.verbose = verbose

    def build_script(self, folder: FolderRecord) -> GeneratedScript:
        """Build the structured script for one folder without rendering it."""
        return GeneratedScript(
            script_name=folder.script_name,
            commands=[self.policy.format(entry, folder) for entry in folder.selected_files],
            children=list(folder.selected_children),
        )

    def generate(self, folder: FolderRecord) -> str:
        """Set ``folder.script`` and ``folder.generated_text``; return the text."""
        script = self.build_script(folder)

        format_child = getattr(self.policy, "format_child", None)
        if format_child is not None:
            text = script.render(lambda child: format_child(child, folder))
        else:
            text = script.render()

        folder.script = script
        folder.generated_text = text

        if self.verbose:
            logging.info(f"ScriptGenerator - Generated {folder.script_path}\n{text}")
        return text

    def generate_all(self, folders: Iterable[FolderRecord]) -> None:
        for folder in folders:
            self.generate(folder)


def generate(folder: FolderRecord, policy: BuildPolicy) -> str:
    """Generate one folder's script with ``policy``."""
    return ScriptGenerator(policy).generate(folder)
