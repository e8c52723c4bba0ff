"""
Script tree build pipeline.

Provides functionality for:
- Breadth-first folder traversal
- Policy-driven file and folder selection
- Per-folder script generation
- Writing scripts and mirroring the destination tree
"""

from scriptree.core.build.queue import TraversalQueue
from scriptree.core.build.scanner import FolderScanner
from scriptree.core.build.generator import ScriptGenerator, generate
from scriptree.core.build.writer import ScriptWriter, make_dir
from scriptree.core.build.builder import (
    Builder,
    BuildOptions,
    build,
)

__all__ = [
    # Traversal
    'TraversalQueue',
    'FolderScanner',
    # Generation
    'ScriptGenerator',
    'generate',
    # Writing
    'ScriptWriter',
    'make_dir',
    # Orchestration
    'Builder',
    'BuildOptions',
    'build',
]
