"""
Generate per-folder command scripts for a directory tree.

Every kept folder gets a script that acts on its kept files and runs the
scripts of its kept subfolders, so the root script covers the whole tree.
"""

from scriptree.core.build import Builder, BuildOptions, build
from scriptree.core.errors import (
    DirectoryAccessError,
    EmptyQueueError,
    PathConflictError,
    ScriptreeError,
    ScriptWriteError,
)
from scriptree.core.models import BuildResult, FolderRecord
from scriptree.core.policy import BuildPolicy, CopyPolicy, PatternPolicy

__version__ = "1.0.0"

__all__ = [
    'build',
    'Builder',
    'BuildOptions',
    'BuildResult',
    'FolderRecord',
    'BuildPolicy',
    'CopyPolicy',
    'PatternPolicy',
    'ScriptreeError',
    'DirectoryAccessError',
    'PathConflictError',
    'ScriptWriteError',
    'EmptyQueueError',
]
