"""
Filter and format policies consumed by the build pipeline.

A policy is any object with two methods:
- ``filter(entry) -> bool`` decides whether a directory entry is kept
- ``format(entry, folder) -> str`` renders the command text for a kept file

It may also provide ``format_child(child, folder) -> str`` to render the
block that runs a child folder's script; the POSIX shell block is used
otherwise.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from pathlib import Path
from typing import Iterable, Optional, Protocol, runtime_checkable

from scriptree.core.models import DEFAULT_CHILD_TEMPLATE, FolderRecord


DEFAULT_COMMAND_TEMPLATE = 'cp "{name}" "{destination}"'

DEFAULT_EXCLUDE_PATTERNS = [
    '.git/', '.svn/', '.hg/', '.bzr/',
    '__pycache__/', '*.pyc', '*.pyo',
    '.DS_Store', 'Thumbs.db', 'desktop.ini',
    '*.swp', '*~',
]


@runtime_checkable
class BuildPolicy(Protocol):
    """Capability set the scanner and generator depend on."""

    def filter(self, entry: os.DirEntry) -> bool:
        ...

    def format(self, entry: os.DirEntry, folder: FolderRecord) -> str:
        ...


def render_command(template: str, entry: os.DirEntry, folder: FolderRecord) -> str:
    """Fill a command template for one file and terminate it with a newline."""
    path = Path(entry.path)
    command = template.format(
        name=entry.name,
        path=path,
        stem=path.stem,
        suffix=path.suffix,
        source=folder.source,
        destination=folder.destination,
    )
    if not command.endswith("\n"):
        command += "\n"
    return command


class CopyPolicy:
    """
    Keep everything except a fixed set of names; copy each file to the
    folder's destination.
    """

    def __init__(
        self,
        exclude_names: Iterable[str] = (),
        command_template: str = DEFAULT_COMMAND_TEMPLATE
    ):
        self.exclude_names = frozenset(exclude_names)
        self.command_template = command_template

    def filter(self, entry: os.DirEntry) -> bool:
        return entry.name not in self.exclude_names

    def format(self, entry: os.DirEntry, folder: FolderRecord) -> str:
        return render_command(self.command_template, entry, folder)


class PatternMatcher:
    """
    Gitignore-style matcher over slash-separated relative paths.

    Supports ``*``, ``**``, ``?``, ``[...]`` classes, ``!`` negation, a
    leading ``/`` to anchor at the root and a trailing ``/`` for
    directory-only patterns. ``matches`` returns True when the path is
    excluded.
    """

    def __init__(self, patterns: Iterable[str]):
        self._rules: list[tuple[re.Pattern, bool, bool]] = []  # (regex, negated, dir_only)
        for pattern in patterns:
            rule = self._compile(pattern)
            if rule is not None:
                self._rules.append(rule)

    def __bool__(self) -> bool:
        return bool(self._rules)

    @classmethod
    def _compile(cls, pattern: str) -> Optional[tuple[re.Pattern, bool, bool]]:
        pattern = pattern.strip()
        if not pattern or pattern.startswith('#'):
            return None

        negated = pattern.startswith('!')
        if negated:
            pattern = pattern[1:]

        dir_only = pattern.endswith('/')
        pattern = pattern.rstrip('/')

        anchored = pattern.startswith('/') or '/' in pattern
        pattern = pattern.lstrip('/')

        body = cls._translate(pattern)
        prefix = '^' if anchored else '(?:^|.*/)'
        return re.compile(f"{prefix}{body}$"), negated, dir_only

    @staticmethod
    def _translate(pattern: str) -> str:
        out = []
        i = 0
        while i < len(pattern):
            c = pattern[i]
            if pattern.startswith('**/', i):
                out.append('(?:.*/)?')
                i += 3
                continue
            if pattern.startswith('**', i):
                out.append('.*')
                i += 2
                continue
            if c == '*':
                out.append('[^/]*')
            elif c == '?':
                out.append('[^/]')
            elif c == '[':
                end = pattern.find(']', i + 1)
                if end == -1:
                    out.append(re.escape(c))
                else:
                    body = pattern[i + 1:end]
                    if body.startswith('!'):
                        body = '^' + body[1:]
                    out.append(f"[{body}]")
                    i = end
            else:
                out.append(re.escape(c))
            i += 1
        return ''.join(out)

    def matches(self, rel_path: str, is_dir: bool = False) -> bool:
        """Check whether ``rel_path`` is excluded. The last matching rule wins."""
        rel_path = rel_path.replace(os.sep, '/').strip('/')
        excluded = False
        for regex, negated, dir_only in self._rules:
            if dir_only and not is_dir:
                continue
            if regex.match(rel_path):
                excluded = not negated
        return excluded

    @classmethod
    def from_gitignore(cls, gitignore_path: Path) -> 'PatternMatcher':
        """Create a matcher from a .gitignore file."""
        patterns: list[str] = []
        if gitignore_path.exists():
            try:
                with open(gitignore_path, 'r', encoding='utf-8', errors='ignore') as f:
                    patterns = [line.rstrip('\n') for line in f]
            except OSError as e:
                logging.warning(f"PatternMatcher - Could not read gitignore {gitignore_path}: {e}")
        return cls(patterns)


class PatternPolicy:
    """
    Pattern-driven policy.

    Exclusion uses gitignore-style patterns against the entry's path relative
    to ``root`` (or its bare name when no root is given). Include patterns are
    ``fnmatch`` globs on file names and never hide folders, so traversal can
    still reach matching files further down. With ``use_gitignore`` the
    ``.gitignore`` at ``root`` adds its rules to the exclusions.
    """

    def __init__(
        self,
        include_patterns: Iterable[str] = (),
        exclude_patterns: Iterable[str] = tuple(DEFAULT_EXCLUDE_PATTERNS),
        include_hidden: bool = False,
        command_template: str = DEFAULT_COMMAND_TEMPLATE,
        child_template: Optional[str] = None,
        root: Optional[Path | str] = None,
        use_gitignore: bool = False
    ):
        self.include_patterns = list(include_patterns)
        self.exclude_patterns = list(exclude_patterns)
        self.include_hidden = include_hidden
        self.command_template = command_template
        self.child_template = child_template
        self.root = Path(root).resolve() if root is not None else None
        self._matcher = PatternMatcher(self.exclude_patterns)
        self.use_gitignore = use_gitignore
        self._gitignore: Optional[PatternMatcher] = None
        if use_gitignore and self.root is not None:
            self._gitignore = PatternMatcher.from_gitignore(self.root / '.gitignore')

    def _relative(self, entry: os.DirEntry) -> str:
        if self.root is None:
            return entry.name
        try:
            return Path(entry.path).relative_to(self.root).as_posix()
        except ValueError:
            return entry.name

    def filter(self, entry: os.DirEntry) -> bool:
        name = entry.name
        if not self.include_hidden and name.startswith('.'):
            return False

        is_dir = entry.is_dir(follow_symlinks=False)
        rel_path = self._relative(entry)
        if self._matcher and self._matcher.matches(rel_path, is_dir):
            return False
        if self._gitignore and self._gitignore.matches(rel_path, is_dir):
            return False

        if self.include_patterns and not is_dir:
            return any(fnmatch.fnmatch(name, pattern) for pattern in self.include_patterns)

        return True

    def format(self, entry: os.DirEntry, folder: FolderRecord) -> str:
        return render_command(self.command_template, entry, folder)

    def format_child(self, child: Path, folder: FolderRecord) -> str:
        if self.child_template is None:
            return DEFAULT_CHILD_TEMPLATE.format(child=child, script=folder.script_name)
        block = self.child_template.format(child=child, script=folder.script_name)
        if not block.endswith("\n"):
            block += "\n"
        return block
