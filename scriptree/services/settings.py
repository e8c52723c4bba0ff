"""
Build settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

from scriptree.core.build.builder import BuildOptions, DEFAULT_OUTPUT_ROOT, DEFAULT_SCRIPT_NAME
from scriptree.core.policy import DEFAULT_COMMAND_TEMPLATE, DEFAULT_EXCLUDE_PATTERNS, PatternPolicy


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a settings group, or an empty one when it is missing or malformed."""
    value = data.get(key)
    if not isinstance(value, dict):
        if value is not None:
            logging.warning(f"SettingsManager - Ignoring malformed '{key}' settings")
        return {}
    return value


@dataclass
class BuildSettings:
    """Defaults for build runs."""
    output_root: str = DEFAULT_OUTPUT_ROOT
    script_name: str = DEFAULT_SCRIPT_NAME
    write: bool = False
    verbose: bool = False

    def to_options(self) -> BuildOptions:
        return BuildOptions(
            output_root=self.output_root,
            script_name=self.script_name,
            write=self.write,
            verbose=self.verbose,
        )


@dataclass
class PolicySettings:
    """Settings for the pattern policy."""
    include_patterns: list[str] = field(default_factory=list)
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    include_hidden: bool = False
    command_template: str = DEFAULT_COMMAND_TEMPLATE
    child_template: Optional[str] = None
    use_gitignore: bool = False

    def to_policy(
        self,
        root: Optional[Path] = None,
        extra_excludes: tuple[str, ...] = ()
    ) -> PatternPolicy:
        return PatternPolicy(
            include_patterns=self.include_patterns,
            exclude_patterns=[*self.exclude_patterns, *extra_excludes],
            include_hidden=self.include_hidden,
            command_template=self.command_template,
            child_template=self.child_template,
            root=root,
            use_gitignore=self.use_gitignore,
        )


@dataclass
class ApplicationSettings:
    """Main settings container."""
    build: BuildSettings = field(default_factory=BuildSettings)
    policy: PolicySettings = field(default_factory=PolicySettings)

    recent_roots: list[str] = field(default_factory=list)
    recent_roots_limit: int = 10


class SettingsManager:
    """Manager for loading/saving settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'scriptree' / 'settings.json'
        else:
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'scriptree' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk. Missing or unreadable files give defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"SettingsManager - Could not read {self.settings_path}: {e}")
            return ApplicationSettings()

        if not isinstance(data, dict):
            logging.warning(f"SettingsManager - Ignoring malformed settings in {self.settings_path}")
            return ApplicationSettings()

        return self._from_dict(data)

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(settings), f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Could not save {self.settings_path}: {e}")
            return False

        self._settings = settings
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_recent_root(self, path: str) -> None:
        """Add an input root to the front of the recent list."""
        settings = self.settings
        recent = [p for p in settings.recent_roots if p != path]
        recent.insert(0, path)
        settings.recent_roots = recent[:settings.recent_roots_limit]
        self.save()

    def _from_dict(self, data: dict[str, Any]) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        build_data = _section(data, 'build')
        defaults = BuildSettings()
        build = BuildSettings(
            output_root=build_data.get('output_root', defaults.output_root),
            script_name=build_data.get('script_name', defaults.script_name),
            write=build_data.get('write', defaults.write),
            verbose=build_data.get('verbose', defaults.verbose),
        )

        policy_data = _section(data, 'policy')
        policy = PolicySettings(
            include_patterns=policy_data.get('include_patterns', []),
            exclude_patterns=policy_data.get('exclude_patterns', list(DEFAULT_EXCLUDE_PATTERNS)),
            include_hidden=policy_data.get('include_hidden', False),
            command_template=policy_data.get('command_template', DEFAULT_COMMAND_TEMPLATE),
            child_template=policy_data.get('child_template'),
            use_gitignore=policy_data.get('use_gitignore', False),
        )

        return ApplicationSettings(
            build=build,
            policy=policy,
            recent_roots=data.get('recent_roots', []),
            recent_roots_limit=data.get('recent_roots_limit', 10),
        )
