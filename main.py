"""
Command line entry point for scriptree.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Policy construction
- Running the build and reporting the outcome
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, List

from scriptree import __version__
from scriptree.core.build import Builder
from scriptree.core.build.builder import resolve_output_root
from scriptree.core.errors import ScriptreeError
from scriptree.core.models import BuildProgress, BuildResult
from scriptree.services.sample_tree import generate_sample_tree
from scriptree.services.settings import SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "scriptree"

EXIT_OK = 0
EXIT_BUILD_FAILED = 1
EXIT_USAGE = 2


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    input_root: str = "."
    output_root: Optional[str] = None
    script_name: Optional[str] = None
    write: bool = False
    dry_run: bool = False
    verbose: bool = False
    include_patterns: list[str] = field(default_factory=list)
    exclude_patterns: list[str] = field(default_factory=list)
    include_hidden: bool = False
    use_gitignore: bool = False
    command_template: Optional[str] = None
    config_file: Optional[str] = None
    sample_tree: bool = False
    log_level: str = "WARNING"
    debug: bool = False


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure logging.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# Command Line Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Generate a command script in every folder of a directory tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s media                         Print a summary of the scripts for media/
  %(prog)s media --dry-run               Print every generated script
  %(prog)s media -w -o /backup           Write scripts, mirror folders under /backup
  %(prog)s media -w --include '*.mkv'    Only act on .mkv files
        """
    )

    parser.add_argument(
        'input_root',
        help='Source directory to scan'
    )

    parser.add_argument(
        '-o', '--output',
        help='Output root; relative paths resolve against the input root'
    )
    parser.add_argument(
        '-s', '--script',
        help='File name of the generated scripts'
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        '-w', '--write',
        action='store_true',
        help='Write scripts and create the destination folders'
    )
    mode_group.add_argument(
        '-n', '--dry-run',
        action='store_true',
        help='Print generated scripts instead of writing them'
    )

    # Policy options
    parser.add_argument(
        '-i', '--include',
        action='append',
        default=[],
        metavar='PATTERN',
        help='Only act on files matching this glob (repeatable)'
    )
    parser.add_argument(
        '-x', '--exclude',
        action='append',
        default=[],
        metavar='PATTERN',
        help='Skip entries matching this gitignore-style pattern (repeatable)'
    )
    parser.add_argument(
        '--hidden',
        action='store_true',
        help='Include hidden files and folders'
    )
    parser.add_argument(
        '--gitignore',
        action='store_true',
        help="Also skip entries matched by the input root's .gitignore"
    )
    parser.add_argument(
        '-t', '--template',
        help='Command template for each file, e.g. \'mv "{name}" "{destination}"\''
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )
    parser.add_argument(
        '--sample-tree',
        action='store_true',
        help='Create a sample media tree under the input root first'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log build progress'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {__version__}'
    )

    parsed = parser.parse_args(args)

    result = CommandLineArgs()
    result.input_root = parsed.input_root
    result.output_root = parsed.output
    result.script_name = parsed.script
    result.write = parsed.write
    result.dry_run = parsed.dry_run
    result.verbose = parsed.verbose
    result.include_patterns = parsed.include
    result.exclude_patterns = parsed.exclude
    result.include_hidden = parsed.hidden
    result.use_gitignore = parsed.gitignore
    result.command_template = parsed.template
    result.config_file = parsed.config
    result.sample_tree = parsed.sample_tree
    result.debug = parsed.debug

    if parsed.debug:
        result.log_level = 'DEBUG'
    elif parsed.verbose:
        result.log_level = 'INFO'
    else:
        result.log_level = parsed.log_level

    return result


# =============================================================================
# Build
# =============================================================================

def create_builder(args: CommandLineArgs, settings_manager: SettingsManager) -> Builder:
    """Combine stored settings with command line overrides."""
    settings = settings_manager.settings

    options = settings.build.to_options()
    if args.output_root is not None:
        options.output_root = args.output_root
    if args.script_name is not None:
        options.script_name = args.script_name
    options.write = args.write or (options.write and not args.dry_run)
    options.verbose = args.verbose or options.verbose

    policy_settings = replace(settings.policy)
    if args.include_patterns:
        policy_settings.include_patterns = list(args.include_patterns)
    if args.exclude_patterns:
        policy_settings.exclude_patterns = [*policy_settings.exclude_patterns, *args.exclude_patterns]
    if args.include_hidden:
        policy_settings.include_hidden = True
    if args.use_gitignore:
        policy_settings.use_gitignore = True
    if args.command_template is not None:
        policy_settings.command_template = args.command_template

    # Never select our own scripts or the output folder
    root = Path(args.input_root).resolve()
    extra_excludes = [options.script_name]
    output_root = resolve_output_root(root, options.output_root).resolve()
    if output_root.is_relative_to(root) and output_root != root:
        extra_excludes.append(f"/{output_root.relative_to(root).as_posix()}/")
    policy = policy_settings.to_policy(root=root, extra_excludes=tuple(extra_excludes))

    return Builder(policy, options)


def report(result: BuildResult, dry_run: bool) -> None:
    """Print the outcome of a build."""
    if dry_run:
        for folder in result.folders:
            print(f"# {folder.script_path}")
            print(folder.generated_text, end="")
            print()
    print(result.summary)
    print(f"Destination: {result.destination_root}")


def _log_progress(progress: BuildProgress) -> None:
    logging.debug(
        f"main - {progress.stage.name} {progress.current_path} "
        f"({progress.folders_done} done, {progress.folders_pending} pending)"
    )


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point.

    Returns:
        Exit code (0 for success)
    """
    try:
        args = parse_arguments(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    logger = setup_logging(args.log_level)

    settings_manager = SettingsManager(Path(args.config_file) if args.config_file else None)

    try:
        if args.sample_tree:
            tree = generate_sample_tree(args.input_root)
            tree.create()
            logger.info(f"Created sample tree with {tree.folder_count()} folders at {tree.path}")

        builder = create_builder(args, settings_manager)
        result = builder.run(args.input_root, progress_callback=_log_progress)
    except ScriptreeError as e:
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        return EXIT_BUILD_FAILED

    if args.config_file:
        settings_manager.add_recent_root(str(result.input_root))

    report(result, args.dry_run)
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
