"""
Main entry point for the review diff command line tool.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Input reading (files or stdin)
- Command dispatch and output formatting
- Exception handling
"""

from __future__ import annotations

import argparse
import faulthandler
import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Optional, List

from reviewdiff import __version__
from reviewdiff.core.diff import build_line_pairs, compute_word_diff, parse_hunks
from reviewdiff.core.merge import build_three_way_view, count_conflicts
from reviewdiff.services.file_io import FileContent, FileIOService
from reviewdiff.services.settings import ApplicationSettings, OutputFormat, SettingsManager
from reviewdiff.ui.terminal import (
    TerminalColors,
    TextRenderer,
    line_pairs_to_dict,
    three_way_to_dict,
)


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "reviewdiff"
APP_DISPLAY_NAME = "Review Diff"
APP_VERSION = __version__

STDIN_PATH = '-'

EXIT_OK = 0
EXIT_CONFLICTS = 1
EXIT_ERROR = 1
EXIT_UNREADABLE = 2


# =============================================================================
# Enums
# =============================================================================

class Command(Enum):
    """Subcommand to run."""
    WORDS = auto()
    CONFLICTS = auto()
    PATCH = auto()


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    command: Command = Command.WORDS
    old_line: Optional[str] = None
    new_line: Optional[str] = None
    path: Optional[str] = None
    check: bool = False
    count_only: bool = False
    output_format: Optional[OutputFormat] = None
    no_color: bool = False
    config_file: Optional[str] = None
    log_level: str = "WARNING"
    debug: bool = False


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

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
    Configure application logging.

    Console output goes to stderr so stdout carries only command output.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    # chardet logs every prober at DEBUG
    logging.getLogger('chardet').setLevel(logging.WARNING)

    return root_logger


logger = logging.getLogger(APP_NAME)


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """
    Global exception handler for unhandled exceptions.

    Logs the exception with its traceback.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def handle_exception(
        self,
        exc_type: type,
        exc_value: BaseException,
        exc_tb
    ) -> None:
        """Handle an unhandled exception."""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical(
            "Unhandled exception",
            exc_info=(exc_type, exc_value, exc_tb)
        )


# =============================================================================
# Argument Parsing
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
        description="Word-level diffs and three-way conflict views for code review",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s words "a quick fox" "a slow fox"     Word diff of two lines
  %(prog)s conflicts merged.py                 Three-way view of a conflicted file
  %(prog)s conflicts --check merged.py         Exit 1 if conflicts remain
  git diff | %(prog)s patch -                  Side-by-side patch with word diffs
        """
    )

    # Output
    parser.add_argument(
        '--format',
        choices=[fmt.value for fmt in OutputFormat],
        default=None,
        help='Output format (defaults to the configured format)'
    )
    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Configuration file path'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode (also writes a log file)'
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
        version=f'{APP_NAME} {APP_VERSION}'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND', required=True)

    words_parser = subparsers.add_parser('words', help='Word diff of two lines')
    words_parser.add_argument('old', help='Old version of the line')
    words_parser.add_argument('new', help='New version of the line')

    conflicts_parser = subparsers.add_parser(
        'conflicts',
        help='Three-way view of a conflict-marked file'
    )
    conflicts_parser.add_argument('file', help="Conflict-marked file ('-' for stdin)")
    conflicts_parser.add_argument(
        '--check',
        action='store_true',
        help='Exit with status 1 when conflicts are present'
    )
    conflicts_parser.add_argument(
        '--count',
        action='store_true',
        help='Print only the number of conflicts'
    )

    patch_parser = subparsers.add_parser(
        'patch',
        help='Side-by-side view of a unified diff with word highlights'
    )
    patch_parser.add_argument('file', help="Unified diff file ('-' for stdin)")

    parsed = parser.parse_args(args)

    result = CommandLineArgs()
    result.command = Command[parsed.command.upper()]
    result.config_file = parsed.config
    result.no_color = parsed.no_color
    result.debug = parsed.debug

    if result.command == Command.WORDS:
        result.old_line = parsed.old
        result.new_line = parsed.new
    else:
        result.path = parsed.file

    if result.command == Command.CONFLICTS:
        result.check = parsed.check
        result.count_only = parsed.count

    if parsed.format:
        result.output_format = OutputFormat.from_string(parsed.format)

    # Log level
    if parsed.debug or parsed.verbose:
        result.log_level = 'DEBUG'
    else:
        result.log_level = parsed.log_level

    return result


# =============================================================================
# Input
# =============================================================================

def read_input(path: str, normalize_line_endings: bool = False) -> Optional[FileContent]:
    """
    Read a file, or stdin when path is '-'.

    Returns:
        The decoded content, or None after logging why it was unreadable
    """
    service = FileIOService()

    if path == STDIN_PATH:
        result = service.read_bytes(sys.stdin.buffer.read(),
                                    normalize_line_endings=normalize_line_endings)
    else:
        result = service.read_file(path, normalize_line_endings=normalize_line_endings)

    if not result.success:
        logger.error(result.error)
        return None

    logger.debug(
        f"Read {path}: {result.content.encoding}, {result.content.line_ending.name}"
    )
    return result.content


# =============================================================================
# Commands
# =============================================================================

def _emit(lines: List[str]) -> None:
    for line in lines:
        print(line)


def _emit_json(document: dict) -> None:
    print(json.dumps(document, indent=2, ensure_ascii=False))


def run_words(args: CommandLineArgs, settings: ApplicationSettings,
              output_format: OutputFormat, renderer: TextRenderer) -> int:
    """Word diff of two literal lines."""
    result = compute_word_diff(
        args.old_line or "",
        args.new_line or "",
        settings.word_diff.to_options()
    )

    if output_format == OutputFormat.JSON:
        document = result.to_dict()
        document['is_mixed'] = result.is_mixed
        _emit_json(document)
    else:
        _emit(renderer.render_word_diff(result))

    return EXIT_OK


def run_conflicts(args: CommandLineArgs, settings: ApplicationSettings,
                  output_format: OutputFormat, renderer: TextRenderer) -> int:
    """Three-way view of a conflict-marked file."""
    content = read_input(args.path, settings.conflicts.normalize_line_endings)
    if content is None:
        return EXIT_UNREADABLE

    chunks = build_three_way_view(content.content)
    count = count_conflicts(chunks)
    logger.info(f"{args.path}: {count} conflict(s) in {len(chunks)} chunk(s)")

    if args.count_only:
        if output_format == OutputFormat.JSON:
            _emit_json({'conflict_count': count})
        else:
            print(count)
    elif output_format == OutputFormat.JSON:
        _emit_json(three_way_to_dict(chunks))
    else:
        _emit(renderer.render_three_way(chunks))

    if args.check and count > 0:
        return EXIT_CONFLICTS
    return EXIT_OK


def run_patch(args: CommandLineArgs, settings: ApplicationSettings,
              output_format: OutputFormat, renderer: TextRenderer) -> int:
    """Side-by-side view of a unified diff."""
    content = read_input(args.path)
    if content is None:
        return EXIT_UNREADABLE

    hunks = parse_hunks(content.content)
    logger.info(f"{args.path}: {len(hunks)} hunk(s)")

    pairs = build_line_pairs(
        hunks,
        settings.word_diff.to_options(),
        only_mixed=settings.word_diff.pair_only_mixed
    )

    if output_format == OutputFormat.JSON:
        document = line_pairs_to_dict(pairs)
        document['hunk_count'] = len(hunks)
        _emit_json(document)
    else:
        _emit(renderer.render_line_pairs(pairs))

    return EXIT_OK


COMMANDS = {
    Command.WORDS: run_words,
    Command.CONFLICTS: run_conflicts,
    Command.PATCH: run_patch,
}


# =============================================================================
# Main
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = parse_arguments(argv)

    settings_manager = SettingsManager(Path(args.config_file) if args.config_file else None)

    log_file = None
    if args.debug:
        faulthandler.enable()
        log_dir = settings_manager.settings_path.parent / 'logs'
        log_file = log_dir / f"{APP_NAME}_{datetime.now():%Y%m%d}.log"

    root_logger = setup_logging(args.log_level, log_file)
    logger.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    exception_handler = ExceptionHandler(root_logger)
    sys.excepthook = exception_handler.handle_exception

    try:
        settings = settings_manager.settings
        output_format = args.output_format or settings.output.format

        use_colors = settings.output.color and not args.no_color and sys.stdout.isatty()
        renderer = TextRenderer(
            settings,
            TerminalColors() if use_colors else TerminalColors.plain()
        )

        exit_code = COMMANDS[args.command](args, settings, output_format, renderer)
        logger.debug(f"Exiting with code {exit_code}")
        return exit_code

    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        return EXIT_ERROR


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
