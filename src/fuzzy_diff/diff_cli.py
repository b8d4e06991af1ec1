"""
Fuzzy Diff - Command-line tool for applying malformed or stale unified diffs.

Usage:
    python -m fuzzy_diff <diff_file> [options]

Options:
    --root DIR        Directory that diff filenames are resolved against
                      (default: the directory holding the diff file)
    --config PATH     YAML file with matching heuristics
    --dry-run         Report what would change without writing anything
    --format FORMAT   Summary format: text or json (default: text)
    --verbose         Show matching trace output
"""

import argparse
import logging
import os
import sys
from typing import List

from fuzzy_diff.diff_applier import DiffApplier
from fuzzy_diff.diff_content_provider import (
    DiffContentProvider,
    DryRunContentProvider,
    FilesystemContentProvider,
)
from fuzzy_diff.diff_exceptions import DiffParseError, DiffSettingsError
from fuzzy_diff.diff_reporter import DiffReporter
from fuzzy_diff.diff_settings import DiffApplierSettings


class DiffPatcher:
    """
    Command-line application.

    Coordinates:
    - Reading the diff file
    - Loading settings
    - Applying the diff to files under the root directory
    - Printing the summary
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the patcher with command-line arguments.

        Args:
            args: Parsed command-line arguments
        """
        self.args = args
        self.diff_file = args.diff_file
        self.root_dir = args.root or os.path.dirname(os.path.abspath(args.diff_file))
        self.reporter = DiffReporter()
        self._logger = logging.getLogger("DiffPatcher")

    def run(self) -> int:
        """
        Run the patcher.

        Returns:
            Exit code (0 when every file applied, non-zero otherwise)
        """
        try:
            settings = self._load_settings()
            diff_text = self._read_diff()

        except (DiffSettingsError, OSError, UnicodeDecodeError) as e:
            self._print_error(str(e))
            return 1

        provider: DiffContentProvider = FilesystemContentProvider(self.root_dir)
        if self.args.dry_run:
            provider = DryRunContentProvider(provider)

        self._logger.info("Applying diff from: %s", self.diff_file)
        applier = DiffApplier(settings)

        try:
            results = applier.apply_diff(diff_text, provider)

        except DiffParseError as e:
            self._print_error(f"Failed to parse diff: {e}")
            return 1

        self.reporter.print_results(results, self.args.format, self.args.dry_run)
        return self.reporter.get_exit_code(results)

    def _load_settings(self) -> DiffApplierSettings:
        """Load settings from the config file, if one was given."""
        if not self.args.config:
            return DiffApplierSettings()

        return DiffApplierSettings.load_from_file(self.args.config)

    def _read_diff(self) -> str:
        """Read the diff file."""
        with open(self.diff_file, 'r', encoding='utf-8') as f:
            return f.read()

    def _print_error(self, message: str) -> None:
        """Print error message."""
        print(f"Error: {message}", file=sys.stderr)


def parse_arguments(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Apply unified diffs by content, tolerating malformed headers and stale line numbers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Apply a diff to files next to it
  python -m fuzzy_diff changes.diff

  # Resolve filenames against a project directory
  python -m fuzzy_diff changes.diff --root ~/src/project

  # See what would happen without writing anything
  python -m fuzzy_diff changes.diff --dry-run --verbose
        """
    )

    parser.add_argument(
        'diff_file',
        help='Unified diff file to apply'
    )

    parser.add_argument(
        '--root',
        help='Directory that diff filenames are resolved against (default: the diff file directory)'
    )

    parser.add_argument(
        '--config',
        help='YAML file with matching heuristics'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Report what would change without writing anything'
    )

    parser.add_argument(
        '--format',
        choices=['text', 'json'],
        default='text',
        help='Summary format (default: text)'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show matching trace output'
    )

    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    patcher = DiffPatcher(args)
    return patcher.run()


if __name__ == "__main__":
    sys.exit(main())
