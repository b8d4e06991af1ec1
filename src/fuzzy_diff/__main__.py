"""
CLI entry point for Fuzzy Diff.

This allows the tool to be run as:
    python -m fuzzy_diff changes.diff
"""

import sys
from fuzzy_diff.diff_cli import main

if __name__ == "__main__":
    sys.exit(main())
