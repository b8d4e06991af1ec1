"""
Reporting and output formatting for diff application results.
"""

import json
from typing import List

from fuzzy_diff.diff_types import FileResult, FileStatus


class DiffReporter:
    """Formats and outputs per-file diff application results."""

    RULE_WIDTH = 80
    STATUS_WIDTH = 12
    HUNKS_WIDTH = 16
    FILE_WIDTH = 52

    STATUS_ORDER = {
        FileStatus.SUCCESS: 0,
        FileStatus.CREATED: 1,
        FileStatus.FAILED: 2,
    }

    STATUS_ICONS = {
        FileStatus.SUCCESS: "✓",
        FileStatus.CREATED: "+",
        FileStatus.FAILED: "✗",
    }

    def format_text(self, results: List[FileResult], dry_run: bool = False) -> str:
        """Format results as a human-readable summary."""
        lines = []

        lines.append("=" * self.RULE_WIDTH)
        lines.append("DIFF APPLICATION SUMMARY" + (" (DRY RUN)" if dry_run else ""))
        lines.append("=" * self.RULE_WIDTH)

        if not results:
            lines.append("No files processed.")
            return "\n".join(lines)

        successful = self._count(results, FileStatus.SUCCESS)
        created = self._count(results, FileStatus.CREATED)
        failed = self._count(results, FileStatus.FAILED)
        total_skipped = sum(r.hunks_skipped for r in results)

        lines.append("")
        lines.append("Overall Results:")
        lines.append(f"  Success: {successful} files")
        lines.append(f"  Created: {created} files")
        lines.append(f"  Failed:  {failed} files")
        lines.append(f"  Total:   {len(results)} files")
        if total_skipped > 0:
            lines.append(f"  Skipped: {total_skipped} context-only hunks")

        lines.append("")
        lines.append("Detailed Results:")
        lines.append("-" * self.RULE_WIDTH)
        lines.append("STATUS".ljust(self.STATUS_WIDTH) + "HUNKS".ljust(self.HUNKS_WIDTH) + "FILE")
        lines.append("-" * self.RULE_WIDTH)

        for result in sorted(results, key=lambda r: self.STATUS_ORDER[r.status]):
            status_text = f"{self.STATUS_ICONS[result.status]} {result.status.value}"
            hunks_text = f"{result.hunks_applied}/{result.total_hunks}"
            if result.hunks_skipped > 0:
                hunks_text += f" ({result.hunks_skipped} skip)"

            lines.append(
                status_text.ljust(self.STATUS_WIDTH) +
                hunks_text.ljust(self.HUNKS_WIDTH) +
                self._shorten(result.filename)
            )

            if result.status == FileStatus.FAILED and result.error:
                lines.append(" " * (self.STATUS_WIDTH + self.HUNKS_WIDTH) + f"└─ {result.error}")

        lines.append("-" * self.RULE_WIDTH)

        failed_results = [r for r in results if r.status == FileStatus.FAILED]
        if failed_results:
            lines.append("")
            lines.append(f"FAILED FILES ({len(failed_results)}):")
            for result in failed_results:
                lines.append(f"  • {result.filename}")
                lines.append(f"    └─ {result.error or 'Unknown error'}")
                if result.target_path:
                    lines.append(f"    └─ Path: {result.target_path}")

                if result.failed_hunks:
                    lines.append("    └─ Failed hunks:")
                    for failed_hunk in result.failed_hunks:
                        lines.append(f"       • {failed_hunk.describe()}")
                        lines.append(f"         └─ {failed_hunk.reason}")

        lines.append("")
        lines.append("=" * self.RULE_WIDTH)
        if failed > 0:
            lines.append(f"{failed} file(s) failed to apply. Check the errors above.")

        else:
            lines.append("All files processed successfully!")

        if total_skipped > 0:
            lines.append(f"{total_skipped} context-only hunks were skipped (no changes needed).")

        lines.append("=" * self.RULE_WIDTH)
        return "\n".join(lines)

    def format_json(self, results: List[FileResult]) -> str:
        """Format results as JSON."""
        data = {
            "summary": {
                "total_files": len(results),
                "successful": self._count(results, FileStatus.SUCCESS),
                "created": self._count(results, FileStatus.CREATED),
                "failed": self._count(results, FileStatus.FAILED),
                "hunks_skipped": sum(r.hunks_skipped for r in results),
            },
            "files": [r.to_dict() for r in results]
        }

        return json.dumps(data, indent=2)

    def print_results(self, results: List[FileResult], format_type: str = "text", dry_run: bool = False) -> None:
        """Print results to stdout in the specified format."""
        if format_type == "json":
            print(self.format_json(results))

        else:
            print(self.format_text(results, dry_run))

    def get_exit_code(self, results: List[FileResult]) -> int:
        """Get the process exit code for a set of results."""
        return 1 if any(r.status == FileStatus.FAILED for r in results) else 0

    def _count(self, results: List[FileResult], status: FileStatus) -> int:
        return sum(1 for r in results if r.status == status)

    def _shorten(self, filename: str) -> str:
        """Trim long filenames from the left so the table stays aligned."""
        if len(filename) <= self.FILE_WIDTH:
            return filename

        return "..." + filename[-(self.FILE_WIDTH - 3):]
