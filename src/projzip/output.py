#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

from collections.abc import Mapping
import sys

from provide.foundation import logger
from provide.foundation.console.output import pout
from rich.console import Console
from rich.table import Table

from projzip.metadata import BundleResult

NO_EXTENSION_LABEL = "(none)"


def format_size(num_bytes: int) -> str:
    """Human readable size, e.g. ``1536`` -> ``1.5 KiB``."""
    size = float(num_bytes)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if size < 1024 or unit == "GiB":
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{num_bytes} B"  # pragma: no cover


def display_ignored_extensions(
    counts: Mapping[str, int],
    force_plain_text: bool = False,
) -> None:
    """Show how many files were skipped per non-allow-listed extension.

    Only aggregate counts are shown; individual file names are never listed.
    """
    if not counts:
        pout("No files were skipped for their extension.")
        return

    title = f"Files Skipped by Extension ({sum(counts.values())} files)"
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    if not force_plain_text:
        console = Console(file=sys.stdout)
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Extension", style="yellow")
        table.add_column("Files", style="cyan", justify="right")
        for extension, count in ordered:
            table.add_row(extension or NO_EXTENSION_LABEL, str(count))
        console.print(table)
        return

    logger.debug("using_plain_text_output")
    pout(f"\n{title}")
    for extension, count in ordered:
        pout(f"  {extension or NO_EXTENSION_LABEL:<12} {count:>6}")


def generate_summary_text(
    result: BundleResult,
    max_bytes: int | None,
    ignored_extensions: Mapping[str, int],
    elapsed: float,
) -> str:
    limit_line = f"{result.total_size_bytes} / {max_bytes} bytes" if max_bytes is not None else "unbounded"
    summary_lines = [
        "### BUNDLE SUMMARY ###",
        f"- Archive: {result.archive_path}",
        f"- Checksum (sha256, base64): {result.checksum}",
        f"- Files Included: {result.file_count}",
        f"- Total Size (Included): {result.total_size_bytes} bytes ({format_size(result.total_size_bytes)})",
        f"- Archive Size: {result.archive_size_bytes} bytes",
        f"- Size Limit: {limit_line}",
        f"- Files Skipped by Extension: {sum(ignored_extensions.values())}",
        f"- Processing Time: {elapsed:.2f} seconds",
        "### END BUNDLE SUMMARY ###",
    ]
    return "\n".join(summary_lines)


# 📦🗜️🔚
