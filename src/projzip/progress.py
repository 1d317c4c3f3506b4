#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Console progress for the traversal and archive stages."""

from collections.abc import Iterator
import contextlib
from pathlib import Path
import time
from typing import Literal, NamedTuple

from provide.foundation.console import pout
from provide.foundation.context import CLIContext

ProgressStatus = Literal["found", "included", "skipped", "error"]


class StatusStyle(NamedTuple):
    emoji: str
    plain: str
    color: str


STATUS_STYLES: dict[str, StatusStyle] = {
    "found": StatusStyle("✓", "+", "green"),
    "included": StatusStyle("📦", "+", "green"),
    "skipped": StatusStyle("⏭", "-", "yellow"),
    "error": StatusStyle("✗", "!", "red"),
}
UNKNOWN_STYLE = StatusStyle("?", "?", "white")


class ProgressScope:
    """One running operation; the body sets ``count`` before the scope closes."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.count = 0
        self.started_at = time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


class ProgressReporter:
    """Prints per-file and per-operation progress through ``pout``.

    Silent when disabled or when the CLI context asks for JSON output.
    """

    def __init__(self, enabled: bool = True, cli_context: CLIContext | None = None) -> None:
        self.cli_context = cli_context
        self.enabled = enabled and not (cli_context is not None and cli_context.json_output)

    @property
    def _use_emoji(self) -> bool:
        return not (self.cli_context is not None and self.cli_context.no_emoji)

    def _emit(self, message: str, color: str, bold: bool = False) -> None:
        if self.enabled:
            pout(message, color=color, bold=bold, ctx=self.cli_context)

    def operation_start(self, operation_name: str) -> None:
        self._emit(f"\n{operation_name}...", color="cyan", bold=True)

    def operation_end(self, operation_name: str, count: int, elapsed: float | None = None) -> None:
        elapsed_str = f" in {elapsed:.1f}s" if elapsed else ""
        self._emit(f"{operation_name} complete: {count} items{elapsed_str}", color="cyan")

    @contextlib.contextmanager
    def scope(self, operation_name: str) -> Iterator[ProgressScope]:
        """Report a start line now and an end line with ``scope.count`` if the block completes."""
        progress_scope = ProgressScope(operation_name)
        self.operation_start(operation_name)
        yield progress_scope
        self.operation_end(operation_name, progress_scope.count, progress_scope.elapsed)

    def file_progress(
        self,
        file_path: Path,
        status: ProgressStatus,
        root_dir: Path | None = None,
        details: str | None = None,
    ) -> None:
        """Print one line for ``file_path``, relative to ``root_dir`` when possible."""
        if not self.enabled:
            return

        display_path = file_path
        if root_dir is not None and file_path.is_relative_to(root_dir):
            display_path = file_path.relative_to(root_dir)

        style = STATUS_STYLES.get(status, UNKNOWN_STYLE)
        symbol = style.emoji if self._use_emoji else style.plain
        details_str = f" ({details})" if details else ""
        self._emit(f"  {symbol} {status.capitalize()}: {display_path.as_posix()}{details_str}", color=style.color)


# 📦🗜️🔚
