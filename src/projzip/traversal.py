#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Directory traversal with eligibility filtering and size accounting."""

from collections.abc import Iterator
import os
from pathlib import Path
from typing import TYPE_CHECKING

from provide.foundation import logger

from projzip.eligibility import EligibilityFilter, file_extension
from projzip.errors import RepoSizeLimitError
from projzip.metadata import FileRecord, IgnoredExtensionTally, TraversalResult
from projzip.telemetry import LoggingTelemetrySink, TelemetrySink, emit_ignored_extensions

if TYPE_CHECKING:
    from projzip.progress import ProgressReporter

SIZE_LIMIT_MESSAGE = (
    "The project you have selected is too large to use as context "
    "({total_bytes} bytes of eligible files, limit {max_bytes} bytes). "
    "Please select a different folder."
)


class ProjectTraverser:
    """Walks the bundling root and collects eligible files."""

    def __init__(
        self,
        root_dir: Path,
        eligibility: EligibilityFilter,
        telemetry: TelemetrySink | None = None,
        progress_reporter: "ProgressReporter | None" = None,
    ) -> None:
        self.root_dir = root_dir
        self.eligibility = eligibility
        self.telemetry = telemetry if telemetry is not None else LoggingTelemetrySink()
        self.progress_reporter = progress_reporter

    def iter_candidates(self) -> Iterator[Path]:
        """Lazily yield every plain file below the root, in sorted walk order.

        Directories matched by an ignore pattern are not descended into.
        """
        for root_str, dirs, files in os.walk(
            self.root_dir,
            topdown=True,
            followlinks=False,
            onerror=self._handle_walk_error,
        ):
            current_dir = Path(root_str)
            dirs[:] = sorted(self._filter_directories(current_dir, dirs))

            for file_name in sorted(files):
                file_path = current_dir / file_name
                if file_path.is_symlink() or not file_path.is_file():
                    logger.debug("traversal.file.not_regular", path=str(file_path))
                    continue
                yield file_path

    def _filter_directories(self, current_dir: Path, dirs: list[str]) -> list[str]:
        kept = []
        for dir_name in dirs:
            dir_path = current_dir / dir_name
            if dir_path.is_symlink():
                logger.debug("traversal.directory.symlink_skipped", path=str(dir_path))
                continue
            if self.eligibility.is_ignored_by_pattern(dir_path):
                logger.debug("traversal.directory.pruned", path=str(dir_path))
                continue
            kept.append(dir_name)
        return kept

    def _handle_walk_error(self, error: OSError) -> None:
        logger.warning("traversal.walk.error", error=str(error))

    def traverse(self, max_bytes: int | None = None) -> TraversalResult:
        """Collect eligible files, aborting once their total size exceeds ``max_bytes``.

        Args:
            max_bytes: Size ceiling in bytes; ``None`` means unbounded.

        Returns:
            TraversalResult with the eligible files in walk order.

        Raises:
            RepoSizeLimitError: As soon as the running total exceeds ``max_bytes``.
        """
        logger.info("traversal.start", root_dir=str(self.root_dir), max_bytes=max_bytes)

        files: list[FileRecord] = []
        tally = IgnoredExtensionTally()
        total_size = 0
        pattern_excluded = 0

        for file_path in self.iter_candidates():
            if not self.eligibility.passes_extension_check(file_path):
                tally.record(file_extension(file_path))
                continue

            if self.eligibility.is_ignored_by_pattern(file_path):
                pattern_excluded += 1
                logger.debug("traversal.file.pattern_excluded", path=str(file_path))
                continue

            try:
                record = FileRecord.from_path(file_path, self.root_dir)
            except FileNotFoundError:
                logger.debug("traversal.file.vanished", path=str(file_path))
                continue
            except OSError as e:
                logger.warning("traversal.file.stat_error", path=str(file_path), error=str(e))
                continue

            total_size += record.length
            files.append(record)

            if max_bytes is not None and total_size > max_bytes:
                logger.warning(
                    "traversal.size_limit.exceeded",
                    total_size_bytes=total_size,
                    max_bytes=max_bytes,
                    **{"projzip.stage": "traversal", "projzip.status": "limit_exceeded"},
                )
                raise RepoSizeLimitError(
                    SIZE_LIMIT_MESSAGE.format(total_bytes=total_size, max_bytes=max_bytes),
                    max_bytes=max_bytes,
                    total_bytes=total_size,
                )

            if self.progress_reporter:
                self.progress_reporter.file_progress(
                    file_path, "found", root_dir=self.root_dir, details=f"{record.length} bytes"
                )

        emit_ignored_extensions(tally, self.telemetry)

        logger.info(
            "traversal.complete",
            file_count=len(files),
            total_size_bytes=total_size,
            extension_ignored=tally.total(),
            pattern_excluded=pattern_excluded,
        )
        return TraversalResult(files=tuple(files), ignored_extensions=tally, total_size_bytes=total_size)


# 📦🗜️🔚
