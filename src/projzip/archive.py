#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Zip archive creation from a set of eligible files."""

from collections import deque
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
import contextlib
import os
from pathlib import Path
import tempfile
import time
from typing import TYPE_CHECKING
import zipfile

import attrs
from provide.foundation import logger

from projzip.config import DEFAULT_BATCH_SIZE
from projzip.errors import ArchiveWriteError
from projzip.metadata import FileRecord
from projzip.reader import FileReader

if TYPE_CHECKING:
    from projzip.progress import ProgressReporter

# Fixed entry metadata keeps archives byte-identical for identical inputs.
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
ENTRY_PERMISSIONS = 0o644
COMPRESS_LEVEL = 6


def chunked(records: Sequence[FileRecord], size: int) -> list[Sequence[FileRecord]]:
    return [records[i : i + size] for i in range(0, len(records), size)]


def default_worker_count() -> int:
    """Thread count ``ThreadPoolExecutor`` picks when ``max_workers`` is None."""
    return min(32, (os.cpu_count() or 1) + 4)


@attrs.define(frozen=True, slots=True, kw_only=True)
class WrittenArchive:
    """A finished temporary archive and the records actually stored in it.

    ``written`` records carry the number of bytes stored for each entry, which
    can differ from the size seen during traversal if a file changed in between.
    Such growth is not checked against the project size limit.
    """

    path: Path
    written: tuple[FileRecord, ...]
    skipped: int = 0

    @property
    def total_size_bytes(self) -> int:
        return sum(record.length for record in self.written)


class ArchiveWriter:
    """Writes eligible files into one temporary zip archive.

    Reads run on a thread pool, one task per batch of files. At most
    ``max_workers`` batches are read ahead of the writer. Entries are appended
    only by the calling thread, which owns the ``ZipFile``, in batch
    submission order.
    """

    def __init__(
        self,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int | None = None,
        reader: FileReader | None = None,
        progress_reporter: "ProgressReporter | None" = None,
    ) -> None:
        self.batch_size = batch_size
        self.max_workers = max_workers if max_workers is not None else default_worker_count()
        self.reader = reader if reader is not None else FileReader()
        self.progress_reporter = progress_reporter

    def write(self, records: Sequence[FileRecord], root_dir: Path | None = None) -> WrittenArchive:
        """Create a temporary archive containing ``records``.

        Args:
            records: Eligible files; entry names are their ``relative_path``.
            root_dir: Bundling root, used for progress display only.

        Returns:
            WrittenArchive owned by the caller, who must delete it.

        Raises:
            ArchiveWriteError: On any unrecoverable I/O failure. The temporary
                file is removed before raising.
        """
        logger.info(
            "archive.write.start",
            candidate_count=len(records),
            batch_size=self.batch_size,
            max_workers=self.max_workers,
        )
        start_time = time.monotonic()

        try:
            fd, temp_name = tempfile.mkstemp(prefix="projzip-", suffix=".zip")
            os.close(fd)
        except OSError as e:
            logger.error("archive.create.failure", error=str(e))
            raise ArchiveWriteError(f"Cannot create temporary archive: {e}") from e
        archive_path = Path(temp_name)

        written: list[FileRecord] = []
        skipped = 0
        try:
            with (
                zipfile.ZipFile(
                    archive_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL
                ) as zip_output,
                ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="projzip-reader"
                ) as executor,
            ):
                pending: deque[Future[list[tuple[FileRecord, bytes | None]]]] = deque()
                for batch in chunked(records, self.batch_size):
                    if len(pending) >= self.max_workers:
                        skipped += self._store_batch(zip_output, pending.popleft().result(), written, root_dir)
                    pending.append(executor.submit(self.reader.read_batch, batch))
                while pending:
                    skipped += self._store_batch(zip_output, pending.popleft().result(), written, root_dir)
        except (OSError, zipfile.BadZipFile) as e:
            logger.error("archive.write.failure", path=str(archive_path), error=str(e))
            with contextlib.suppress(OSError):
                archive_path.unlink()
            raise ArchiveWriteError(f"Failed to write archive: {e}") from e

        logger.info(
            "archive.write.complete",
            path=str(archive_path),
            file_count=len(written),
            skipped=skipped,
            duration_seconds=time.monotonic() - start_time,
        )
        return WrittenArchive(path=archive_path, written=tuple(written), skipped=skipped)

    def _store_batch(
        self,
        zip_output: zipfile.ZipFile,
        batch_result: list[tuple[FileRecord, bytes | None]],
        written: list[FileRecord],
        root_dir: Path | None,
    ) -> int:
        """Append one read batch; returns how many of its files had vanished."""
        skipped = 0
        for record, data in batch_result:
            if data is None:
                skipped += 1
                if self.progress_reporter:
                    self.progress_reporter.file_progress(
                        record.path, "skipped", root_dir=root_dir, details="deleted"
                    )
                continue
            self._put_entry(zip_output, record, data)
            if len(data) != record.length:
                logger.debug(
                    "archive.entry.size_changed",
                    path=str(record.path),
                    traversal_size=record.length,
                    stored_size=len(data),
                )
                record = attrs.evolve(record, length=len(data))
            written.append(record)
            if self.progress_reporter:
                self.progress_reporter.file_progress(record.path, "included", root_dir=root_dir)
        return skipped

    def _put_entry(self, zip_output: zipfile.ZipFile, record: FileRecord, data: bytes) -> None:
        info = zipfile.ZipInfo(record.relative_path, date_time=ENTRY_DATE_TIME)
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = ENTRY_PERMISSIONS << 16
        zip_output.writestr(info, data)


# 📦🗜️🔚
