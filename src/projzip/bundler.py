#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Bundle orchestration: traversal, archive creation and checksum."""

import base64
import contextlib
from pathlib import Path
import time

from provide.foundation import logger
from provide.foundation.crypto import hash_file
from provide.foundation.errors import ResourceError
from provide.foundation.resilience import retry

from projzip.archive import ArchiveWriter
from projzip.config import GITIGNORE_FILENAME, ProjzipConfig
from projzip.eligibility import EligibilityFilter
from projzip.errors import ArchiveWriteError
from projzip.metadata import BundleResult
from projzip.patterns import IgnorePatternSet
from projzip.progress import ProgressReporter
from projzip.reader import FileReader
from projzip.telemetry import LoggingTelemetrySink, TelemetrySink
from projzip.traversal import ProjectTraverser

CHECKSUM_ALGORITHM = "sha256"


@retry(max_attempts=2)
def compute_checksum(archive_path: Path) -> str:
    """Base64-encoded SHA-256 digest of the archive bytes."""
    hex_digest = hash_file(archive_path, algorithm=CHECKSUM_ALGORITHM)
    return base64.b64encode(bytes.fromhex(hex_digest)).decode("ascii")


class BundleService:
    """Produces a checksummed archive of the eligible files of a project."""

    def __init__(
        self,
        config: ProjzipConfig,
        telemetry: TelemetrySink | None = None,
        progress_reporter: ProgressReporter | None = None,
        reader: FileReader | None = None,
    ) -> None:
        self.config = config
        self.telemetry = telemetry if telemetry is not None else LoggingTelemetrySink()
        self.progress_reporter = (
            progress_reporter
            if progress_reporter is not None
            else ProgressReporter(enabled=config.show_progress)
        )
        self.reader = reader
        self.patterns = self._compile_patterns()

    @property
    def bundling_root(self) -> Path:
        return self.config.bundling_root

    def select_source_folder(self, folder: Path | str | None) -> Path:
        """Bundle ``folder`` (inside the project root) instead of the whole project.

        The ignore patterns are recompiled against the new root's .gitignore.
        """
        root = self.config.select_source_folder(folder)
        self.patterns = self._compile_patterns()
        return root

    def _compile_patterns(self) -> IgnorePatternSet:
        gitignore_path = self.bundling_root / GITIGNORE_FILENAME if self.config.use_gitignore else None
        return IgnorePatternSet.compile(self.config.ignore_patterns, gitignore_path)

    def create_eligibility_filter(self) -> EligibilityFilter:
        return EligibilityFilter.from_config(self.config, self.patterns)

    def create_traverser(self) -> ProjectTraverser:
        return ProjectTraverser(
            self.bundling_root,
            self.create_eligibility_filter(),
            telemetry=self.telemetry,
            progress_reporter=self.progress_reporter,
        )

    def create_archive_writer(self) -> ArchiveWriter:
        return ArchiveWriter(
            batch_size=self.config.batch_size,
            max_workers=self.config.max_workers,
            reader=self.reader,
            progress_reporter=self.progress_reporter,
        )

    def bundle(self) -> BundleResult:
        """Traverse, archive and checksum the bundling root.

        Returns:
            BundleResult; the caller owns and must delete ``archive_path``.

        Raises:
            RepoSizeLimitError: If eligible files exceed ``max_project_size_bytes``.
            ArchiveWriteError: On unrecoverable I/O.
        """
        root = self.bundling_root
        logger.info(
            "bundle.start",
            root_dir=str(root),
            max_bytes=self.config.max_project_size_bytes,
            **{"projzip.stage": "bundle", "projzip.status": "start"},
        )
        start_time = time.monotonic()

        with self.progress_reporter.scope("Bundling project") as progress_scope:
            traversal = self.create_traverser().traverse(self.config.max_project_size_bytes)
            archive = self.create_archive_writer().write(traversal.files, root)
            progress_scope.count = len(archive.written)

        try:
            checksum = compute_checksum(archive.path)
            archive_size = archive.path.stat().st_size
        except (OSError, ResourceError) as e:
            logger.error("bundle.checksum.failure", path=str(archive.path), error=str(e))
            with contextlib.suppress(OSError):
                archive.path.unlink()
            raise ArchiveWriteError(f"Failed to checksum archive {archive.path}: {e}") from e

        result = BundleResult(
            archive_path=archive.path,
            checksum=checksum,
            total_size_bytes=archive.total_size_bytes,
            file_count=len(archive.written),
            archive_size_bytes=archive_size,
        )
        logger.info(
            "bundle.complete",
            archive_path=str(result.archive_path),
            file_count=result.file_count,
            total_size_bytes=result.total_size_bytes,
            duration_seconds=time.monotonic() - start_time,
            **{"projzip.stage": "bundle", "projzip.status": "complete"},
        )
        return result


# 📦🗜️🔚
