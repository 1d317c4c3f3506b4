#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Reading eligible file content for the archive."""

from collections.abc import Sequence

from provide.foundation import logger
from provide.foundation.resilience import retry

from projzip.metadata import FileRecord

# Errors meaning the file (or a parent directory) is gone; not worth retrying.
VANISHED_ERRORS: tuple[type[OSError], ...] = (FileNotFoundError, NotADirectoryError)


class FileReader:
    """Reads file bytes, treating files deleted since traversal as absent."""

    @retry(max_attempts=2)
    def read(self, record: FileRecord) -> bytes | None:
        """Read the full content of ``record``.

        Returns:
            The file bytes, or None if the file vanished after traversal.

        Raises:
            OSError: For any other read failure.
        """
        try:
            data = record.path.read_bytes()
        except VANISHED_ERRORS:
            logger.debug("file.read.vanished", path=str(record.path))
            return None
        logger.debug("file.read.success", path=str(record.path), size_bytes=len(data))
        return data

    def read_batch(self, records: Sequence[FileRecord]) -> list[tuple[FileRecord, bytes | None]]:
        """Read a batch of records sequentially; used as one unit of pool work."""
        return [(record, self.read(record)) for record in records]


# 📦🗜️🔚
