#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Data model shared by the traversal, archive and bundle stages."""

from collections.abc import Iterator
from pathlib import Path
import threading
from typing import Literal, TypeAlias

import attrs

ExclusionReason: TypeAlias = Literal["extension-disallowed", "pattern-matched"]


@attrs.define(frozen=True, slots=True)
class EligibilityDecision:
    """Per-file verdict of the eligibility filter."""

    include: bool
    reason: ExclusionReason | None = None

    @classmethod
    def included(cls) -> "EligibilityDecision":
        return cls(include=True)

    @classmethod
    def excluded(cls, reason: ExclusionReason) -> "EligibilityDecision":
        return cls(include=False, reason=reason)


INCLUDED = EligibilityDecision.included()
EXCLUDED_BY_EXTENSION = EligibilityDecision.excluded("extension-disallowed")
EXCLUDED_BY_PATTERN = EligibilityDecision.excluded("pattern-matched")


def relative_posix_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` with forward slashes.

    Raises:
        ValueError: If ``path`` is not located under ``root``.
    """
    return path.relative_to(root).as_posix()


@attrs.define(frozen=True, slots=True, kw_only=True)
class FileRecord:
    """
    Reference to one eligible file.

    Attributes:
        path: Absolute path to the file.
        relative_path: Path relative to the bundling root, forward slashes.
        length: Size in bytes at traversal time.
    """

    path: Path = attrs.field(validator=attrs.validators.instance_of(Path))
    relative_path: str = attrs.field(validator=attrs.validators.instance_of(str))
    length: int = attrs.field(validator=attrs.validators.instance_of(int))

    @classmethod
    def from_path(cls, file_path: Path, root: Path) -> "FileRecord":
        """
        Build a record for ``file_path`` under ``root``.

        Raises:
            OSError: If the file cannot be stat'ed (including when it vanished).
        """
        stat_result = file_path.stat()
        return cls(
            path=file_path,
            relative_path=relative_posix_path(file_path, root),
            length=stat_result.st_size,
        )


@attrs.define(slots=True)
class IgnoredExtensionTally:
    """Count of files skipped per extension because the extension is not allowed.

    Increments are serialized with a lock so concurrent visitors never lose an update.
    """

    _counts: dict[str, int] = attrs.field(factory=dict, alias="counts")
    _lock: threading.Lock = attrs.field(factory=threading.Lock, init=False, repr=False, eq=False)

    def record(self, extension: str) -> None:
        with self._lock:
            self._counts[extension] = self._counts.get(extension, 0) + 1

    def as_dict(self) -> dict[str, int]:
        with self._lock:
            return dict(sorted(self._counts.items()))

    def total(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(self.as_dict().items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)


@attrs.define(frozen=True, slots=True, kw_only=True)
class TraversalResult:
    """Eligible files of one traversal plus the ignored-extension tally."""

    files: tuple[FileRecord, ...]
    ignored_extensions: IgnoredExtensionTally
    total_size_bytes: int


@attrs.define(frozen=True, slots=True, kw_only=True)
class BundleResult:
    """
    Outcome of one successful bundling operation.

    The caller owns ``archive_path`` and must delete it after upload.

    Attributes:
        archive_path: Temporary zip archive.
        checksum: Base64-encoded SHA-256 digest of the archive bytes.
        total_size_bytes: Sum of the lengths of the files written.
        file_count: Number of entries in the archive.
        archive_size_bytes: Size of the archive file itself.
    """

    archive_path: Path
    checksum: str
    total_size_bytes: int
    file_count: int = 0
    archive_size_bytes: int = 0


# 📦🗜️🔚
