#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Error types for projzip operations."""

from provide.foundation import FoundationError


class BundleError(FoundationError):
    """Base error for all bundling operations."""

    pass


class ConfigurationError(BundleError):
    """Error in projzip configuration."""

    pass


class InvalidPathError(ConfigurationError):
    """No usable project root or source folder."""

    pass


class PatternCompilationError(BundleError):
    """Failed to compile an ignore pattern."""

    pass


class GitignoreParseError(PatternCompilationError):
    """Failed to read or decode a .gitignore file."""

    pass


class RepoSizeLimitError(BundleError):
    """The eligible files of the project exceed the configured size limit.

    This is a user-facing condition: the caller should explain that the
    project is too large rather than report a generic failure.
    """

    def __init__(self, message: str, *, max_bytes: int, total_bytes: int) -> None:
        super().__init__(message)
        self.max_bytes = max_bytes
        self.total_bytes = total_bytes


class ArchiveWriteError(BundleError):
    """Unrecoverable I/O failure while writing or hashing the archive."""

    pass


# 📦🗜️🔚
