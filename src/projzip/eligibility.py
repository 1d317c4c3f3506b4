#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Per-file eligibility decisions for bundle candidates."""

from pathlib import Path

from provide.foundation import logger

from projzip.config import ProjzipConfig, normalize_extensions
from projzip.metadata import (
    EXCLUDED_BY_EXTENSION,
    EXCLUDED_BY_PATTERN,
    INCLUDED,
    EligibilityDecision,
    relative_posix_path,
)
from projzip.patterns import IgnorePatternSet


def file_extension(path: Path) -> str:
    """Extension after the last dot, lower-cased and without the dot ('' if none)."""
    return path.suffix[1:].lower()


class EligibilityFilter:
    """Decide whether a file may be uploaded.

    Order of evaluation:
    1. Directories are always included so traversal can descend.
    2. Well-known names or allow-listed extensions pass the extension check;
       anything else is excluded as ``extension-disallowed``.
    3. Any matching ignore pattern excludes as ``pattern-matched``.

    Decisions depend only on the path and the immutable pattern set.
    """

    def __init__(
        self,
        root_dir: Path,
        patterns: IgnorePatternSet,
        allowed_extensions: frozenset[str] | set[str] | list[str],
        well_known_files: frozenset[str] | set[str] | list[str] = frozenset(),
    ) -> None:
        self.root_dir = root_dir
        self.patterns = patterns
        self.allowed_extensions = frozenset(normalize_extensions(allowed_extensions))
        self.well_known_files = frozenset(well_known_files)

    @classmethod
    def from_config(cls, config: ProjzipConfig, patterns: IgnorePatternSet) -> "EligibilityFilter":
        return cls(
            root_dir=config.bundling_root,
            patterns=patterns,
            allowed_extensions=config.allowed_extensions,
            well_known_files=config.well_known_files,
        )

    def is_well_known(self, path: Path) -> bool:
        return path.name in self.well_known_files

    def is_extension_allowed(self, path: Path) -> bool:
        extension = file_extension(path)
        return bool(extension) and extension in self.allowed_extensions

    def is_ignored_by_pattern(self, path: Path) -> bool:
        """Match every pattern against the path relative to the bundling root."""
        try:
            candidate = relative_posix_path(path, self.root_dir)
        except ValueError:
            candidate = path.as_posix()
        return self.patterns.matches(candidate)

    def passes_extension_check(self, path: Path) -> bool:
        return self.is_well_known(path) or self.is_extension_allowed(path)

    def decide(self, path: Path, is_dir: bool | None = None) -> EligibilityDecision:
        if is_dir is None:
            is_dir = path.is_dir()
        if is_dir:
            return INCLUDED

        if not self.passes_extension_check(path):
            return EXCLUDED_BY_EXTENSION

        if self.is_ignored_by_pattern(path):
            logger.debug("eligibility.pattern.matched", path=str(path))
            return EXCLUDED_BY_PATTERN

        return INCLUDED


# 📦🗜️🔚
