#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Compilation of static ignore rules and .gitignore lines into regex matchers.

The .gitignore translation is deliberately simple: ``.`` is escaped, ``*``
matches any sequence and a trailing ``/`` is optional. Negation (``!pattern``),
anchoring (``/prefix``) and character classes are not supported and are
translated literally.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path
import re
from re import Pattern

import attrs
from provide.foundation import logger

from projzip.errors import GitignoreParseError, PatternCompilationError

# A translated line must start at a path segment boundary and end at one.
_SEGMENT_START = r"(?<![^/])"
_SEGMENT_END = r"(?=/|$)"


def convert_gitignore_pattern_to_regex(pattern: str) -> str:
    """Translate one trimmed .gitignore line into a regular expression source.

    >>> convert_gitignore_pattern_to_regex("*.png")
    '(?<![^/]).*\\\\.png(?=/|$)'
    >>> convert_gitignore_pattern_to_regex("build/")
    '(?<![^/])build/?(?=/|$)'
    """
    translated = pattern.replace(".", r"\.").replace("*", ".*")
    if translated.endswith("/"):
        translated = f"{translated}?"
    return f"{_SEGMENT_START}{translated}{_SEGMENT_END}"


def compile_pattern(source: str) -> Pattern[str]:
    try:
        return re.compile(source)
    except re.error as e:
        raise PatternCompilationError(f"Invalid ignore pattern {source!r}: {e}") from e


def parse_gitignore(gitignore_path: Path) -> list[str]:
    """Read a .gitignore file and return its translated regex sources.

    Blank lines and comments are skipped; duplicate lines are collapsed.

    Raises:
        GitignoreParseError: If the file exists but cannot be read or decoded.
    """
    if not gitignore_path.is_file():
        logger.debug("gitignore.missing", path=str(gitignore_path))
        return []

    try:
        lines = gitignore_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise GitignoreParseError(f"Cannot read {gitignore_path}: {e}") from e

    sources: list[str] = []
    for line in lines:
        if not line.strip() or line.startswith("#"):
            continue
        source = convert_gitignore_pattern_to_regex(line.strip())
        if source not in sources:
            sources.append(source)
    return sources


def _compile_all(sources: Iterable[str], origin: str) -> list[Pattern[str]]:
    compiled: list[Pattern[str]] = []
    for source in sources:
        try:
            compiled.append(compile_pattern(source))
        except PatternCompilationError as e:
            logger.debug("patterns.compile.dropped", origin=origin, pattern=source, error=str(e))
    return compiled


@attrs.define(frozen=True, slots=True)
class IgnorePatternSet:
    """Immutable set of compiled ignore patterns for one bundling session.

    Matching is set membership: a path is ignored if any pattern matches,
    regardless of order.
    """

    static_patterns: tuple[Pattern[str], ...] = ()
    gitignore_patterns: tuple[Pattern[str], ...] = ()

    @classmethod
    def compile(
        cls,
        static_rules: Sequence[str],
        gitignore_path: Path | None = None,
    ) -> "IgnorePatternSet":
        """Compile static rules and, when given, the lines of ``gitignore_path``.

        An unreadable or undecodable .gitignore leaves only the static rules;
        individual patterns that fail to compile are dropped.
        """
        static_patterns = _compile_all(static_rules, origin="static")

        gitignore_patterns: list[Pattern[str]] = []
        if gitignore_path is not None:
            try:
                gitignore_patterns = _compile_all(parse_gitignore(gitignore_path), origin="gitignore")
            except GitignoreParseError as e:
                logger.warning(
                    "gitignore.parse.fallback",
                    path=str(gitignore_path),
                    error=str(e),
                )

        logger.info(
            "patterns.compiled",
            static=len(static_patterns),
            gitignore=len(gitignore_patterns),
        )
        return cls(tuple(static_patterns), tuple(gitignore_patterns))

    @property
    def patterns(self) -> tuple[Pattern[str], ...]:
        return self.static_patterns + self.gitignore_patterns

    def matches(self, relative_path: str) -> bool:
        """Return True if any pattern matches ``relative_path`` (forward slashes)."""
        return any(pattern.search(relative_path) for pattern in self.patterns)

    def __len__(self) -> int:
        return len(self.static_patterns) + len(self.gitignore_patterns)


# 📦🗜️🔚
