#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""TODO: Add module docstring."""

from pathlib import Path
import re

import pytest

from projzip.config import DEFAULT_IGNORE_PATTERNS
from projzip.errors import GitignoreParseError, PatternCompilationError
from projzip.patterns import (
    IgnorePatternSet,
    compile_pattern,
    convert_gitignore_pattern_to_regex,
    parse_gitignore,
)


def _matches(gitignore_line: str, path: str) -> bool:
    return re.search(convert_gitignore_pattern_to_regex(gitignore_line), path) is not None


@pytest.mark.parametrize(
    "path, expected",
    [
        ("photo.png", True),
        ("assets/photo.png", True),
        ("photo.pngx", False),
        ("photo_png", False),
    ],
)
def test_wildcard_extension_line(path: str, expected: bool):
    assert _matches("*.png", path) is expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("build", True),
        ("build/", True),
        ("build/x.py", True),
        ("src/build/x.py", True),
        ("buildx", False),
        ("rebuild", False),
        ("rebuild/x.py", False),
    ],
)
def test_trailing_slash_line(path: str, expected: bool):
    assert _matches("build/", path) is expected


def test_dot_is_literal():
    assert _matches("setup.cfg", "setup.cfg")
    assert not _matches("setup.cfg", "setupxcfg")


def test_parse_gitignore_skips_comments_blanks_and_duplicates(tmp_path: Path):
    gitignore = tmp_path / ".gitignore"
    gitignore.write_text("# comment\n\n*.log\n   \n*.log\ndist/\n  tmp  \n", encoding="utf-8")

    sources = parse_gitignore(gitignore)

    assert sources == [
        convert_gitignore_pattern_to_regex("*.log"),
        convert_gitignore_pattern_to_regex("dist/"),
        convert_gitignore_pattern_to_regex("tmp"),
    ]


def test_parse_gitignore_missing_file(tmp_path: Path):
    assert parse_gitignore(tmp_path / ".gitignore") == []


def test_parse_gitignore_undecodable_file(tmp_path: Path):
    gitignore = tmp_path / ".gitignore"
    gitignore.write_bytes(b"\xff\xfe\x00*.log\x80\x81\n")
    with pytest.raises(GitignoreParseError):
        parse_gitignore(gitignore)


def test_compile_pattern_rejects_invalid_regex():
    with pytest.raises(PatternCompilationError):
        compile_pattern("(")


def test_malformed_gitignore_line_is_dropped(tmp_path: Path):
    gitignore = tmp_path / ".gitignore"
    gitignore.write_text("foo(\n*.log\n", encoding="utf-8")

    pattern_set = IgnorePatternSet.compile([], gitignore)

    assert len(pattern_set.gitignore_patterns) == 1
    assert pattern_set.matches("logs/app.log")
    assert not pattern_set.matches("foo(")


def test_undecodable_gitignore_falls_back_to_static_rules(tmp_path: Path):
    gitignore = tmp_path / ".gitignore"
    gitignore.write_bytes(b"\x89PNG\r\n\x1a\n\xff\xff")

    pattern_set = IgnorePatternSet.compile(DEFAULT_IGNORE_PATTERNS, gitignore)

    assert pattern_set.gitignore_patterns == ()
    assert len(pattern_set.static_patterns) == len(DEFAULT_IGNORE_PATTERNS)
    assert pattern_set.matches("node_modules/x.js")


def test_compile_without_gitignore_path():
    pattern_set = IgnorePatternSet.compile([r"\.tmp$"])
    assert len(pattern_set) == 1
    assert pattern_set.matches("a/b.tmp")
    assert not pattern_set.matches("a/b.py")


@pytest.mark.parametrize(
    "path, expected",
    [
        (".git/config", True),
        ("vendor/.git/HEAD", True),
        (".github/workflows/ci.yml", False),
        ("node_modules/left-pad/index.js", True),
        ("docs/node_modules_guide.md", False),
        ("LICENSE.md", True),
        ("docs/license.txt", True),
        ("licenses.txt", False),
        ("dist/app.js", True),
        ("distance.py", False),
        ("archive.zip", True),
        ("src/app.py", False),
    ],
)
def test_default_static_rules(default_patterns: IgnorePatternSet, path: str, expected: bool):
    assert default_patterns.matches(path) is expected


def test_matching_does_not_depend_on_pattern_order():
    rules = [r"\.log$", r"(^|/)tmp(/|$)", r"\.bak$"]
    forward = IgnorePatternSet.compile(rules)
    backward = IgnorePatternSet.compile(list(reversed(rules)))
    for path in ["a.log", "tmp/x.py", "x.bak", "src/main.py"]:
        assert forward.matches(path) == backward.matches(path)


# 📦🗜️🔚
