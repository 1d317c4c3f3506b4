#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Configuration for pytest."""

from collections.abc import Iterator
from pathlib import Path

import pytest

pytest_plugins = [
    "tests.fixtures.cli",
    "tests.fixtures.config",
    "tests.fixtures.project",
]


@pytest.fixture
def cleanup_archives() -> Iterator[list[Path]]:
    """Archives appended to the yielded list are deleted after the test."""
    archives: list[Path] = []
    yield archives
    for archive in archives:
        archive.unlink(missing_ok=True)


# 📦🗜️🔚
