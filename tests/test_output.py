#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""TODO: Add module docstring."""

from pathlib import Path

import pytest

from projzip.metadata import BundleResult
from projzip.output import display_ignored_extensions, format_size, generate_summary_text


@pytest.mark.parametrize(
    "num_bytes, expected",
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1536, "1.5 KiB"),
        (1024 * 1024, "1.0 MiB"),
        (3 * 1024**3, "3.0 GiB"),
    ],
)
def test_format_size(num_bytes: int, expected: str):
    assert format_size(num_bytes) == expected


def test_display_ignored_extensions_plain(capsys):
    display_ignored_extensions({"bin": 3, "exe": 2, "": 1}, force_plain_text=True)
    out = capsys.readouterr().out

    assert "Files Skipped by Extension (6 files)" in out
    assert "bin" in out
    assert "(none)" in out
    assert out.index("bin") < out.index("exe")


def test_display_ignored_extensions_table(capsys):
    display_ignored_extensions({"bin": 3})
    out = capsys.readouterr().out
    assert "Extension" in out
    assert "bin" in out


def test_display_ignored_extensions_empty(capsys):
    display_ignored_extensions({})
    assert "No files were skipped for their extension." in capsys.readouterr().out


def test_generate_summary_text():
    result = BundleResult(
        archive_path=Path("/tmp/projzip-abc.zip"),
        checksum="c2hhMjU2",
        total_size_bytes=2048,
        file_count=3,
        archive_size_bytes=900,
    )

    text = generate_summary_text(result, None, {"bin": 2}, 0.5)

    assert text.startswith("### BUNDLE SUMMARY ###")
    assert text.endswith("### END BUNDLE SUMMARY ###")
    assert "- Checksum (sha256, base64): c2hhMjU2" in text
    assert "- Files Included: 3" in text
    assert "2048 bytes (2.0 KiB)" in text
    assert "- Size Limit: unbounded" in text
    assert "- Files Skipped by Extension: 2" in text


def test_generate_summary_text_with_limit():
    result = BundleResult(archive_path=Path("a.zip"), checksum="x", total_size_bytes=10)
    assert "- Size Limit: 10 / 100 bytes" in generate_summary_text(result, 100, {}, 0.1)


# 📦🗜️🔚
