#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""TODO: Add module docstring."""

from pathlib import Path

from provide.foundation.context import CLIContext
import pytest

from projzip.progress import ProgressReporter


def test_disabled_reporter_is_silent(capsys):
    reporter = ProgressReporter(enabled=False)
    with reporter.scope("Bundling project") as progress_scope:
        progress_scope.count = 3
        reporter.file_progress(Path("/p/a.py"), "included", root_dir=Path("/p"))

    assert capsys.readouterr().out == ""


def test_json_mode_disables_output(capsys):
    reporter = ProgressReporter(enabled=True, cli_context=CLIContext(json_output=True))
    assert reporter.enabled is False
    reporter.operation_start("Bundling project")
    assert capsys.readouterr().out == ""


def test_scope_reports_start_and_count(capsys):
    reporter = ProgressReporter(enabled=True)
    with reporter.scope("Collecting files") as progress_scope:
        progress_scope.count = 7

    out = capsys.readouterr().out
    assert "Collecting files..." in out
    assert "Collecting files complete: 7 items" in out


def test_scope_skips_end_line_on_error(capsys):
    reporter = ProgressReporter(enabled=True)
    with pytest.raises(RuntimeError), reporter.scope("Collecting files"):
        raise RuntimeError("boom")

    assert "complete" not in capsys.readouterr().out


def test_file_progress_relative_path_without_emoji(capsys):
    reporter = ProgressReporter(enabled=True, cli_context=CLIContext(no_emoji=True))
    reporter.file_progress(Path("/p/sub/c.py"), "skipped", root_dir=Path("/p"), details="deleted")

    assert "- Skipped: sub/c.py (deleted)" in capsys.readouterr().out


# 📦🗜️🔚
