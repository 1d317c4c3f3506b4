#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""TODO: Add module docstring."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from projzip.config import GITIGNORE_FILENAME, ProjzipConfig
from projzip.eligibility import EligibilityFilter
from projzip.errors import RepoSizeLimitError
from projzip.metadata import FileRecord
from projzip.patterns import IgnorePatternSet
from projzip.telemetry import CollectingTelemetrySink
from projzip.traversal import ProjectTraverser
from tests.fixtures.project import SAMPLE_PROJECT_ELIGIBLE, SAMPLE_PROJECT_IGNORED_EXTENSIONS


def _traverser(
    root: Path, telemetry: CollectingTelemetrySink | None = None, **config_kwargs
) -> ProjectTraverser:
    config = ProjzipConfig(root_dir=root, **config_kwargs)
    gitignore = config.bundling_root / GITIGNORE_FILENAME if config.use_gitignore else None
    patterns = IgnorePatternSet.compile(config.ignore_patterns, gitignore)
    return ProjectTraverser(
        config.bundling_root,
        EligibilityFilter.from_config(config, patterns),
        telemetry=telemetry if telemetry is not None else CollectingTelemetrySink(),
    )


def test_traverse_sample_project(sample_project: Path):
    result = _traverser(sample_project).traverse()

    assert sorted(record.relative_path for record in result.files) == sorted(SAMPLE_PROJECT_ELIGIBLE)
    assert result.ignored_extensions.as_dict() == SAMPLE_PROJECT_IGNORED_EXTENSIONS
    assert result.total_size_bytes == sum(record.length for record in result.files)
    for record in result.files:
        assert record.path.is_absolute()
        assert record.length == record.path.stat().st_size


def test_ignored_directories_are_not_descended(sample_project: Path):
    root = sample_project.resolve()
    visited = {path.relative_to(root).as_posix() for path in _traverser(sample_project).iter_candidates()}

    assert "sub/c.py" in visited
    assert not any(path.startswith(("build/", "node_modules/", "secrets/")) for path in visited)


def test_gitignore_disabled_includes_gitignored_files(sample_project: Path):
    result = _traverser(sample_project, use_gitignore=False).traverse()
    assert "secrets/key.py" in [record.relative_path for record in result.files]


def test_iter_candidates_is_lazy(sample_project: Path):
    candidates = _traverser(sample_project).iter_candidates()
    assert isinstance(candidates, Iterator)
    assert isinstance(next(candidates), Path)


def test_ignored_extension_telemetry(ignored_extensions_project: Path):
    sink = CollectingTelemetrySink()
    result = _traverser(ignored_extensions_project, telemetry=sink).traverse()

    assert [record.relative_path for record in result.files] == ["main.py"]
    assert sink.events == [(3, "bin"), (2, "exe")]
    assert result.ignored_extensions.total() == 5


def test_size_limit_exceeded(sized_project: Path):
    sink = CollectingTelemetrySink()
    traverser = _traverser(sized_project, telemetry=sink)

    with pytest.raises(RepoSizeLimitError) as exc_info:
        traverser.traverse(max_bytes=25)

    assert exc_info.value.max_bytes == 25
    assert exc_info.value.total_bytes == 30
    assert "too large" in str(exc_info.value)
    assert sink.events == []


def test_size_limit_not_exceeded_at_boundary(sized_project: Path):
    result = _traverser(sized_project).traverse(max_bytes=50)
    assert len(result.files) == 5
    assert result.total_size_bytes == 50


def test_zero_size_limit_with_only_empty_files(tmp_path: Path):
    (tmp_path / "empty.py").write_text("")
    result = _traverser(tmp_path).traverse(max_bytes=0)
    assert [record.relative_path for record in result.files] == ["empty.py"]


def test_vanished_file_is_skipped(sample_project: Path, monkeypatch: pytest.MonkeyPatch):
    original = FileRecord.from_path

    def flaky_from_path(file_path: Path, root: Path) -> FileRecord:
        if file_path.name == "a.py":
            raise FileNotFoundError(file_path)
        return original(file_path, root)

    monkeypatch.setattr(FileRecord, "from_path", flaky_from_path)
    result = _traverser(sample_project).traverse()

    paths = [record.relative_path for record in result.files]
    assert "a.py" not in paths
    assert "README.md" in paths


def test_symlinks_are_not_followed(sample_project: Path):
    try:
        (sample_project / "linked.py").symlink_to(sample_project / "a.py")
        (sample_project / "linked_dir").symlink_to(sample_project / "sub", target_is_directory=True)
    except OSError as e:  # pragma: no cover
        pytest.skip(f"Could not create symlinks: {e}")

    result = _traverser(sample_project).traverse()

    paths = [record.relative_path for record in result.files]
    assert "linked.py" not in paths
    assert not any(path.startswith("linked_dir/") for path in paths)


def test_source_folder_paths_are_relative_to_it(sample_project: Path):
    result = _traverser(sample_project, source_folder="sub").traverse()
    assert {record.relative_path for record in result.files} == {"c.py", "helper.js"}
    assert result.ignored_extensions.as_dict() == {"bin": 1}


# 📦🗜️🔚
