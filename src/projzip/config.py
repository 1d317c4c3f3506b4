#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

from collections.abc import Iterable
from pathlib import Path

import attrs
from provide.foundation import logger
from provide.foundation.config.base import BaseConfig, field

from projzip.errors import ConfigurationError, InvalidPathError

DEFAULT_BATCH_SIZE = 50
GITIGNORE_FILENAME = ".gitignore"

# Regular expressions matched with re.search against the forward-slash path
# relative to the bundling root.
DEFAULT_IGNORE_PATTERNS: list[str] = [
    r"(^|/)\.aws-sam(/|$)",
    r"(^|/)\.svn(/|$)",
    r"(^|/)\.hg(/|$)",
    r"(^|/)\.rvm(/|$)",
    r"(^|/)\.git(/|$)",
    r"(^|/)\.gitignore$",
    r"(^|/)\.project$",
    r"(^|/)\.gem(/|$)",
    r"(^|/)\.idea(/|$)",
    r"\.zip$",
    r"\.bin$",
    r"\.png$",
    r"\.jpg$",
    r"\.svg$",
    r"\.pyc$",
    r"(^|/)(license|License|LICENSE)\.(txt|md)$",
    r"(^|/)node_modules(/|$)",
    r"(^|/)build(/|$)",
    r"(^|/)dist(/|$)",
]

# Source files conventionally named without a recognised extension.
WELL_KNOWN_SOURCE_FILES: list[str] = ["Dockerfile", "Dockerfile.build"]

ALLOWED_CODE_EXTENSIONS: list[str] = [
    "abap", "ada", "adb", "ads", "apex", "applescript", "as", "asm", "au3", "bas",
    "bat", "c", "cbl", "cc", "cfc", "cfm", "clj", "cljs", "cls", "cmake", "cob",
    "cobra", "coffee", "cpp", "cs", "cshtml", "css", "csx", "cxx", "d", "dart",
    "dfm", "dockerfile", "dpr", "e", "el", "elm", "erl", "ex", "exs", "f", "f90",
    "for", "fs", "fsx", "gd", "go", "gradle", "groovy", "h", "hack", "hh", "hpp",
    "hrl", "hs", "htm", "html", "hx", "ini", "ino", "ipynb", "java", "jl", "js",
    "json", "jsx", "kt", "kts", "less", "lisp", "lua", "m", "makefile", "matlab",
    "md", "mjs", "ml", "mli", "nim", "nix", "php", "pl", "pm", "pp", "pro",
    "properties", "ps1", "psd1", "psm1", "py", "r", "rb", "rs", "sass", "scala",
    "scm", "scss", "sh", "sql", "svelte", "swift", "tcl", "tf", "toml", "ts",
    "tsx", "txt", "v", "vb", "vhd", "vue", "xml", "yaml", "yml", "zig",
]  # fmt: skip


def normalize_extensions(value: Iterable[str]) -> list[str]:
    """Lower-case extensions and strip any leading dot, e.g. ``.PY`` -> ``py``."""
    if isinstance(value, str):
        value = [value]
    return sorted({ext.strip().lstrip(".").lower() for ext in value if ext.strip().lstrip(".")})


def _get_default_allowed_extensions() -> list[str]:
    return normalize_extensions(ALLOWED_CODE_EXTENSIONS)


def _get_default_ignore_patterns() -> list[str]:
    return list(DEFAULT_IGNORE_PATTERNS)


def _get_default_well_known_files() -> list[str]:
    return list(WELL_KNOWN_SOURCE_FILES)


def _convert_optional_path(value: str | Path | None) -> Path | None:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    try:
        return Path(value)
    except TypeError as e:
        raise TypeError(f"Cannot convert value of type {type(value)} to Path or None.") from e


def _convert_optional_int(value: str | int | None) -> int | None:
    if value is None or isinstance(value, int):
        return value
    return int(value)


@attrs.define(kw_only=True, slots=True)
class ProjzipConfig(BaseConfig):
    root_dir: Path = field(  # noqa: RUF009
        default=Path(),
        converter=Path,
        validator=attrs.validators.instance_of(Path),
        description="Project root directory",
        env_var="PROJZIP_ROOT_DIR",
    )
    source_folder: Path | None = field(  # noqa: RUF009
        default=None,
        converter=_convert_optional_path,
        validator=attrs.validators.optional(attrs.validators.instance_of(Path)),
        description="Narrower folder inside the project root to bundle instead of the root",
        env_var="PROJZIP_SOURCE_FOLDER",
    )
    max_project_size_bytes: int | None = field(
        default=None,
        converter=_convert_optional_int,
        validator=attrs.validators.optional(attrs.validators.instance_of(int)),
        description="Maximum total size of eligible files (unbounded if unset)",
        env_var="PROJZIP_MAX_PROJECT_SIZE",
    )
    allowed_extensions: list[str] = field(  # noqa: RUF009
        factory=_get_default_allowed_extensions,
        converter=normalize_extensions,
        validator=attrs.validators.deep_iterable(
            member_validator=attrs.validators.instance_of(str),
            iterable_validator=attrs.validators.instance_of(list),
        ),
        description="Source code file extensions eligible for upload",
    )
    well_known_files: list[str] = field(  # noqa: RUF009
        factory=_get_default_well_known_files,
        validator=attrs.validators.deep_iterable(
            member_validator=attrs.validators.instance_of(str),
            iterable_validator=attrs.validators.instance_of(list),
        ),
        description="File names always eligible regardless of extension",
    )
    ignore_patterns: list[str] = field(  # noqa: RUF009
        factory=_get_default_ignore_patterns,
        validator=attrs.validators.deep_iterable(
            member_validator=attrs.validators.instance_of(str),
            iterable_validator=attrs.validators.instance_of(list),
        ),
        description="Static ignore rules (regular expressions)",
    )
    use_gitignore: bool = field(
        default=True,
        description="Translate the bundling root's .gitignore into ignore patterns",
        env_var="PROJZIP_USE_GITIGNORE",
    )
    batch_size: int = field(
        default=DEFAULT_BATCH_SIZE,
        validator=attrs.validators.instance_of(int),
        description="Files per concurrent read task",
        env_var="PROJZIP_BATCH_SIZE",
    )
    max_workers: int | None = field(
        default=None,
        converter=_convert_optional_int,
        validator=attrs.validators.optional(attrs.validators.instance_of(int)),
        description="Reader thread pool size (executor default if unset)",
        env_var="PROJZIP_MAX_WORKERS",
    )
    show_progress: bool = field(
        default=False,
        description="Show progress during bundling",
        env_var="PROJZIP_SHOW_PROGRESS",
    )

    def __attrs_post_init__(self) -> None:
        super().__attrs_post_init__()
        self.validate()

    @property
    def bundling_root(self) -> Path:
        """Base directory for archive-relative paths."""
        return self.source_folder if self.source_folder is not None else self.root_dir

    def validate(self) -> None:
        try:
            self.root_dir = self.root_dir.resolve()
            if not self.root_dir.exists():
                raise InvalidPathError(f"Cannot determine project root: '{self.root_dir}' not found.")
            if not self.root_dir.is_dir():
                raise InvalidPathError(f"Project root '{self.root_dir}' is not a directory.")
        except OSError as e:
            raise ConfigurationError(f"Root directory issue: {e}") from e

        if self.source_folder is not None:
            self.source_folder = self._resolve_source_folder(self.source_folder)

        if self.max_project_size_bytes is not None and self.max_project_size_bytes < 0:
            raise ConfigurationError(
                f"max_project_size_bytes must not be negative, got {self.max_project_size_bytes}."
            )
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be at least 1, got {self.batch_size}.")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {self.max_workers}.")

        logger.debug("config.initialized", config=str(self))

    def select_source_folder(self, folder: Path | str | None) -> Path:
        """Narrow the bundling root to ``folder`` (``None`` restores the project root)."""
        if folder is None:
            self.source_folder = None
        else:
            self.source_folder = self._resolve_source_folder(Path(folder))
        logger.info("config.source_folder.selected", bundling_root=str(self.bundling_root))
        return self.bundling_root

    def _resolve_source_folder(self, folder: Path) -> Path:
        if not folder.is_absolute():
            folder = self.root_dir / folder
        try:
            resolved = folder.resolve()
        except OSError as e:
            raise ConfigurationError(f"Source folder issue: {e}") from e
        if not resolved.is_dir():
            raise InvalidPathError(f"Source folder '{resolved}' is not a directory.")
        if not resolved.is_relative_to(self.root_dir):
            raise InvalidPathError(
                f"Source folder '{resolved}' is outside the project root '{self.root_dir}'."
            )
        return resolved


# 📦🗜️🔚
