#!/usr/bin/env python3
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#


from collections.abc import Callable
from pathlib import Path
import shutil
import time
from typing import Any, NoReturn

import attrs
import click
from provide.foundation import logger
from provide.foundation.cli.decorators import output_options
from provide.foundation.console import perr, pout
from provide.foundation.context import CLIContext

from projzip.config import DEFAULT_BATCH_SIZE, ProjzipConfig
from projzip.core import bundle_project, list_eligible_files
from projzip.errors import ArchiveWriteError, BundleError, RepoSizeLimitError
from projzip.metadata import BundleResult
from projzip.output import generate_summary_text
from projzip.telemetry import CollectingTelemetrySink, LoggingTelemetrySink

EXIT_FAILURE = 1
EXIT_TOO_LARGE = 2


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by the bundle and list commands."""
    options = [
        click.option(
            "--root-dir",
            "-d",
            type=click.Path(exists=True, file_okay=False, dir_okay=True, readable=True, path_type=Path),
            default=".",
            show_default=True,
            help="Project root directory.",
        ),
        click.option(
            "--source-folder",
            "-s",
            type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
            default=None,
            help="Bundle this folder (inside the project root) instead of the whole project.",
        ),
        click.option(
            "--max-size",
            "-m",
            type=click.IntRange(min=0),
            default=None,
            help="Fail if eligible files exceed this many bytes.",
        ),
        click.option(
            "--allow-ext",
            "-x",
            multiple=True,
            type=str,
            help="Allowed source extension (e.g. 'py'). Replaces the default list. Use multiple times.",
        ),
        click.option(
            "--no-gitignore",
            is_flag=True,
            default=False,
            help="Do not translate the root .gitignore into ignore patterns.",
        ),
        click.option(
            "--show-ignored",
            is_flag=True,
            default=False,
            help="Show how many files were skipped per extension.",
        ),
        click.option(
            "--progress/--no-progress",
            default=False,
            help="Show progress while bundling.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _cli_context(ctx: click.Context, json_output: bool | None, no_color: bool, no_emoji: bool) -> CLIContext:
    if not hasattr(ctx, "obj") or ctx.obj is None:
        ctx.obj = CLIContext()
    cli_context = ctx.obj
    if json_output is not None:
        cli_context.json_output = json_output
    if no_color:
        cli_context.no_color = no_color
    if no_emoji:
        cli_context.no_emoji = no_emoji
    return cli_context


def _build_config(
    root_dir: Path,
    source_folder: Path | None,
    max_size: int | None,
    allow_ext: tuple[str, ...],
    no_gitignore: bool,
    progress: bool,
    **overrides: Any,
) -> ProjzipConfig:
    kwargs: dict[str, Any] = {
        "root_dir": root_dir.resolve(),
        "source_folder": source_folder,
        "max_project_size_bytes": max_size,
        "use_gitignore": not no_gitignore,
        "show_progress": progress,
        **overrides,
    }
    if allow_ext:
        kwargs["allowed_extensions"] = list(allow_ext)
    return ProjzipConfig(**kwargs)


def _handle_failure(error: Exception) -> NoReturn:
    if isinstance(error, RepoSizeLimitError):
        logger.error("cli.size_limit.exceeded", max_bytes=error.max_bytes, total_bytes=error.total_bytes)
        perr(f"Error: {error}")
        raise SystemExit(EXIT_TOO_LARGE) from None
    if isinstance(error, ArchiveWriteError):
        logger.critical(f"Archive error: {error}", exc_info=False)
        perr(f"Error: could not create the archive - {error}")
        raise SystemExit(EXIT_FAILURE) from None
    logger.critical(f"Configuration error: {error}", exc_info=False)
    perr(f"Error: {error}")
    raise SystemExit(EXIT_FAILURE) from None


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="projzip", message="%(package)s version %(version)s")
def cli() -> None:
    """
    projzip: select the eligible source files of a project and package them

    into a checksummed zip archive for upload.
    """


@cli.command(name="bundle", context_settings={"help_option_names": ["-h", "--help"]})
@common_options
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Move the archive here. [default: leave it in the temporary directory]",
)
@click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    default=DEFAULT_BATCH_SIZE,
    show_default=True,
    help="Files per concurrent read task.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Reader threads. [default: executor default]",
)
@output_options
@click.pass_context
def bundle_command(
    ctx: click.Context,
    root_dir: Path,
    source_folder: Path | None,
    max_size: int | None,
    allow_ext: tuple[str, ...],
    no_gitignore: bool,
    show_ignored: bool,
    progress: bool,
    output: Path | None,
    batch_size: int,
    workers: int | None,
    json_output: bool | None,
    no_color: bool,
    no_emoji: bool,
) -> None:
    """Bundles the eligible files of a project into a zip archive."""
    cli_context = _cli_context(ctx, json_output, no_color, no_emoji)
    logger.debug(
        "cli.bundle.arguments",
        root_dir=str(root_dir),
        source_folder=str(source_folder) if source_folder else None,
        max_size=max_size,
        allow_ext=list(allow_ext),
        no_gitignore=no_gitignore,
        output=str(output) if output else None,
        batch_size=batch_size,
        workers=workers,
    )

    start_time = time.monotonic()
    telemetry = CollectingTelemetrySink(forward_to=LoggingTelemetrySink())
    try:
        config = _build_config(
            root_dir,
            source_folder,
            max_size,
            allow_ext,
            no_gitignore,
            progress,
            batch_size=batch_size,
            max_workers=workers,
        )
        result = bundle_project(
            config, telemetry=telemetry, cli_context=cli_context, show_ignored=show_ignored
        )
        if output is not None:
            result = _move_archive(result, output)
    except BundleError as e:
        _handle_failure(e)

    if cli_context.json_output:
        pout(
            {
                "archive_path": str(result.archive_path),
                "checksum": result.checksum,
                "total_size_bytes": result.total_size_bytes,
                "file_count": result.file_count,
                "archive_size_bytes": result.archive_size_bytes,
                "ignored_extensions": telemetry.as_dict(),
            },
            json_key="bundle",
            ctx=cli_context,
        )
    else:
        pout(
            generate_summary_text(
                result, config.max_project_size_bytes, telemetry.as_dict(), time.monotonic() - start_time
            ),
            ctx=cli_context,
        )
        pout(f"Bundle created: {result.archive_path}", ctx=cli_context)


def _move_archive(result: BundleResult, output: Path) -> BundleResult:
    target = output.resolve()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(result.archive_path), str(target))
    except OSError as e:
        result.archive_path.unlink(missing_ok=True)
        logger.debug("cli.archive.discarded", path=str(result.archive_path))
        raise ArchiveWriteError(f"Cannot move archive to {target}: {e}") from e
    logger.info("cli.archive.moved", source=str(result.archive_path), target=str(target))
    return attrs.evolve(result, archive_path=target)


@cli.command(name="list", context_settings={"help_option_names": ["-h", "--help"]})
@common_options
@output_options
@click.pass_context
def list_command(
    ctx: click.Context,
    root_dir: Path,
    source_folder: Path | None,
    max_size: int | None,
    allow_ext: tuple[str, ...],
    no_gitignore: bool,
    show_ignored: bool,
    progress: bool,
    json_output: bool | None,
    no_color: bool,
    no_emoji: bool,
) -> None:
    """Lists the files that would be bundled, without creating an archive."""
    cli_context = _cli_context(ctx, json_output, no_color, no_emoji)
    try:
        config = _build_config(root_dir, source_folder, max_size, allow_ext, no_gitignore, progress)
        list_eligible_files(config, cli_context=cli_context, show_ignored=show_ignored)
    except BundleError as e:
        _handle_failure(e)


if __name__ == "__main__":  # pragma: no cover
    cli()

# 📦🗜️🔚
