#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Core orchestration for bundling and listing operations."""

import time

from provide.foundation import logger
from provide.foundation.console import pout
from provide.foundation.context import CLIContext

from projzip.bundler import BundleService
from projzip.config import ProjzipConfig
from projzip.metadata import BundleResult, TraversalResult
from projzip.output import display_ignored_extensions
from projzip.progress import ProgressReporter
from projzip.telemetry import CollectingTelemetrySink, LoggingTelemetrySink, TelemetrySink


def bundle_project(
    config: ProjzipConfig,
    telemetry: TelemetrySink | None = None,
    cli_context: CLIContext | None = None,
    show_ignored: bool = False,
) -> BundleResult:
    """Bundle the eligible files of ``config.bundling_root`` into a temporary archive.

    Args:
        config: Configuration for bundling
        telemetry: Sink for ignored-extension events (logs them if omitted)
        cli_context: Optional CLI context for JSON output
        show_ignored: Display the ignored-extension tally after bundling

    Returns:
        BundleResult; the caller owns the archive file.
    """
    start_time = time.monotonic()
    sink = CollectingTelemetrySink(forward_to=telemetry if telemetry is not None else LoggingTelemetrySink())
    progress = ProgressReporter(enabled=config.show_progress, cli_context=cli_context)

    service = BundleService(config, telemetry=sink, progress_reporter=progress)
    result = service.bundle()

    log_bundle_summary(config, result, sink.as_dict(), time.monotonic() - start_time)

    if show_ignored and not (cli_context and cli_context.json_output):
        display_ignored_extensions(sink.as_dict())

    return result


def list_eligible_files(
    config: ProjzipConfig,
    telemetry: TelemetrySink | None = None,
    cli_context: CLIContext | None = None,
    show_ignored: bool = False,
) -> TraversalResult:
    """List the files that would be included in a bundle, without writing one.

    Args:
        config: Configuration for listing
        telemetry: Sink for ignored-extension events (logs them if omitted)
        cli_context: Optional CLI context for JSON output
        show_ignored: Display the ignored-extension tally after listing
    """
    logger.info("list.start", root_dir=str(config.bundling_root))
    start_time = time.monotonic()

    progress = ProgressReporter(enabled=config.show_progress, cli_context=cli_context)
    service = BundleService(
        config,
        telemetry=telemetry if telemetry is not None else LoggingTelemetrySink(),
        progress_reporter=progress,
    )
    with progress.scope("Collecting files") as progress_scope:
        traversal = service.create_traverser().traverse(config.max_project_size_bytes)
        progress_scope.count = len(traversal.files)

    logger.info(
        "list.complete",
        file_count=len(traversal.files),
        total_size_bytes=traversal.total_size_bytes,
        duration_seconds=time.monotonic() - start_time,
    )

    ignored = traversal.ignored_extensions.as_dict()
    if cli_context and cli_context.json_output:
        pout(
            {
                "files": [record.relative_path for record in traversal.files],
                "count": len(traversal.files),
                "total_size_bytes": traversal.total_size_bytes,
                "ignored_extensions": ignored,
            },
            json_key="list",
            ctx=cli_context,
        )
    elif not traversal.files:
        pout("\nNo eligible files found.")
    else:
        pout("\n--- Files that would be included in bundle ---")
        for i, record in enumerate(traversal.files, start=1):
            pout(f"{i:4d}: {record.relative_path} ({record.length} bytes)")
        pout("--- End of list ---")

    if show_ignored and not (cli_context and cli_context.json_output):
        display_ignored_extensions(ignored)

    return traversal


def log_bundle_summary(
    config: ProjzipConfig,
    result: BundleResult,
    ignored_extensions: dict[str, int],
    elapsed: float,
) -> None:
    """Log bundle summary statistics."""
    logger.info(
        "bundle.summary",
        file_count=result.file_count,
        total_size_bytes=result.total_size_bytes,
        archive_size_bytes=result.archive_size_bytes,
        max_bytes=config.max_project_size_bytes,
        extension_ignored=sum(ignored_extensions.values()),
    )
    logger.debug("bundle.summary.ignored_extensions", ignored_extensions=ignored_extensions, elapsed=elapsed)


# 📦🗜️🔚
