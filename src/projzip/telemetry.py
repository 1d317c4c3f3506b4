#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Telemetry sink and log enrichment for projzip operations."""

from typing import Protocol

from provide.foundation import logger
from provide.foundation.eventsets.types import EventMapping, EventSet, FieldMapping

from projzip.metadata import IgnoredExtensionTally

EXTENSION_IGNORED_EVENT = "bundle.extension.ignored"

EVENT_SET = EventSet(
    name="projzip",
    description="Project bundling event enrichment",
    mappings=[
        EventMapping(
            name="projzip_stage",
            visual_markers={
                "patterns": "🎯",
                "traversal": "📂",
                "archive": "🗜️",
                "bundle": "📦",
                "default": "❓",
            },
            default_key="default",
        ),
        EventMapping(
            name="projzip_status",
            visual_markers={
                "start": "🚀",
                "complete": "🎉",
                "skipped": "⏭️",
                "limit_exceeded": "🛑",
                "failure": "❌",
                "fallback": "⚠️",
                "default": "➡️",
            },
            default_key="default",
        ),
    ],
    field_mappings=[
        FieldMapping(
            log_key="projzip.stage",
            event_set_name="projzip",
            description="Bundling stage",
        ),
        FieldMapping(
            log_key="projzip.status",
            event_set_name="projzip",
            description="Bundling stage status",
        ),
        FieldMapping(
            log_key="count",
            event_set_name="projzip",
            description="Number of files skipped for an extension",
            value_type="integer",
        ),
        FieldMapping(
            log_key="filename_ext",
            event_set_name="projzip",
            description="File extension that is not allow-listed",
            value_type="string",
        ),
        FieldMapping(
            log_key="file_count",
            event_set_name="projzip",
            description="Number of files in the archive",
            value_type="integer",
        ),
        FieldMapping(
            log_key="total_size_bytes",
            event_set_name="projzip",
            description="Total size of the eligible files",
            value_type="integer",
        ),
        FieldMapping(
            log_key="max_bytes",
            event_set_name="projzip",
            description="Configured project size limit",
            value_type="integer",
        ),
    ],
    priority=90,
)


class TelemetrySink(Protocol):
    """Receives aggregate bundling telemetry."""

    def bundle_extension_ignored(self, count: int, filename_ext: str) -> None: ...


class LoggingTelemetrySink:
    """Default sink: one structured log event per ignored extension."""

    def bundle_extension_ignored(self, count: int, filename_ext: str) -> None:
        logger.info(
            EXTENSION_IGNORED_EVENT,
            count=count,
            filename_ext=filename_ext,
            **{"projzip.stage": "traversal", "projzip.status": "skipped"},
        )


class CollectingTelemetrySink:
    """Keeps every event it receives and optionally forwards it to another sink."""

    def __init__(self, forward_to: TelemetrySink | None = None) -> None:
        self.forward_to = forward_to
        self.events: list[tuple[int, str]] = []

    def bundle_extension_ignored(self, count: int, filename_ext: str) -> None:
        self.events.append((count, filename_ext))
        if self.forward_to is not None:
            self.forward_to.bundle_extension_ignored(count=count, filename_ext=filename_ext)

    def as_dict(self) -> dict[str, int]:
        return {filename_ext: count for count, filename_ext in self.events}


def emit_ignored_extensions(tally: IgnoredExtensionTally, sink: TelemetrySink) -> int:
    """Report the tally as one event per distinct extension; never per file.

    Returns:
        Number of events emitted.
    """
    emitted = 0
    for extension, count in tally:
        sink.bundle_extension_ignored(count=count, filename_ext=extension)
        emitted += 1
    return emitted


# 📦🗜️🔚
