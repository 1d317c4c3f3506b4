#
# SPDX-FileCopyrightText: Copyright (c) provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""projzip: selects the eligible source files of a project and bundles them
into a deterministic, checksummed zip archive.

Integrated with provide-foundation for logging, configuration and resilience.
"""

from provide.foundation import logger
from provide.foundation.utils.versioning import get_version

from projzip.archive import ArchiveWriter
from projzip.bundler import BundleService, compute_checksum
from projzip.config import ProjzipConfig
from projzip.core import bundle_project, list_eligible_files
from projzip.eligibility import EligibilityFilter
from projzip.errors import (
    ArchiveWriteError,
    BundleError,
    ConfigurationError,
    GitignoreParseError,
    InvalidPathError,
    PatternCompilationError,
    RepoSizeLimitError,
)
from projzip.metadata import BundleResult, EligibilityDecision, FileRecord, TraversalResult
from projzip.patterns import IgnorePatternSet, convert_gitignore_pattern_to_regex, parse_gitignore
from projzip.reader import FileReader
from projzip.telemetry import CollectingTelemetrySink, LoggingTelemetrySink, TelemetrySink
from projzip.traversal import ProjectTraverser

logger.debug(
    "projzip.init",
    components_available=["BundleService", "ProjectTraverser", "ArchiveWriter", "EligibilityFilter"],
)

# Public API exports
__all__ = [
    # Components
    "ArchiveWriteError",
    "ArchiveWriter",
    "BundleError",
    # Data structures
    "BundleResult",
    "BundleService",
    "CollectingTelemetrySink",
    "ConfigurationError",
    "EligibilityDecision",
    "EligibilityFilter",
    "FileReader",
    "FileRecord",
    "GitignoreParseError",
    "IgnorePatternSet",
    "InvalidPathError",
    "LoggingTelemetrySink",
    "PatternCompilationError",
    "ProjectTraverser",
    # Configuration
    "ProjzipConfig",
    "RepoSizeLimitError",
    "TelemetrySink",
    "TraversalResult",
    # Core operations
    "bundle_project",
    "compute_checksum",
    "convert_gitignore_pattern_to_regex",
    "list_eligible_files",
    "parse_gitignore",
]

__version__ = get_version("projzip", caller_file=__file__)

# 📦🗜️🔚
