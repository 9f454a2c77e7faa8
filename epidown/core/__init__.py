"""
Core layer module.

Contains domain models, interfaces, and exception definitions.
"""

from epidown.core.exceptions import (
    ConfigError,
    DatabaseError,
    DownloadError,
    EpiDownError,
    EpisodeNotFoundError,
    IndexerError,
    IndexerRequestError,
    InvalidArgumentError,
    NeedDecisionError,
    SearchError,
    TorrentAddError,
)

__all__ = [
    # Exceptions
    'EpiDownError',
    'InvalidArgumentError',
    'SearchError',
    'EpisodeNotFoundError',
    'NeedDecisionError',
    'IndexerError',
    'IndexerRequestError',
    'DownloadError',
    'TorrentAddError',
    'ConfigError',
    'DatabaseError',
]
