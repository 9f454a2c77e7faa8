"""
Exceptions module.

Contains the exception hierarchy for the EpiDown application.
All custom exceptions inherit from EpiDownError for consistent handling.
"""

from typing import Any, Dict, Optional


class EpiDownError(Exception):
    """
    Base exception for all EpiDown errors.

    All custom exceptions in the application should inherit from this class
    to enable consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
        context: Additional context information for debugging.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or 'UNKNOWN_ERROR'
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.context:
            return f'[{self.code}] {self.message} - Context: {self.context}'
        return f'[{self.code}] {self.message}'


class InvalidArgumentError(EpiDownError):
    """
    Exception raised when a job is started with an invalid argument.

    Attributes:
        argument_name: Name of the rejected argument.
        argument_value: The rejected value.
    """

    def __init__(
        self,
        message: str,
        argument_name: Optional[str] = None,
        argument_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if argument_name:
            ctx['argument_name'] = argument_name
        if argument_value is not None:
            ctx['argument_value'] = str(argument_value)
        super().__init__(message, 'INVALID_ARGUMENT', ctx)
        self.argument_name = argument_name
        self.argument_value = argument_value


# Search-related exceptions

class SearchError(EpiDownError):
    """Base exception for episode search errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'SEARCH_ERROR', context)


class EpisodeNotFoundError(SearchError):
    """
    Recorded when the requested episode does not exist.

    Attributes:
        episode_id: The identifier that could not be resolved.
    """

    def __init__(
        self,
        message: str,
        episode_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if episode_id is not None:
            ctx['episode_id'] = episode_id
        super().__init__(message, 'EPISODE_NOT_FOUND', ctx)
        self.episode_id = episode_id


class NeedDecisionError(SearchError):
    """
    Recorded when the inventory check fails for a single release.

    Attributes:
        release_title: Title of the release being checked.
    """

    def __init__(
        self,
        message: str,
        release_title: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if release_title:
            ctx['release_title'] = release_title[:200]
        super().__init__(message, 'NEED_DECISION_FAILED', ctx)
        self.release_title = release_title


# Indexer-related exceptions

class IndexerError(EpiDownError):
    """
    Base exception for indexer errors.

    Attributes:
        indexer_name: Name of the indexer that failed.
    """

    def __init__(
        self,
        message: str,
        indexer_name: Optional[str] = None,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if indexer_name:
            ctx['indexer'] = indexer_name
        super().__init__(message, code or 'INDEXER_ERROR', ctx)
        self.indexer_name = indexer_name


class IndexerRequestError(IndexerError):
    """
    Exception raised when an indexer request fails.

    Attributes:
        status_code: HTTP status code, if a response was received.
    """

    def __init__(
        self,
        message: str,
        indexer_name: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if status_code is not None:
            ctx['status_code'] = status_code
        super().__init__(message, indexer_name, 'INDEXER_REQUEST_FAILED', ctx)
        self.status_code = status_code


# Download-related exceptions

class DownloadError(EpiDownError):
    """Base exception for download service errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'DOWNLOAD_ERROR', context)


class TorrentAddError(DownloadError):
    """
    Exception raised when adding a torrent fails.

    Attributes:
        torrent_url: URL of the torrent that failed to add.
    """

    def __init__(
        self,
        message: str,
        torrent_url: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if torrent_url:
            ctx['torrent_url'] = torrent_url
        super().__init__(message, 'TORRENT_ADD_FAILED', ctx)
        self.torrent_url = torrent_url


# Configuration exceptions

class ConfigError(EpiDownError):
    """Base exception for configuration errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'CONFIG_ERROR', context)


# Database exceptions

class DatabaseError(EpiDownError):
    """Base exception for database errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'DATABASE_ERROR', context)
