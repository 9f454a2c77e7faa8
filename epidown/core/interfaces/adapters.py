"""
Adapter interfaces module.

Contains abstract base classes defining contracts for external service adapters
and for the collaborators consumed by the episode search job.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from epidown.core.domain.entities import EpisodeParseResult


class IIndexer(ABC):
    """
    Indexer interface.

    An external system capable of searching for releases of an episode.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the indexer display name."""
        pass

    @abstractmethod
    def fetch_episode(
        self,
        series_title: str,
        season_number: int,
        episode_number: int
    ) -> List[EpisodeParseResult]:
        """
        Fetch release reports for one episode.

        Args:
            series_title: Series title to search for.
            season_number: Season number.
            episode_number: Episode number within the season.

        Returns:
            List of parsed release reports (possibly empty).

        Raises:
            Exception: Any failure while querying the indexer.
        """
        pass


class IIndexerRegistry(ABC):
    """
    Indexer registry interface.

    Provides the ordered list of indexers that are currently enabled.
    """

    @abstractmethod
    def get_enabled_indexers(self) -> List[IIndexer]:
        """
        Get all enabled indexers.

        Returns:
            Enabled indexers in configuration order.
        """
        pass


class IInventory(ABC):
    """
    Inventory interface.

    Decides whether a release is still needed for the library.
    """

    @abstractmethod
    def is_needed(self, parse_result: EpisodeParseResult) -> bool:
        """
        Check whether a release should still be acquired.

        Args:
            parse_result: Release report to check.

        Returns:
            True if the release is wanted, False otherwise.

        Raises:
            Exception: Any failure while checking the library.
        """
        pass


class IDownloadProvider(ABC):
    """
    Download provider interface.

    Hands a chosen release over to the download subsystem.
    """

    @abstractmethod
    def download_report(self, parse_result: EpisodeParseResult) -> bool:
        """
        Send a release to the download client.

        Args:
            parse_result: Release report to download.

        Returns:
            True if the download client accepted the release, False otherwise.
        """
        pass


class IDownloadClient(ABC):
    """
    Download client interface.

    Defines the contract for interacting with download clients (e.g., qBittorrent).
    """

    @abstractmethod
    def is_connected(self) -> bool:
        """
        Check if connected to the download client.

        Returns:
            True if connected, False otherwise.
        """
        pass

    @abstractmethod
    def add_torrent(
        self,
        torrent_url: str,
        save_path: str,
        category: Optional[str] = None
    ) -> bool:
        """
        Add a torrent by URL or magnet link.

        Args:
            torrent_url: URL to the torrent file or magnet link.
            save_path: Directory to save downloaded files.
            category: Optional client category override.

        Returns:
            True if torrent was added successfully, False otherwise.
        """
        pass
