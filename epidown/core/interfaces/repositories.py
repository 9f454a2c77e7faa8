"""
Repository interfaces module.

Contains abstract base classes defining contracts for data access operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from epidown.core.domain.entities import Episode, HistoryRecord, Series
from epidown.core.domain.value_objects import Quality


class IEpisodeRepository(ABC):
    """
    Episode repository interface.

    Defines the contract for series and episode data access operations.
    """

    @abstractmethod
    def get_episode(self, episode_id: int) -> Optional[Episode]:
        """
        Get episode by ID.

        Args:
            episode_id: The episode ID.

        Returns:
            Episode (with its series) if found, None otherwise.
        """
        pass

    @abstractmethod
    def find_series(self, clean_title: str) -> Optional[Series]:
        """
        Find a series by its normalized title.

        Args:
            clean_title: Normalized series title.

        Returns:
            Series if found, None otherwise.
        """
        pass

    @abstractmethod
    def find_episode(
        self,
        series_id: int,
        season_number: int,
        episode_number: int
    ) -> Optional[Episode]:
        """
        Find an episode of a series by season and episode number.

        Args:
            series_id: The series ID.
            season_number: Season number.
            episode_number: Episode number.

        Returns:
            Episode if found, None otherwise.
        """
        pass

    @abstractmethod
    def get_missing_episodes(self, aired_before: Optional[date] = None) -> List[Episode]:
        """
        Get aired episodes of monitored series that have no file yet.

        Args:
            aired_before: Only include episodes aired on or before this date
                          (defaults to today).

        Returns:
            List of missing episodes.
        """
        pass


class IHistoryRepository(ABC):
    """
    Grab history repository interface.
    """

    @abstractmethod
    def add_grab(
        self,
        episode_id: int,
        release_title: str,
        quality: Quality,
        proper: bool,
        indexer: str = '',
        download_url: str = ''
    ) -> int:
        """
        Record that a release was sent to the download client.

        Returns:
            ID of the new history record.
        """
        pass

    @abstractmethod
    def exists(self, episode_id: int, quality: Quality, proper: bool) -> bool:
        """
        Check whether a release of this quality was already grabbed.

        Args:
            episode_id: The episode ID.
            quality: Release quality.
            proper: Whether the release is a proper/repack.

        Returns:
            True if a matching grab exists.
        """
        pass

    @abstractmethod
    def get_by_episode(self, episode_id: int) -> List[HistoryRecord]:
        """
        Get grab history for an episode, newest first.

        Args:
            episode_id: The episode ID.

        Returns:
            List of history records.
        """
        pass
