"""
Value objects module.

Contains immutable value objects representing domain concepts without identity.
Value objects are compared by their attributes, not by identity.
"""

import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class Quality(IntEnum):
    """
    Release quality tiers.

    The integer value is the tier weight, so tiers compare and sort by
    value: ``Quality.DVD < Quality.BLURAY1080P``.
    """
    UNKNOWN = 0
    SDTV = 1
    DVD = 2
    HDTV = 3
    WEBDL = 4
    BLURAY720P = 5
    BLURAY1080P = 6

    @classmethod
    def from_name(cls, name: str) -> 'Quality':
        """
        Resolve a quality from its name (case-insensitive, '-' and '_' ignored).

        Args:
            name: Quality name such as 'bluray1080p', 'WEB-DL' or 'hdtv'.

        Returns:
            Matching Quality.

        Raises:
            ValueError: If the name does not match any tier.
        """
        key = re.sub(r'[-_\s]', '', str(name)).upper()
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f'Unknown quality: {name}') from None

    @property
    def display_name(self) -> str:
        """Return the human readable tier name."""
        return _QUALITY_DISPLAY_NAMES[self]


_QUALITY_DISPLAY_NAMES = {
    Quality.UNKNOWN: 'Unknown',
    Quality.SDTV: 'SDTV',
    Quality.DVD: 'DVD',
    Quality.HDTV: 'HDTV',
    Quality.WEBDL: 'WEB-DL',
    Quality.BLURAY720P: 'Bluray 720p',
    Quality.BLURAY1080P: 'Bluray 1080p',
}


class SearchOutcome(Enum):
    """Terminal outcome of one episode search run."""
    GRABBED = 'grabbed'
    NO_ACCEPTABLE_CANDIDATE = 'no_acceptable_candidate'
    EPISODE_NOT_FOUND = 'episode_not_found'
    FAILED = 'failed'
    CANCELLED = 'cancelled'


@dataclass(frozen=True)
class SeasonEpisode:
    """
    Season/episode coordinate value object.

    Attributes:
        season: Season number (0 for specials).
        episode: Episode number within the season.
    """
    season: int
    episode: int

    def __post_init__(self) -> None:
        """Validate numbers on initialization."""
        if self.season < 0:
            raise ValueError(f'Season number cannot be negative: {self.season}')
        if self.episode < 0:
            raise ValueError(f'Episode number cannot be negative: {self.episode}')

    @property
    def display(self) -> str:
        """Return formatted coordinate (e.g., 'S01E05')."""
        return f'S{self.season:02d}E{self.episode:02d}'

    def __str__(self) -> str:
        return self.display


@dataclass(frozen=True)
class SeriesTitle:
    """
    Series title value object.

    Attributes:
        title: Official series title.
        search_title: Scene name used when querying indexers (if different).
    """
    title: str
    search_title: Optional[str] = None

    @property
    def query_title(self) -> str:
        """Return the title that should be sent to indexers."""
        if self.search_title and self.search_title.strip():
            return self.search_title
        return self.title

    @property
    def safe_name(self) -> str:
        """Return filename-safe version of the title."""
        if not self.title:
            return ''
        # Remove or replace characters that are invalid in file names
        safe = re.sub(r'[<>:"/\\|?*]', '', self.title)
        safe = re.sub(r'\s+', ' ', safe)
        return safe.strip()
