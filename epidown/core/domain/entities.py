"""
Entities module.

Contains domain entities that have identity and lifecycle, plus the
release report produced by indexers.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from epidown.core.domain.value_objects import Quality, SeasonEpisode, SeriesTitle


@dataclass
class Series:
    """
    Series entity.

    Attributes:
        id: Unique identifier in the database.
        title: Series title information.
        clean_title: Normalized title used to match release reports.
        monitored: Whether episodes of this series should be acquired.
        quality_profile: Name of the quality profile applied to the series.
    """
    id: Optional[int] = None
    title: Optional[SeriesTitle] = None
    clean_title: str = ''
    monitored: bool = True
    quality_profile: str = ''

    @property
    def display_name(self) -> str:
        """Return the display name for this series."""
        if self.title:
            return self.title.title
        return ''

    @property
    def query_title(self) -> str:
        """Return the title that should be sent to indexers."""
        if self.title:
            return self.title.query_title
        return ''


@dataclass
class Episode:
    """
    Episode entity.

    Represents one wanted unit of content. The search job only reads it.

    Attributes:
        id: Unique identifier in the database.
        series_id: Reference to the owning series.
        series: Snapshot of the owning series.
        season_number: Season number.
        episode_number: Episode number within the season.
        title: Episode title.
        air_date: First air date.
        ignored: Whether the episode is excluded from acquisition.
        file_quality: Quality of the file on disk, None if there is no file.
        file_proper: Whether the file on disk is a proper/repack.
    """
    id: Optional[int] = None
    series_id: Optional[int] = None
    series: Optional[Series] = None
    season_number: int = 1
    episode_number: int = 1
    title: str = ''
    air_date: Optional[date] = None
    ignored: bool = False
    file_quality: Optional[Quality] = None
    file_proper: bool = False

    @property
    def series_title(self) -> str:
        """Return the owning series title."""
        if self.series:
            return self.series.display_name
        return ''

    @property
    def search_title(self) -> str:
        """Return the series title used to query indexers."""
        if self.series:
            return self.series.query_title
        return ''

    @property
    def coordinate(self) -> SeasonEpisode:
        """Return the season/episode coordinate."""
        return SeasonEpisode(self.season_number, self.episode_number)

    @property
    def has_file(self) -> bool:
        """Check if the episode already has a file on disk."""
        return self.file_quality is not None

    def __str__(self) -> str:
        return f'{self.series_title} - {self.coordinate.display}'


@dataclass(frozen=True)
class EpisodeParseResult:
    """
    A parsed release report returned by an indexer.

    Immutable; the search core only ranks it and passes it on.

    Attributes:
        title: Original release title.
        quality: Quality tier parsed from the title.
        proper: Whether the release is a proper/repack.
        clean_title: Normalized series title parsed from the release.
        season_number: Season number parsed from the release.
        episode_numbers: Episode numbers covered by the release.
        download_url: URL of the torrent/nzb or magnet link.
        indexer: Name of the indexer that reported the release.
        size: Reported size in bytes (0 if unknown).
    """
    title: str
    quality: Quality = Quality.UNKNOWN
    proper: bool = False
    clean_title: str = ''
    season_number: int = 0
    episode_numbers: Tuple[int, ...] = ()
    download_url: str = ''
    indexer: str = ''
    size: int = 0

    @property
    def is_magnet(self) -> bool:
        """Check if the download URL is a magnet link."""
        return self.download_url.startswith('magnet:')

    def __str__(self) -> str:
        proper = ' Proper' if self.proper else ''
        return f'{self.title} [{self.quality.display_name}{proper}]'


@dataclass
class HistoryRecord:
    """
    Grab history entity.

    Attributes:
        id: Unique identifier in the database.
        episode_id: Episode the release was grabbed for.
        release_title: Title of the grabbed release.
        quality: Quality of the grabbed release.
        proper: Whether the grabbed release was a proper/repack.
        indexer: Indexer that reported the release.
        download_url: URL handed to the download client.
        grabbed_at: Timestamp of the grab.
    """
    id: Optional[int] = None
    episode_id: Optional[int] = None
    release_title: str = ''
    quality: Quality = Quality.UNKNOWN
    proper: bool = False
    indexer: str = ''
    download_url: str = ''
    grabbed_at: Optional[datetime] = field(default=None)
