"""
Domain layer module.

Contains value objects and entities that represent the core business concepts.
"""

from epidown.core.domain.entities import (
    Episode,
    EpisodeParseResult,
    HistoryRecord,
    Series,
)
from epidown.core.domain.value_objects import (
    Quality,
    SearchOutcome,
    SeasonEpisode,
    SeriesTitle,
)

__all__ = [
    # Value Objects - Enums
    'Quality',
    'SearchOutcome',
    # Value Objects - Data Classes
    'SeasonEpisode',
    'SeriesTitle',
    # Entities
    'Series',
    'Episode',
    'EpisodeParseResult',
    'HistoryRecord',
]
