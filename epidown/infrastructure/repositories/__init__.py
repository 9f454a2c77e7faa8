"""
Repositories module.

Contains repository implementations for data access.
"""

from epidown.infrastructure.repositories.episode_repository import EpisodeRepository
from epidown.infrastructure.repositories.history_repository import HistoryRepository

__all__ = [
    'EpisodeRepository',
    'HistoryRepository',
]
