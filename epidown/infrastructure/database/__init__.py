"""
Database module.

Contains SQLAlchemy models and session management.
"""

from epidown.infrastructure.database.models import Base, Episode, History, Series
from epidown.infrastructure.database.session import DatabaseSessionManager, db_manager

__all__ = [
    'Base',
    'DatabaseSessionManager',
    'Episode',
    'History',
    'Series',
    'db_manager',
]
