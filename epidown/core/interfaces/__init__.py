"""
Interfaces module.

Contains abstract base classes defining the contracts for repositories
and adapters, plus notification data classes.
"""

from epidown.core.interfaces.adapters import (
    IDownloadClient,
    IDownloadProvider,
    IIndexer,
    IIndexerRegistry,
    IInventory,
)
from epidown.core.interfaces.notifications import (
    ProgressNotification,
    ProgressStatus,
)
from epidown.core.interfaces.repositories import (
    IEpisodeRepository,
    IHistoryRepository,
)

__all__ = [
    # Repository Interfaces
    'IEpisodeRepository',
    'IHistoryRepository',
    # Adapter Interfaces
    'IIndexer',
    'IIndexerRegistry',
    'IInventory',
    'IDownloadProvider',
    'IDownloadClient',
    # Notification Data Classes
    'ProgressNotification',
    'ProgressStatus',
]
