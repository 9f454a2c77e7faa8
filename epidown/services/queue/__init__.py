"""
Queue services module.

Contains queue worker implementations for background task processing.
"""

from epidown.services.queue.queue_worker import QueueEvent, QueueWorker
from epidown.services.queue.search_queue import SearchPayload, SearchQueueWorker

__all__ = [
    'QueueEvent',
    'QueueWorker',
    'SearchPayload',
    'SearchQueueWorker',
]
