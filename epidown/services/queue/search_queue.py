"""
Search queue worker module.

Runs episode searches in the background, one queued episode at a time.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Set

from epidown.core.domain.value_objects import SearchOutcome
from epidown.core.exceptions import SearchError
from epidown.core.interfaces.notifications import ProgressNotification
from epidown.core.interfaces.repositories import IEpisodeRepository
from epidown.services.queue.queue_worker import QueueEvent, QueueWorker
from epidown.services.search.episode_search_job import EpisodeSearchJob

logger = logging.getLogger(__name__)


@dataclass
class SearchPayload:
    """
    Episode search event payload.

    Attributes:
        episode_id: ID of the episode to search for.
        trigger_type: How the search was requested ('manual' or 'backlog').
    """
    episode_id: int
    trigger_type: str = 'manual'

    def get_display_name(self) -> str:
        """获取用于显示的名称"""
        return f'Episode {self.episode_id} ({self.trigger_type})'


class SearchQueueWorker(QueueWorker[SearchPayload]):
    """
    Search queue worker.

    Each event runs ``EpisodeSearchJob.start`` with a fresh progress
    notification. The worker's stop event is handed to the job, so stopping
    the worker cancels a running search between indexers and releases.
    An episode that is already waiting in the queue is not queued twice.
    """

    EVENT_EPISODE_SEARCH = 'episode_search'

    TRIGGER_MANUAL = 'manual'
    TRIGGER_BACKLOG = 'backlog'

    def __init__(
        self,
        search_job: EpisodeSearchJob,
        episode_repo: Optional[IEpisodeRepository] = None,
        name: str = 'SearchQueue',
        max_failures: int = 5,
        history_size: int = 50
    ):
        """
        Initialize the search queue worker.

        Args:
            search_job: Job run for every event.
            episode_repo: Used to find missing episodes for backlog searches.
            name: Worker name for logging.
            max_failures: Consecutive failures before a warning is logged.
            history_size: Number of finished runs kept for status output.
        """
        super().__init__(name=name, max_failures=max_failures)
        self._search_job = search_job
        self._episode_repo = episode_repo
        self._queued_ids: Set[int] = set()
        self._recent: Deque[Dict[str, Any]] = deque(maxlen=history_size)

    def enqueue_search(
        self,
        episode_id: int,
        trigger_type: str = TRIGGER_MANUAL
    ) -> Optional[QueueEvent[SearchPayload]]:
        """
        Queue a search for one episode.

        Args:
            episode_id: ID of the episode to search for.
            trigger_type: How the search was requested.

        Returns:
            The queued event, or None if the episode is already queued.
        """
        with self._lock:
            if episode_id in self._queued_ids:
                logger.debug(f'⏭️ [{self._name}] 剧集已在队列中: ID={episode_id}')
                return None
            self._queued_ids.add(episode_id)

        return self.enqueue_event(
            self.EVENT_EPISODE_SEARCH,
            SearchPayload(episode_id=episode_id, trigger_type=trigger_type)
        )

    def enqueue_missing_episodes(self) -> int:
        """
        Queue a backlog search for every missing episode.

        Returns:
            Number of episodes queued.
        """
        if self._episode_repo is None:
            raise SearchError('Backlog search needs an episode repository')

        episodes = self._episode_repo.get_missing_episodes()
        queued = 0
        for episode in episodes:
            if self.enqueue_search(episode.id, self.TRIGGER_BACKLOG):
                queued += 1

        logger.info(f'📋 [{self._name}] 缺失剧集搜索: 共 {len(episodes)} 个, 新入队 {queued} 个')
        return queued

    def get_recent_results(self) -> List[Dict[str, Any]]:
        """Return finished runs, newest first."""
        with self._lock:
            return list(reversed(self._recent))

    def _handle_event(self, event: QueueEvent[SearchPayload]) -> None:
        """Run the search job for one queued episode."""
        payload = event.payload
        with self._lock:
            self._queued_ids.discard(payload.episode_id)

        logger.info(f'📡 [{self._name}] 处理 {event.event_type}: {payload.get_display_name()}')

        progress = ProgressNotification(title=f'{self._search_job.name}: {payload.episode_id}')
        result = self._search_job.start(progress, payload.episode_id, self._stop_event)

        with self._lock:
            self._recent.append({
                'queue_id': event.queue_id,
                'trigger_type': payload.trigger_type,
                'progress': progress.to_dict(),
                'result': result.to_dict(),
            })

        if result.outcome == SearchOutcome.FAILED:
            raise SearchError(
                f'Episode search failed for episode {payload.episode_id}',
                context={'queue_id': event.queue_id}
            )

    def clear_queue(self) -> int:
        """Drop all pending searches."""
        count = super().clear_queue()
        with self._lock:
            self._queued_ids.clear()
        return count
