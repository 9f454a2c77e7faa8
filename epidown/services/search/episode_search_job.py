"""
Episode search job module.

Entry point of an episode search run: validates the target id, resolves the
episode, asks every enabled indexer for releases and reports how the run
ended.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from epidown.core.domain.entities import Episode, EpisodeParseResult
from epidown.core.domain.value_objects import SearchOutcome
from epidown.core.exceptions import (
    EpiDownError,
    EpisodeNotFoundError,
    IndexerError,
    InvalidArgumentError,
    SearchError,
)
from epidown.core.interfaces.adapters import IIndexerRegistry
from epidown.core.interfaces.notifications import ProgressNotification
from epidown.core.interfaces.repositories import IEpisodeRepository
from epidown.core.utils.call_result import attempt
from epidown.services.search.indexer_aggregator import AggregateResult, IndexerAggregator

logger = logging.getLogger(__name__)


@dataclass
class SearchJobResult:
    """
    Result of one episode search run.

    Attributes:
        episode_id: The requested episode id.
        outcome: How the run ended.
        episode: The resolved episode, None if it could not be resolved.
        grabbed: Releases handed to the download provider.
        indexers_searched: Names of the indexers that were queried.
        indexers_failed: Names of the indexers whose query failed.
        total_candidates: Number of release reports received.
        errors: Errors recorded during the run.
    """
    episode_id: int
    outcome: SearchOutcome = SearchOutcome.NO_ACCEPTABLE_CANDIDATE
    episode: Optional[Episode] = None
    grabbed: List[EpisodeParseResult] = field(default_factory=list)
    indexers_searched: List[str] = field(default_factory=list)
    indexers_failed: List[str] = field(default_factory=list)
    total_candidates: int = 0
    errors: List[EpiDownError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if at least one release was grabbed."""
        return self.outcome == SearchOutcome.GRABBED

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            'episode_id': self.episode_id,
            'episode': str(self.episode) if self.episode else None,
            'outcome': self.outcome.value,
            'grabbed': [r.title for r in self.grabbed],
            'indexers_searched': list(self.indexers_searched),
            'indexers_failed': list(self.indexers_failed),
            'total_candidates': self.total_candidates,
            'errors': [str(e) for e in self.errors],
        }


class EpisodeSearchJob:
    """
    Episode search job.

    Holds no state between runs; every collaborator is injected so the same
    instance can serve any number of runs.
    """

    name = 'Episode Search'

    def __init__(
        self,
        episode_repo: IEpisodeRepository,
        indexer_registry: IIndexerRegistry,
        aggregator: IndexerAggregator
    ):
        """
        Initialize the episode search job.

        Args:
            episode_repo: Resolves episode ids.
            indexer_registry: Provides the enabled indexers.
            aggregator: Queries indexers and runs the candidate selector.
        """
        self._episode_repo = episode_repo
        self._indexer_registry = indexer_registry
        self._aggregator = aggregator

    def start(
        self,
        progress: ProgressNotification,
        target_id: int,
        cancel_event: Optional[threading.Event] = None
    ) -> SearchJobResult:
        """
        Search all enabled indexers for one episode.

        Args:
            progress: Progress notification updated during the run.
            target_id: ID of the episode to search for (must be > 0).
            cancel_event: Optional cooperative cancellation signal.

        Returns:
            SearchJobResult describing the run.

        Raises:
            InvalidArgumentError: If target_id is not a positive integer.
        """
        if isinstance(target_id, bool) or not isinstance(target_id, int) or target_id <= 0:
            raise InvalidArgumentError(
                'target_id must be a positive integer',
                argument_name='target_id',
                argument_value=target_id
            )

        result = SearchJobResult(episode_id=target_id)
        progress.current_message = f'Starting episode search for episode {target_id}'
        logger.info(f'🔍 开始搜索剧集: ID={target_id}')

        lookup = attempt(self._episode_repo.get_episode, target_id)
        if lookup.failed:
            logger.error(f'❌ 查询剧集失败: ID={target_id}, 错误: {lookup.error}')
            result.outcome = SearchOutcome.FAILED
            result.errors.append(SearchError(
                f'Episode lookup failed: {lookup.error}',
                context={'episode_id': target_id}
            ))
            progress.fail(f'Episode lookup failed for episode {target_id}')
            return result

        episode = lookup.value
        if episode is None:
            logger.error(f'❌ 未找到剧集: ID={target_id}')
            result.outcome = SearchOutcome.EPISODE_NOT_FOUND
            result.errors.append(EpisodeNotFoundError(
                f'Episode {target_id} does not exist',
                episode_id=target_id
            ))
            progress.fail(f'Episode {target_id} not found')
            return result

        result.episode = episode
        progress.current_message = f'Searching for {episode}'

        registry = attempt(self._indexer_registry.get_enabled_indexers)
        if registry.failed:
            logger.error(f'❌ 获取索引器列表失败: {registry.error}')
            result.outcome = SearchOutcome.FAILED
            result.errors.append(SearchError(
                f'Unable to load indexers: {registry.error}',
                context={'episode_id': target_id}
            ))
            progress.fail(f'Unable to load indexers for {episode}')
            return result

        indexers = list(registry.value or [])
        if not indexers:
            logger.warning(f'⚠️ 没有启用的索引器，无法搜索: {episode}')

        aggregate = self._aggregator.search(progress, episode, indexers, cancel_event)
        self._conclude(result, aggregate)

        if result.outcome == SearchOutcome.GRABBED:
            progress.complete(f'Episode search completed for {episode}: sent {len(result.grabbed)} report(s) to download client')
        elif result.outcome == SearchOutcome.CANCELLED:
            progress.complete(f'Episode search cancelled for {episode}')
        else:
            progress.complete(f'Episode search completed for {episode}: no acceptable report found')

        logger.info(
            f'🏁 剧集搜索结束: {episode}, 结果={result.outcome.value}, '
            f'索引器={len(result.indexers_searched)}, 结果数={result.total_candidates}'
        )
        return result

    def _conclude(self, result: SearchJobResult, aggregate: AggregateResult) -> None:
        """Copy the aggregate outcome into the job result."""
        result.grabbed = aggregate.grabbed
        result.indexers_searched = [r.indexer for r in aggregate.indexers]
        result.indexers_failed = aggregate.failed_indexers
        result.total_candidates = aggregate.total_reports

        for entry in aggregate.indexers:
            if entry.failed:
                result.errors.append(IndexerError(entry.error, indexer_name=entry.indexer))
            if entry.selection:
                result.errors.extend(entry.selection.errors)

        if result.grabbed:
            result.outcome = SearchOutcome.GRABBED
        elif aggregate.cancelled:
            result.outcome = SearchOutcome.CANCELLED
        else:
            result.outcome = SearchOutcome.NO_ACCEPTABLE_CANDIDATE
