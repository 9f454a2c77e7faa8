"""
Indexer aggregator module.

Queries every enabled indexer for one episode and runs the candidate selector
on each indexer's own results, in registry order.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable

from epidown.core.domain.entities import Episode, EpisodeParseResult
from epidown.core.interfaces.adapters import IIndexer
from epidown.core.interfaces.notifications import ProgressNotification
from epidown.core.utils.call_result import CallResult, attempt
from epidown.services.search.candidate_selector import CandidateSelector, SelectionResult

logger = logging.getLogger(__name__)


@dataclass
class IndexerSearchResult:
    """
    What happened with one indexer.

    Attributes:
        indexer: Indexer name.
        report_count: Number of release reports returned.
        error: Error message if the fetch failed.
        selection: Selector result, None if the selector did not run.
    """
    indexer: str
    report_count: int = 0
    error: str | None = None
    selection: SelectionResult | None = None

    @property
    def failed(self) -> bool:
        """Check if the fetch failed."""
        return self.error is not None

    @property
    def grabbed(self) -> EpisodeParseResult | None:
        """Return the release handed to the download provider, if any."""
        if self.selection and self.selection.accepted:
            return self.selection.candidate
        return None


@dataclass
class AggregateResult:
    """
    Result of searching all indexers for one episode.

    Attributes:
        indexers: Per-indexer results in the order they were searched.
        cancelled: Whether the search stopped on a cancellation request.
    """
    indexers: list[IndexerSearchResult] = field(default_factory=list)
    cancelled: bool = False

    @property
    def grabbed(self) -> list[EpisodeParseResult]:
        """Return every release handed to the download provider."""
        return [r.grabbed for r in self.indexers if r.grabbed is not None]

    @property
    def failed_indexers(self) -> list[str]:
        """Return the names of indexers whose fetch failed."""
        return [r.indexer for r in self.indexers if r.failed]

    @property
    def total_reports(self) -> int:
        """Return the total number of release reports received."""
        return sum(r.report_count for r in self.indexers)


class IndexerAggregator:
    """
    Indexer aggregator service.

    Each indexer is queried exactly once. A failing indexer is logged and
    skipped; it never stops the others. Results are not merged: the selector
    runs once per indexer so every indexer's best release gets a chance.
    """

    def __init__(
        self,
        selector: CandidateSelector,
        max_workers: int = 1,
        stop_on_first_grab: bool = False
    ):
        """
        Initialize the indexer aggregator.

        Args:
            selector: Candidate selector run on each indexer's results.
            max_workers: Number of indexers fetched concurrently (1 = sequential).
            stop_on_first_grab: Stop after the first indexer that produced a grab.
        """
        self._selector = selector
        self._max_workers = max(1, max_workers)
        self._stop_on_first_grab = stop_on_first_grab

    def search(
        self,
        progress: ProgressNotification,
        episode: Episode,
        indexers: Iterable[IIndexer],
        cancel_event: threading.Event | None = None
    ) -> AggregateResult:
        """
        Search all indexers for an episode.

        Args:
            progress: Progress notification of the running job.
            episode: Episode to search for.
            indexers: Enabled indexers in registry order.
            cancel_event: Optional cooperative cancellation signal.

        Returns:
            AggregateResult with per-indexer outcomes.
        """
        indexers = list(indexers)
        result = AggregateResult()

        prefetched = None
        if self._max_workers > 1 and len(indexers) > 1:
            prefetched = self._fetch_parallel(progress, episode, indexers, cancel_event)

        for idx, indexer in enumerate(indexers):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f'🛑 搜索已取消，跳过剩余 {len(indexers) - idx} 个索引器')
                result.cancelled = True
                break

            name = _indexer_name(indexer)
            entry = IndexerSearchResult(indexer=name)
            result.indexers.append(entry)

            if prefetched is None:
                progress.current_message = f'Searching {name} for {episode}'
                fetch = self._fetch(indexer, episode)
            else:
                # None only after cancel_event was set, caught above
                fetch = prefetched[idx]

            if fetch.failed:
                entry.error = str(fetch.error)
                logger.error(f'❌ 从索引器 {name} 获取结果时出错: {fetch.error}')
                continue

            reports = list(fetch.value or [])
            entry.report_count = len(reports)
            logger.info(f'📦 索引器 {name} 返回 {len(reports)} 个结果: {episode}')

            if not reports:
                continue

            progress.current_message = f'Processing {len(reports)} results from {name}'
            entry.selection = self._selector.process_results(
                progress, episode, reports, cancel_event
            )

            if entry.selection.cancelled:
                result.cancelled = True
                break

            if entry.selection.accepted and self._stop_on_first_grab:
                logger.info(f'⏹️ 已从 {name} 抓取发布，跳过后续索引器')
                break

        logger.debug(
            f'📊 索引器搜索完成: 共 {len(result.indexers)} 个索引器, '
            f'{result.total_reports} 个结果, 失败 {len(result.failed_indexers)} 个'
        )
        return result

    def _fetch(self, indexer: IIndexer, episode: Episode) -> CallResult:
        """Fetch one indexer's reports for the episode."""
        return attempt(
            indexer.fetch_episode,
            episode.search_title,
            episode.season_number,
            episode.episode_number
        )

    def _fetch_parallel(
        self,
        progress: ProgressNotification,
        episode: Episode,
        indexers: list[IIndexer],
        cancel_event: threading.Event | None = None
    ) -> list[CallResult | None]:
        """
        Fetch all indexers concurrently, one task per indexer.

        Indexers not yet submitted or started when cancel_event is set are
        skipped and have None in the returned list.
        """
        workers = min(self._max_workers, len(indexers))
        logger.debug(f'🔄 并行查询 {len(indexers)} 个索引器 (workers={workers})')

        def fetch_unless_cancelled(indexer: IIndexer) -> CallResult | None:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return self._fetch(indexer, episode)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='indexer') as executor:
            futures = []
            for indexer in indexers:
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(f'🛑 搜索已取消，不再提交剩余 {len(indexers) - len(futures)} 个索引器')
                    break
                progress.current_message = f'Searching {_indexer_name(indexer)} for {episode}'
                futures.append(executor.submit(fetch_unless_cancelled, indexer))

            # _fetch never raises, so result() only returns CallResult or None
            results = [future.result() for future in futures]

        return results + [None] * (len(indexers) - len(results))


def _indexer_name(indexer: IIndexer) -> str:
    """Return a printable indexer name."""
    name = getattr(indexer, 'name', None)
    if isinstance(name, str) and name:
        return name
    return type(indexer).__name__
