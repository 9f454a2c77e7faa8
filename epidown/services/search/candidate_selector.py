"""
Candidate selector module.

Walks one indexer's release reports from best to worst and sends the first
still-needed release to the download provider.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable

from epidown.core.domain.entities import Episode, EpisodeParseResult
from epidown.core.exceptions import DownloadError, EpiDownError, NeedDecisionError
from epidown.core.interfaces.adapters import IDownloadProvider, IInventory
from epidown.core.interfaces.notifications import ProgressNotification
from epidown.core.utils.call_result import attempt
from epidown.services.search.quality_ranking import rank_candidates

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    """
    Result of scanning one list of release reports.

    Attributes:
        accepted: Whether a release was needed and handed to the download provider.
        candidate: The release that was handed over, if any.
        download_accepted: What the download provider reported for the hand-off.
        checked: Number of need-decision calls made.
        failed: Number of releases skipped because a collaborator raised.
        cancelled: Whether the scan stopped on a cancellation request.
        errors: Errors recorded while scanning.
    """
    accepted: bool = False
    candidate: EpisodeParseResult | None = None
    download_accepted: bool = False
    checked: int = 0
    failed: int = 0
    cancelled: bool = False
    errors: list[EpiDownError] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.accepted


class CandidateSelector:
    """
    Candidate selector service.

    Ranks the release reports of a single indexer and stops at the first
    one the inventory still needs. A failing need check skips that release;
    the first needed release ends the scan whatever the hand-off does.
    """

    def __init__(
        self,
        inventory: IInventory,
        download_provider: IDownloadProvider
    ):
        """
        Initialize the candidate selector.

        Args:
            inventory: Decides whether a release is still needed.
            download_provider: Hands the chosen release to the download client.
        """
        self._inventory = inventory
        self._download_provider = download_provider

    def process_results(
        self,
        progress: ProgressNotification,
        episode: Episode,
        parse_results: Iterable[EpisodeParseResult],
        cancel_event: threading.Event | None = None
    ) -> SelectionResult:
        """
        Pick the best needed release and send it to the download provider.

        Args:
            progress: Progress notification of the running job.
            episode: Episode being searched.
            parse_results: Release reports of one indexer, unranked.
            cancel_event: Optional cooperative cancellation signal.

        Returns:
            SelectionResult describing what was checked and chosen.
        """
        result = SelectionResult()
        ranked = rank_candidates(parse_results)

        logger.debug(f'🔎 开始检查 {len(ranked)} 个搜索结果: {episode}')

        for parse_result in ranked:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f'🛑 搜索已取消，停止检查剩余结果: {episode}')
                result.cancelled = True
                return result

            result.checked += 1
            need = attempt(self._inventory.is_needed, parse_result)

            if need.failed:
                result.failed += 1
                result.errors.append(NeedDecisionError(
                    str(need.error),
                    release_title=parse_result.title,
                    context={'indexer': parse_result.indexer}
                ))
                logger.error(
                    f'❌ 检查发布时出错 [{parse_result.title}]: {need.error}'
                )
                continue

            if not need.value:
                logger.debug(f'⏭️ 不需要该发布: {parse_result}')
                continue

            progress.current_message = f'Sending report to download client: {parse_result.title}'
            download = attempt(self._download_provider.download_report, parse_result)

            # At most one hand-off per scan, even when it raises
            if download.failed:
                result.failed += 1
                result.errors.append(DownloadError(
                    str(download.error),
                    context={'release_title': parse_result.title}
                ))
                logger.error(
                    f'❌ 发送到下载客户端时出错，停止检查剩余结果 [{parse_result.title}]: {download.error}'
                )
                return result

            result.accepted = True
            result.candidate = parse_result
            result.download_accepted = bool(download.value)
            logger.info(f'✅ 已选择发布: {parse_result} -> {episode}')
            return result

        logger.warning(
            f'⚠️ 在 {len(ranked)} 个搜索结果中未找到需要的发布: {episode}'
        )
        return result
