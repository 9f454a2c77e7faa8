"""
Inventory service module.

Decides whether a release report is still wanted by the library.
"""

import logging
from typing import Optional

from epidown.core.config import AppConfig, config
from epidown.core.domain.entities import EpisodeParseResult
from epidown.core.domain.value_objects import Quality
from epidown.core.interfaces.adapters import IInventory
from epidown.core.interfaces.repositories import IEpisodeRepository, IHistoryRepository

logger = logging.getLogger(__name__)


def is_upgrade(
    current_quality: Quality,
    current_proper: bool,
    new_quality: Quality,
    new_proper: bool,
    cutoff: Quality
) -> bool:
    """
    Check whether a new release would upgrade an existing file.

    A better tier only counts while the file is below the profile cutoff.
    A proper of the same tier always replaces a non-proper file.

    Args:
        current_quality: Quality of the file on disk.
        current_proper: Whether the file on disk is a proper/repack.
        new_quality: Quality of the release.
        new_proper: Whether the release is a proper/repack.
        cutoff: Profile cutoff quality.

    Returns:
        True if the release is an upgrade.
    """
    if new_quality == current_quality:
        return new_proper and not current_proper
    if current_quality >= cutoff:
        return False
    return new_quality > current_quality


class InventoryService(IInventory):
    """
    Inventory service.

    A release is needed when its series is in the library and monitored,
    its quality is allowed by the series' profile, and every episode it
    covers exists, is not ignored, is not already on disk at an equal or
    better quality and has not been grabbed at that quality before.
    """

    def __init__(
        self,
        episode_repo: IEpisodeRepository,
        history_repo: IHistoryRepository,
        app_config: Optional[AppConfig] = None
    ):
        """
        Initialize the inventory service.

        Args:
            episode_repo: Series and episode lookups.
            history_repo: Grab history lookups.
            app_config: Application configuration (quality profiles).
        """
        self._episode_repo = episode_repo
        self._history_repo = history_repo
        self._config = app_config or config

    def is_needed(self, parse_result: EpisodeParseResult) -> bool:
        """
        Check whether a release should still be acquired.

        Args:
            parse_result: Release report to check.

        Returns:
            True if the release is wanted, False otherwise.
        """
        series = self._episode_repo.find_series(parse_result.clean_title)
        if series is None:
            logger.debug(f'⏭️ 系列不在媒体库中: {parse_result.clean_title}')
            return False

        if not series.monitored:
            logger.debug(f'⏭️ 系列未被监控: {series.display_name}')
            return False

        profile = self._config.get_profile(series.quality_profile)
        if not profile.is_allowed(parse_result.quality):
            logger.debug(
                f'⏭️ 质量 {parse_result.quality.display_name} 不在配置档 {profile.name} 允许范围内'
            )
            return False

        if not parse_result.episode_numbers:
            return False

        for episode_number in parse_result.episode_numbers:
            episode = self._episode_repo.find_episode(
                series.id, parse_result.season_number, episode_number
            )
            if episode is None:
                logger.debug(
                    f'⏭️ 剧集不存在: {series.display_name} '
                    f'S{parse_result.season_number:02d}E{episode_number:02d}'
                )
                return False

            if episode.ignored:
                logger.debug(f'⏭️ 剧集已被忽略: {episode}')
                return False

            if episode.has_file and not is_upgrade(
                episode.file_quality,
                episode.file_proper,
                parse_result.quality,
                parse_result.proper,
                profile.cutoff
            ):
                logger.debug(f'⏭️ 已有文件且不是升级: {episode}')
                return False

            if self._history_repo.exists(episode.id, parse_result.quality, parse_result.proper):
                logger.debug(f'⏭️ 已抓取过相同质量的发布: {episode}')
                return False

        return True
