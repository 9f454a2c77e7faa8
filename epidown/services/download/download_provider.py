"""
Download provider module.

Hands a chosen release to the download client and records the grab.
"""

import logging
from typing import Optional

from epidown.core.config import AppConfig, config
from epidown.core.domain.entities import EpisodeParseResult
from epidown.core.exceptions import TorrentAddError
from epidown.core.interfaces.adapters import IDownloadClient, IDownloadProvider
from epidown.core.interfaces.repositories import IEpisodeRepository, IHistoryRepository

logger = logging.getLogger(__name__)


class DownloadProvider(IDownloadProvider):
    """
    Download provider service.

    Builds the save path ``{base}/{tv_folder}/{series}/Season N``, adds the
    release to the download client and writes one history grab per
    covered episode.
    """

    def __init__(
        self,
        download_client: IDownloadClient,
        episode_repo: IEpisodeRepository,
        history_repo: IHistoryRepository,
        app_config: Optional[AppConfig] = None
    ):
        """
        Initialize the download provider.

        Args:
            download_client: Download client adapter.
            episode_repo: Series and episode lookups.
            history_repo: Grab history writer.
            app_config: Application configuration (download paths).
        """
        self._download_client = download_client
        self._episode_repo = episode_repo
        self._history_repo = history_repo
        self._config = app_config or config

    def download_report(self, parse_result: EpisodeParseResult) -> bool:
        """
        Send a release to the download client.

        Args:
            parse_result: Release report to download.

        Returns:
            True if the download client accepted the release, False otherwise.

        Raises:
            TorrentAddError: If the release carries no download URL.
        """
        if not parse_result.download_url:
            raise TorrentAddError(
                f'Release has no download URL: {parse_result.title}'
            )

        series = self._episode_repo.find_series(parse_result.clean_title)
        series_name = series.title.safe_name if series and series.title else parse_result.clean_title
        save_path = self.build_save_path(series_name, parse_result.season_number)

        logger.info(f'📥 发送到下载客户端: {parse_result}')
        logger.debug(f'  保存路径: {save_path}')

        added = self._download_client.add_torrent(parse_result.download_url, save_path)
        if not added:
            logger.warning(f'⚠️ 下载客户端未接受该发布: {parse_result.title}')
            return False

        if series is None:
            return True

        for episode_number in parse_result.episode_numbers:
            episode = self._episode_repo.find_episode(
                series.id, parse_result.season_number, episode_number
            )
            if episode is None:
                continue
            self._history_repo.add_grab(
                episode_id=episode.id,
                release_title=parse_result.title,
                quality=parse_result.quality,
                proper=parse_result.proper,
                indexer=parse_result.indexer,
                download_url=parse_result.download_url
            )

        return True

    def build_save_path(self, series_name: str, season_number: int) -> str:
        """
        Build the download directory of a season.

        Args:
            series_name: Filename-safe series name.
            season_number: Season number.

        Returns:
            Save path using forward slashes.
        """
        qbit = self._config.qbittorrent
        base = qbit.base_download_path.replace('\\', '/').rstrip('/')
        parts = [base, qbit.tv_folder_name.strip('/'), series_name, f'Season {season_number}']
        return '/'.join(part for part in parts if part)
