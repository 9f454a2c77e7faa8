"""
Newznab indexer module.

Contains the NewznabIndexer class implementing IIndexer for Newznab and
Torznab compatible search APIs.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

import requests

from epidown.core.config import IndexerConfig
from epidown.core.domain.entities import EpisodeParseResult
from epidown.core.exceptions import IndexerRequestError
from epidown.core.interfaces.adapters import IIndexer
from epidown.services.parser.release_parser import ReleaseParser

logger = logging.getLogger(__name__)


class NewznabIndexer(IIndexer):
    """
    Newznab/Torznab indexer adapter.

    Sends a ``tvsearch`` request and turns the RSS 2.0 answer into release
    reports. Items whose title cannot be parsed, or that belong to another
    episode, are skipped.

    Example:
        >>> indexer = NewznabIndexer(IndexerConfig(name='Jackett', url='http://localhost:9117/api/v2.0/indexers/all/results/torznab'))
        >>> reports = indexer.fetch_episode('Show Name', 1, 5)
    """

    DEFAULT_USER_AGENT = 'EpiDown/1.0'

    # Attribute namespaces used by Newznab and Torznab feeds
    ATTR_NAMESPACES = (
        'http://www.newznab.com/DTD/2010/feeds/attributes/',
        'http://torznab.com/schemas/2015/feed',
    )

    def __init__(
        self,
        indexer_config: IndexerConfig,
        parser: Optional[ReleaseParser] = None
    ):
        """
        Initialize the indexer.

        Args:
            indexer_config: Indexer section from the configuration.
            parser: Release title parser (a new one is created if omitted).
        """
        self._config = indexer_config
        self._parser = parser or ReleaseParser()
        self._session = requests.Session()
        self._session.headers.update({
            'User-Agent': self.DEFAULT_USER_AGENT
        })

    @property
    def name(self) -> str:
        return self._config.name

    def fetch_episode(
        self,
        series_title: str,
        season_number: int,
        episode_number: int
    ) -> List[EpisodeParseResult]:
        """
        Search the indexer for one episode.

        Args:
            series_title: Series title to search for.
            season_number: Season number.
            episode_number: Episode number within the season.

        Returns:
            Parsed release reports for the episode.

        Raises:
            IndexerRequestError: If the request or the response parsing fails.
        """
        url = f'{self._config.url.rstrip("/")}/api'
        params = {
            't': 'tvsearch',
            'q': series_title,
            'season': season_number,
            'ep': episode_number,
        }
        if self._config.categories:
            params['cat'] = ','.join(str(c) for c in self._config.categories)
        if self._config.api_key:
            params['apikey'] = self._config.api_key

        logger.debug(f'🔍 [{self.name}] tvsearch: {series_title} S{season_number:02d}E{episode_number:02d}')

        try:
            response = self._session.get(url, params=params, timeout=self._config.timeout)
        except requests.RequestException as e:
            raise IndexerRequestError(
                f'Request to indexer failed: {e}',
                indexer_name=self.name
            ) from e

        if response.status_code != 200:
            raise IndexerRequestError(
                f'Indexer returned HTTP {response.status_code}',
                indexer_name=self.name,
                status_code=response.status_code
            )

        try:
            root = ET.fromstring(response.content)
        except ET.ParseError as e:
            raise IndexerRequestError(
                f'Invalid XML from indexer: {e}',
                indexer_name=self.name,
                status_code=response.status_code
            ) from e

        if root.tag == 'error':
            raise IndexerRequestError(
                f'Indexer error {root.get("code")}: {root.get("description", "")}',
                indexer_name=self.name,
                status_code=response.status_code
            )

        reports = self._parse_items(root, season_number, episode_number)
        logger.info(f'✅ [{self.name}] 获取到 {len(reports)} 个结果')
        return reports

    def _parse_items(
        self,
        root: ET.Element,
        season_number: int,
        episode_number: int
    ) -> List[EpisodeParseResult]:
        """Parse the RSS items of a search response."""
        reports = []

        for item in root.iter('item'):
            title = (item.findtext('title') or '').strip()
            if not title:
                continue

            parsed = self._parser.parse(title)
            if parsed is None:
                logger.debug(f'⚠️ [{self.name}] 跳过无法解析的标题: {title}')
                continue

            if parsed.season_number != season_number or episode_number not in parsed.episode_numbers:
                logger.debug(f'⏭️ [{self.name}] 跳过其他剧集的结果: {title}')
                continue

            enclosure = item.find('enclosure')
            download_url = ''
            if enclosure is not None:
                download_url = enclosure.get('url', '')
            if not download_url:
                download_url = (item.findtext('link') or '').strip()

            reports.append(parsed.to_parse_result(
                download_url=download_url,
                indexer=self.name,
                size=self._get_size(item, enclosure)
            ))

        return reports

    def _get_size(self, item: ET.Element, enclosure: Optional[ET.Element]) -> int:
        """Read the release size from the enclosure or a size attribute."""
        candidates = []
        if enclosure is not None:
            candidates.append(enclosure.get('length'))
        for namespace in self.ATTR_NAMESPACES:
            for attr in item.findall(f'{{{namespace}}}attr'):
                if attr.get('name') == 'size':
                    candidates.append(attr.get('value'))
        candidates.append(item.findtext('size'))

        for value in candidates:
            try:
                size = int(value)
            except (TypeError, ValueError):
                continue
            if size > 0:
                return size
        return 0
