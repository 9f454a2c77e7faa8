"""
Indexer registry module.

Builds the enabled indexers from the configuration.
"""

import logging
from typing import List, Optional

from epidown.core.config import AppConfig, config
from epidown.core.interfaces.adapters import IIndexer, IIndexerRegistry
from epidown.infrastructure.indexers.newznab import NewznabIndexer
from epidown.services.parser.release_parser import ReleaseParser

logger = logging.getLogger(__name__)


class IndexerRegistry(IIndexerRegistry):
    """索引器注册表"""

    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        parser: Optional[ReleaseParser] = None
    ):
        self._config = app_config or config
        self._parser = parser or ReleaseParser()

    def get_enabled_indexers(self) -> List[IIndexer]:
        """按配置顺序返回已启用的索引器"""
        indexers = [
            NewznabIndexer(indexer_config, self._parser)
            for indexer_config in self._config.get_enabled_indexers()
        ]
        logger.debug(f'📋 已启用的索引器: {[i.name for i in indexers]}')
        return indexers
