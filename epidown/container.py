"""
Dependency Injection Container module.

Contains the Container class wiring repositories, adapters and the
episode search services.
"""

from dependency_injector import containers, providers

from epidown.core.config import config

# Database
from epidown.infrastructure.database.session import db_manager as global_db_manager

# External Adapters
from epidown.infrastructure.downloader.qbit_adapter import QBitAdapter
from epidown.infrastructure.indexers.registry import IndexerRegistry

# Repositories
from epidown.infrastructure.repositories.episode_repository import EpisodeRepository
from epidown.infrastructure.repositories.history_repository import HistoryRepository

# Services
from epidown.services.download.download_provider import DownloadProvider
from epidown.services.inventory_service import InventoryService
from epidown.services.parser.release_parser import ReleaseParser
from epidown.services.queue.search_queue import SearchQueueWorker
from epidown.services.search.candidate_selector import CandidateSelector
from epidown.services.search.episode_search_job import EpisodeSearchJob
from epidown.services.search.indexer_aggregator import IndexerAggregator


class Container(containers.DeclarativeContainer):
    """
    依赖注入容器。

    服务层次结构:
    1. Database & Repositories (基础数据访问)
    2. External Adapters (索引器、下载客户端)
    3. Search Services (需求判断、下载提交、候选选择)
    4. Orchestrator (剧集搜索任务与队列)
    """

    # ===== Configuration =====
    app_config = providers.Object(config)

    # ===== Database =====
    db_manager = providers.Object(global_db_manager)

    # ===== Repositories =====
    episode_repo = providers.Singleton(EpisodeRepository, session_manager=db_manager)
    history_repo = providers.Singleton(HistoryRepository, session_manager=db_manager)

    # ===== External Adapters =====
    release_parser = providers.Singleton(ReleaseParser)
    indexer_registry = providers.Singleton(
        IndexerRegistry,
        app_config=app_config,
        parser=release_parser
    )
    qb_client = providers.Singleton(QBitAdapter)

    # ===== Search Services =====
    inventory = providers.Singleton(
        InventoryService,
        episode_repo=episode_repo,
        history_repo=history_repo,
        app_config=app_config
    )
    download_provider = providers.Singleton(
        DownloadProvider,
        download_client=qb_client,
        episode_repo=episode_repo,
        history_repo=history_repo,
        app_config=app_config
    )
    candidate_selector = providers.Singleton(
        CandidateSelector,
        inventory=inventory,
        download_provider=download_provider
    )
    indexer_aggregator = providers.Singleton(
        IndexerAggregator,
        selector=candidate_selector,
        max_workers=config.search.max_workers,
        stop_on_first_grab=config.search.stop_on_first_grab
    )

    # ===== Orchestrator =====
    search_job = providers.Singleton(
        EpisodeSearchJob,
        episode_repo=episode_repo,
        indexer_registry=indexer_registry,
        aggregator=indexer_aggregator
    )
    search_queue = providers.Singleton(
        SearchQueueWorker,
        search_job=search_job,
        episode_repo=episode_repo
    )


# 全局容器实例
container = Container()
