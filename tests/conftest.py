"""
Test configuration and fixtures for EpiDown tests.

This module provides:
- Isolated configuration, database and log paths for the test session
- Builders for episodes and release reports
- Mock collaborators for the episode search services
"""

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, List, Optional
from unittest.mock import MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep the module-level config/db singletons away from the working directory
_TEST_ROOT = Path(tempfile.mkdtemp(prefix='epidown-tests-'))
os.environ.setdefault('CONFIG_PATH', str(_TEST_ROOT / 'config.json'))
os.environ.setdefault('DB_PATH', str(_TEST_ROOT / 'epidown.db'))
os.environ.setdefault('LOG_PATH', str(_TEST_ROOT / 'logs'))

from epidown.core.config import (  # noqa: E402
    AppConfig,
    IndexerConfig,
    QBitTorrentConfig,
    QualityProfileConfig,
)
from epidown.core.domain.entities import Episode, EpisodeParseResult, Series  # noqa: E402
from epidown.core.domain.value_objects import Quality, SeriesTitle  # noqa: E402
from epidown.core.interfaces.adapters import IIndexer  # noqa: E402
from epidown.core.interfaces.notifications import ProgressNotification  # noqa: E402


# ==================== Builders ====================

@pytest.fixture
def make_report() -> Callable[..., EpisodeParseResult]:
    """Factory for release reports."""
    counter = {'n': 0}

    def _make(
        quality: Quality = Quality.HDTV,
        proper: bool = False,
        title: Optional[str] = None,
        **kwargs
    ) -> EpisodeParseResult:
        counter['n'] += 1
        defaults = {
            'clean_title': 'officeus',
            'season_number': 2,
            'episode_numbers': (5,),
            'download_url': f'http://indexer.test/get/{counter["n"]}.torrent',
            'indexer': 'TestIndexer',
        }
        defaults.update(kwargs)
        return EpisodeParseResult(
            title=title or f'The.Office.US.S02E05.{quality.name}.{counter["n"]}',
            quality=quality,
            proper=proper,
            **defaults
        )

    return _make


@pytest.fixture
def series() -> Series:
    """A monitored series with a scene search title."""
    return Series(
        id=1,
        title=SeriesTitle(title='The Office', search_title='The Office US'),
        clean_title='officeus',
        monitored=True,
        quality_profile='HD'
    )


@pytest.fixture
def episode(series) -> Episode:
    """Episode S02E05 of the test series."""
    return Episode(
        id=10,
        series_id=series.id,
        series=series,
        season_number=2,
        episode_number=5,
        title='Halloween'
    )


@pytest.fixture
def progress() -> ProgressNotification:
    """A fresh progress notification."""
    return ProgressNotification(title='Episode Search')


# ==================== Mock Fixtures ====================

@pytest.fixture
def mock_inventory():
    """Inventory that wants nothing by default."""
    mock = MagicMock()
    mock.is_needed.return_value = False
    return mock


@pytest.fixture
def mock_download_provider():
    """Download provider that accepts every release."""
    mock = MagicMock()
    mock.download_report.return_value = True
    return mock


@pytest.fixture
def mock_qbit_client():
    """Mock qBittorrent client."""
    mock = MagicMock()
    mock.is_connected.return_value = True
    mock.add_torrent.return_value = True
    return mock


@pytest.fixture
def make_indexer() -> Callable[..., MagicMock]:
    """Factory for mock indexers returning fixed reports or raising."""

    def _make(
        name: str,
        reports: Optional[List[EpisodeParseResult]] = None,
        error: Optional[Exception] = None
    ) -> MagicMock:
        indexer = MagicMock(spec=IIndexer)
        indexer.name = name
        if error is not None:
            indexer.fetch_episode.side_effect = error
        else:
            indexer.fetch_episode.return_value = list(reports or [])
        return indexer

    return _make


@pytest.fixture
def count_logs(caplog) -> Callable[[int], int]:
    """Return a counter of captured EpiDown log records at one level."""
    caplog.set_level(logging.DEBUG, logger='epidown')

    def _count(level: int) -> int:
        return sum(
            1 for record in caplog.records
            if record.name.startswith('epidown') and record.levelno == level
        )

    return _count


# ==================== Configuration Fixtures ====================

@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    """Application configuration with two indexers and an HD profile."""
    return AppConfig(
        indexers=[
            IndexerConfig(name='Alpha', url='http://alpha.test', api_key='a-key'),
            IndexerConfig(name='Beta', url='http://beta.test', api_key='b-key'),
            IndexerConfig(name='Disabled', url='http://off.test', enabled=False),
        ],
        qbittorrent=QBitTorrentConfig(
            url='http://qbit.test:8080',
            username='admin',
            password='adminadmin',
            base_download_path=str(tmp_path / 'downloads'),
            tv_folder_name='TV'
        ),
        quality_profiles=[
            QualityProfileConfig(name='Any'),
            QualityProfileConfig(
                name='HD',
                allowed=['hdtv', 'webdl', 'bluray720p', 'bluray1080p'],
                cutoff='bluray720p'
            ),
        ]
    )


# ==================== Database Fixtures ====================

@pytest.fixture
def test_db_session(tmp_path):
    """Create an initialized database in a temporary directory."""
    from epidown.infrastructure.database.session import DatabaseSessionManager

    db_manager = DatabaseSessionManager(db_path=str(tmp_path / 'test_epidown.db'))
    db_manager.init_db()

    yield db_manager

    db_manager.dispose()


@pytest.fixture
def episode_repo(test_db_session):
    """Episode repository on the test database."""
    from epidown.infrastructure.repositories.episode_repository import EpisodeRepository
    return EpisodeRepository(session_manager=test_db_session)


@pytest.fixture
def history_repo(test_db_session):
    """History repository on the test database."""
    from epidown.infrastructure.repositories.history_repository import HistoryRepository
    return HistoryRepository(session_manager=test_db_session)
