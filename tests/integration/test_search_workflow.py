"""
Integration tests for the episode search workflow.

Wires real repositories, inventory and download provider on a temporary
database; only the indexers and the qBittorrent client are mocked.
"""

from unittest.mock import MagicMock

import pytest

from epidown.core.domain.value_objects import Quality, SearchOutcome
from epidown.core.interfaces.notifications import ProgressNotification, ProgressStatus
from epidown.services.download.download_provider import DownloadProvider
from epidown.services.inventory_service import InventoryService
from epidown.services.search.candidate_selector import CandidateSelector
from epidown.services.search.episode_search_job import EpisodeSearchJob
from epidown.services.search.indexer_aggregator import IndexerAggregator


class TestSearchWorkflow:
    """End-to-end search runs without network access."""

    @pytest.fixture
    def episode_id(self, episode_repo):
        series_id = episode_repo.add_series(
            title='The Office',
            clean_title='officeus',
            search_title='The Office US',
            quality_profile='HD'
        )
        return episode_repo.add_episode(series_id, 2, 5, title='Halloween')

    @pytest.fixture
    def registry(self):
        return MagicMock()

    @pytest.fixture
    def job(self, episode_repo, history_repo, app_config, mock_qbit_client, registry):
        inventory = InventoryService(episode_repo, history_repo, app_config=app_config)
        provider = DownloadProvider(
            mock_qbit_client, episode_repo, history_repo, app_config=app_config
        )
        aggregator = IndexerAggregator(CandidateSelector(inventory, provider))
        return EpisodeSearchJob(episode_repo, registry, aggregator)

    def test_best_release_is_grabbed_and_recorded(
        self, job, registry, episode_id, progress, make_indexer, make_report,
        mock_qbit_client, history_repo
    ):
        """Test the best allowed release is sent and written to history."""
        registry.get_enabled_indexers.return_value = [
            make_indexer('Alpha', [
                make_report(quality=Quality.DVD, indexer='Alpha'),
                make_report(quality=Quality.WEBDL, indexer='Alpha'),
                make_report(quality=Quality.HDTV, indexer='Alpha'),
            ]),
        ]

        result = job.start(progress, episode_id)

        assert result.outcome == SearchOutcome.GRABBED
        assert [r.quality for r in result.grabbed] == [Quality.WEBDL]
        mock_qbit_client.add_torrent.assert_called_once()
        assert progress.status == ProgressStatus.COMPLETED

        records = history_repo.get_by_episode(episode_id)
        assert len(records) == 1
        assert records[0].quality == Quality.WEBDL

    def test_second_indexer_only_grabs_better_release(
        self, job, registry, episode_id, progress, make_indexer, make_report,
        mock_qbit_client
    ):
        """Test a release already grabbed is not sent again by the next indexer."""
        registry.get_enabled_indexers.return_value = [
            make_indexer('Alpha', [make_report(quality=Quality.HDTV, indexer='Alpha')]),
            make_indexer('Beta', [make_report(quality=Quality.HDTV, indexer='Beta')]),
        ]

        result = job.start(progress, episode_id)

        assert result.outcome == SearchOutcome.GRABBED
        assert [r.indexer for r in result.grabbed] == ['Alpha']
        assert mock_qbit_client.add_torrent.call_count == 1

    def test_repeat_search_finds_nothing_new(
        self, job, registry, episode_id, make_indexer, make_report
    ):
        """Test a second run does not grab the same quality again."""

        reports = [make_report(quality=Quality.HDTV, indexer='Alpha')]
        registry.get_enabled_indexers.return_value = [make_indexer('Alpha', reports)]

        first = job.start(ProgressNotification(title='Episode Search'), episode_id)
        second = job.start(ProgressNotification(title='Episode Search'), episode_id)

        assert first.outcome == SearchOutcome.GRABBED
        assert second.outcome == SearchOutcome.NO_ACCEPTABLE_CANDIDATE

    def test_failing_indexer_and_rejected_download(
        self, job, registry, episode_id, progress, make_indexer, make_report,
        mock_qbit_client, history_repo
    ):
        """Test a broken indexer and a refused torrent still end the run cleanly."""
        mock_qbit_client.add_torrent.return_value = False
        registry.get_enabled_indexers.return_value = [
            make_indexer('Alpha', error=ConnectionError('down')),
            make_indexer('Beta', [make_report(quality=Quality.HDTV, indexer='Beta')]),
        ]

        result = job.start(progress, episode_id)

        # The selector stops on the hand-off even if the client refused it
        assert result.outcome == SearchOutcome.GRABBED
        assert result.indexers_failed == ['Alpha']
        assert history_repo.get_by_episode(episode_id) == []

    def test_unknown_episode(self, job, registry, progress):
        result = job.start(progress, 4242)

        assert result.outcome == SearchOutcome.EPISODE_NOT_FOUND
        registry.get_enabled_indexers.assert_not_called()
        assert progress.status == ProgressStatus.FAILED
