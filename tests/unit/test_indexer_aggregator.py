"""
Unit tests for the indexer aggregator.

Tests per-indexer selection, indexer failure isolation, optional
concurrent fetching and cancellation.
"""

import logging
import threading
from unittest.mock import MagicMock

import pytest

from epidown.core.domain.value_objects import Quality
from epidown.core.exceptions import IndexerRequestError
from epidown.services.search.candidate_selector import CandidateSelector
from epidown.services.search.indexer_aggregator import IndexerAggregator


class TestIndexerAggregator:
    """Test suite for IndexerAggregator."""

    @pytest.fixture
    def selector(self, mock_inventory, mock_download_provider):
        """Create a real selector with mock collaborators."""
        return CandidateSelector(mock_inventory, mock_download_provider)

    @pytest.fixture
    def aggregator(self, selector):
        """Create a sequential aggregator."""
        return IndexerAggregator(selector)

    def test_each_indexer_queried_with_episode_coordinates(
        self, aggregator, progress, episode, make_indexer, make_report
    ):
        """Test the search title and numbers are passed to every indexer."""
        alpha = make_indexer('Alpha', [make_report()])
        beta = make_indexer('Beta', [make_report()])

        aggregator.search(progress, episode, [alpha, beta])

        alpha.fetch_episode.assert_called_once_with('The Office US', 2, 5)
        beta.fetch_episode.assert_called_once_with('The Office US', 2, 5)

    def test_selector_runs_per_indexer(
        self, aggregator, mock_inventory, progress, episode,
        make_indexer, make_report, count_logs
    ):
        """Test each indexer's reports are scanned on their own."""
        alpha = make_indexer('Alpha', [make_report() for _ in range(4)])
        beta = make_indexer('Beta', [make_report() for _ in range(4)])

        result = aggregator.search(progress, episode, [alpha, beta])

        assert mock_inventory.is_needed.call_count == 8
        assert count_logs(logging.WARNING) == 2
        assert result.total_reports == 8
        assert result.grabbed == []

    def test_each_indexer_can_grab(
        self, aggregator, mock_inventory, mock_download_provider,
        progress, episode, make_indexer, make_report
    ):
        """Test results are not merged: every indexer gets its own grab."""
        alpha_best = make_report(Quality.BLURAY720P)
        beta_best = make_report(Quality.WEBDL)
        alpha = make_indexer('Alpha', [make_report(Quality.SDTV), alpha_best])
        beta = make_indexer('Beta', [beta_best, make_report(Quality.DVD)])
        mock_inventory.is_needed.return_value = True

        result = aggregator.search(progress, episode, [alpha, beta])

        assert result.grabbed == [alpha_best, beta_best]
        assert mock_download_provider.download_report.call_count == 2

    def test_failing_indexer_is_isolated(
        self, aggregator, mock_inventory, mock_download_provider,
        progress, episode, make_indexer, make_report, count_logs
    ):
        """Test an indexer error is logged and later indexers still run."""
        report = make_report(Quality.HDTV)
        broken = make_indexer('Broken', error=IndexerRequestError('timeout', indexer_name='Broken'))
        working = make_indexer('Working', [report])
        mock_inventory.is_needed.return_value = True

        result = aggregator.search(progress, episode, [broken, working])

        assert result.failed_indexers == ['Broken']
        assert result.grabbed == [report]
        working.fetch_episode.assert_called_once()
        mock_download_provider.download_report.assert_called_once_with(report)
        assert count_logs(logging.ERROR) == 1

    def test_empty_results_skip_selector(
        self, aggregator, mock_inventory, progress, episode,
        make_indexer, count_logs
    ):
        """Test an indexer with no reports does not produce a scan warning."""
        empty = make_indexer('Empty', [])

        result = aggregator.search(progress, episode, [empty])

        mock_inventory.is_needed.assert_not_called()
        assert result.indexers[0].selection is None
        assert count_logs(logging.WARNING) == 0

    def test_no_indexers(self, aggregator, progress, episode):
        """Test searching with no indexers returns an empty result."""
        result = aggregator.search(progress, episode, [])

        assert result.indexers == []
        assert result.total_reports == 0

    def test_progress_message_per_indexer(
        self, aggregator, progress, episode, make_indexer
    ):
        """Test every fetch attempt is reported on the progress channel."""
        alpha = make_indexer('Alpha', [])
        beta = make_indexer('Beta', error=RuntimeError('down'))

        aggregator.search(progress, episode, [alpha, beta])

        assert any('Alpha' in m for m in progress.messages)
        assert any('Beta' in m for m in progress.messages)

    def test_stop_on_first_grab(
        self, selector, mock_inventory, progress, episode,
        make_indexer, make_report
    ):
        """Test later indexers are skipped once a grab happened."""
        aggregator = IndexerAggregator(selector, stop_on_first_grab=True)
        alpha = make_indexer('Alpha', [make_report()])
        beta = make_indexer('Beta', [make_report()])
        mock_inventory.is_needed.return_value = True

        result = aggregator.search(progress, episode, [alpha, beta])

        assert len(result.grabbed) == 1
        beta.fetch_episode.assert_not_called()

    def test_parallel_fetch_keeps_registry_order(
        self, selector, mock_inventory, progress, episode,
        make_indexer, make_report
    ):
        """Test concurrent fetching still selects in registry order."""
        aggregator = IndexerAggregator(selector, max_workers=4)
        reports = {name: make_report(indexer=name) for name in ('A', 'B', 'C')}
        indexers = [
            make_indexer('A', [reports['A']]),
            make_indexer('B', error=RuntimeError('down')),
            make_indexer('C', [reports['C']]),
        ]
        mock_inventory.is_needed.return_value = True

        result = aggregator.search(progress, episode, indexers)

        assert [r.indexer for r in result.indexers] == ['A', 'B', 'C']
        assert result.failed_indexers == ['B']
        assert result.grabbed == [reports['A'], reports['C']]
        for indexer in indexers:
            indexer.fetch_episode.assert_called_once()

    def test_cancel_before_search(
        self, aggregator, progress, episode, make_indexer
    ):
        """Test a cancelled search queries no indexer."""
        cancel_event = threading.Event()
        cancel_event.set()
        alpha = make_indexer('Alpha', [])

        result = aggregator.search(progress, episode, [alpha], cancel_event)

        assert result.cancelled is True
        alpha.fetch_episode.assert_not_called()

    def test_cancel_between_indexers(
        self, aggregator, progress, episode, make_indexer
    ):
        """Test cancellation after the first indexer skips the rest."""
        cancel_event = threading.Event()
        alpha = make_indexer('Alpha', [])
        alpha.fetch_episode.side_effect = lambda *args: cancel_event.set() or []
        beta = make_indexer('Beta', [])

        result = aggregator.search(progress, episode, [alpha, beta], cancel_event)

        assert result.cancelled is True
        beta.fetch_episode.assert_not_called()

    def test_parallel_cancel_before_search(
        self, selector, progress, episode, make_indexer
    ):
        """Test a cancelled concurrent search submits no fetch."""
        aggregator = IndexerAggregator(selector, max_workers=4)
        cancel_event = threading.Event()
        cancel_event.set()
        indexers = [make_indexer(name, []) for name in ('A', 'B', 'C')]

        result = aggregator.search(progress, episode, indexers, cancel_event)

        assert result.cancelled is True
        assert result.indexers == []
        for indexer in indexers:
            indexer.fetch_episode.assert_not_called()

    def test_parallel_cancel_skips_waiting_indexers(
        self, selector, mock_inventory, progress, episode, make_indexer, make_report
    ):
        """Test indexers still waiting for a worker are not fetched after a cancel."""
        aggregator = IndexerAggregator(selector, max_workers=2)
        cancel_event = threading.Event()

        alpha = make_indexer('A', [])
        alpha.fetch_episode.side_effect = lambda *args: cancel_event.set() or []
        beta = make_indexer('B', [])
        beta.fetch_episode.side_effect = lambda *args: cancel_event.wait(timeout=5) and []
        gamma = make_indexer('C', [make_report()])

        result = aggregator.search(progress, episode, [alpha, beta, gamma], cancel_event)

        assert result.cancelled is True
        gamma.fetch_episode.assert_not_called()
        mock_inventory.is_needed.assert_not_called()

    def test_unnamed_indexer_uses_class_name(self, aggregator, progress, episode):
        """Test indexers without a string name are still reported."""
        indexer = MagicMock()
        indexer.name = None
        indexer.fetch_episode.return_value = []

        result = aggregator.search(progress, episode, [indexer])

        assert result.indexers[0].indexer == 'MagicMock'
