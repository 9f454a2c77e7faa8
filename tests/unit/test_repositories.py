"""
Unit tests for the episode and history repositories.
"""

from datetime import date, timedelta

from epidown.core.domain.value_objects import Quality


class TestEpisodeRepository:
    """Test suite for EpisodeRepository."""

    def test_get_episode_with_series(self, episode_repo):
        """Test episodes are returned with their series."""
        series_id = episode_repo.add_series(
            title='The Office', clean_title='officeus', search_title='The Office US'
        )
        episode_id = episode_repo.add_episode(series_id, 2, 5, title='Halloween')

        episode = episode_repo.get_episode(episode_id)

        assert episode.id == episode_id
        assert episode.series.id == series_id
        assert episode.search_title == 'The Office US'
        assert str(episode) == 'The Office - S02E05'
        assert episode.has_file is False

    def test_get_episode_not_found(self, episode_repo):
        assert episode_repo.get_episode(999) is None

    def test_add_is_idempotent(self, episode_repo):
        """Test adding the same series or episode twice returns the same id."""
        first = episode_repo.add_series(title='Lost', clean_title='lost')
        second = episode_repo.add_series(title='LOST', clean_title='lost')
        assert first == second

        ep1 = episode_repo.add_episode(first, 1, 2)
        ep2 = episode_repo.add_episode(first, 1, 2, title='Pilot (2)')
        assert ep1 == ep2

    def test_find_series_and_episode(self, episode_repo):
        series_id = episode_repo.add_series(title='Lost', clean_title='lost')
        episode_repo.add_episode(series_id, 1, 2)

        assert episode_repo.find_series('lost').id == series_id
        assert episode_repo.find_series('fringe') is None
        assert episode_repo.find_episode(series_id, 1, 2).episode_number == 2
        assert episode_repo.find_episode(series_id, 1, 3) is None

    def test_update_episode_file(self, episode_repo):
        series_id = episode_repo.add_series(title='Lost', clean_title='lost')
        episode_id = episode_repo.add_episode(series_id, 1, 2)

        assert episode_repo.update_episode_file(episode_id, Quality.DVD, file_proper=True) is True

        episode = episode_repo.get_episode(episode_id)
        assert episode.file_quality == Quality.DVD
        assert episode.file_proper is True
        assert episode_repo.update_episode_file(999, Quality.DVD) is False

    def test_get_missing_episodes(self, episode_repo):
        """Test only aired, wanted episodes without a file are returned."""
        today = date.today()
        watched = episode_repo.add_series(title='Lost', clean_title='lost')
        unwatched = episode_repo.add_series(title='Fringe', clean_title='fringe', monitored=False)

        older = episode_repo.add_episode(watched, 1, 1, air_date=today - timedelta(days=10))
        newer = episode_repo.add_episode(watched, 1, 2, air_date=today - timedelta(days=3))
        episode_repo.add_episode(watched, 1, 3, air_date=today + timedelta(days=7))
        episode_repo.add_episode(watched, 1, 4, air_date=today - timedelta(days=2), ignored=True)
        episode_repo.add_episode(
            watched, 1, 5, air_date=today - timedelta(days=1), file_quality=Quality.HDTV
        )
        episode_repo.add_episode(watched, 1, 6)
        episode_repo.add_episode(unwatched, 1, 1, air_date=today - timedelta(days=5))

        missing = episode_repo.get_missing_episodes()

        assert [e.id for e in missing] == [older, newer]


class TestHistoryRepository:
    """Test suite for HistoryRepository."""

    def test_add_and_exists(self, episode_repo, history_repo):
        series_id = episode_repo.add_series(title='Lost', clean_title='lost')
        episode_id = episode_repo.add_episode(series_id, 1, 2)

        history_repo.add_grab(episode_id, 'Lost.S01E02.720p.HDTV', Quality.HDTV, False, indexer='Alpha')

        assert history_repo.exists(episode_id, Quality.HDTV, False) is True
        assert history_repo.exists(episode_id, Quality.HDTV, True) is False
        assert history_repo.exists(episode_id, Quality.WEBDL, False) is False

    def test_get_by_episode_newest_first(self, episode_repo, history_repo):
        series_id = episode_repo.add_series(title='Lost', clean_title='lost')
        episode_id = episode_repo.add_episode(series_id, 1, 2)

        history_repo.add_grab(episode_id, 'first', Quality.SDTV, False)
        history_repo.add_grab(episode_id, 'second', Quality.HDTV, False)

        records = history_repo.get_by_episode(episode_id)

        assert [r.release_title for r in records] == ['second', 'first']
        assert records[0].grabbed_at.tzinfo is not None
