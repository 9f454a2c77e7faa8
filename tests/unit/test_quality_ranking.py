"""
Unit tests for release ranking.

Tests the comparator and the stable ranking of release reports.
"""

from epidown.core.domain.value_objects import Quality
from epidown.services.search.quality_ranking import compare_candidates, rank_candidates


class TestCompareCandidates:
    """Test suite for compare_candidates."""

    def test_higher_quality_ranks_first(self, make_report):
        """Test a better tier wins regardless of proper flag."""
        better = make_report(Quality.BLURAY1080P)
        worse = make_report(Quality.DVD, proper=True)

        assert compare_candidates(better, worse) < 0
        assert compare_candidates(worse, better) > 0

    def test_proper_ranks_first_within_tier(self, make_report):
        """Test proper beats non-proper of the same tier."""
        proper = make_report(Quality.HDTV, proper=True)
        regular = make_report(Quality.HDTV)

        assert compare_candidates(proper, regular) < 0
        assert compare_candidates(regular, proper) > 0

    def test_equal_reports_compare_zero(self, make_report):
        """Test reports equal on tier and proper flag are ties."""
        a = make_report(Quality.WEBDL, proper=True)
        b = make_report(Quality.WEBDL, proper=True)

        assert compare_candidates(a, b) == 0


class TestRankCandidates:
    """Test suite for rank_candidates."""

    def test_orders_by_quality_then_proper(self, make_report):
        """Test full ordering of a mixed list."""
        sdtv = make_report(Quality.SDTV)
        hdtv = make_report(Quality.HDTV)
        hdtv_proper = make_report(Quality.HDTV, proper=True)
        bluray = make_report(Quality.BLURAY720P)

        ranked = rank_candidates([sdtv, hdtv, bluray, hdtv_proper])

        assert ranked == [bluray, hdtv_proper, hdtv, sdtv]

    def test_ties_keep_input_order(self, make_report):
        """Test the sort is stable."""
        reports = [make_report(Quality.DVD) for _ in range(5)]

        ranked = rank_candidates(reports)

        assert [r.title for r in ranked] == [r.title for r in reports]

    def test_input_is_not_modified(self, make_report):
        """Test ranking returns a new list."""
        reports = [make_report(Quality.SDTV), make_report(Quality.BLURAY1080P)]
        original = list(reports)

        ranked = rank_candidates(reports)

        assert reports == original
        assert ranked is not reports
        assert ranked[0].quality == Quality.BLURAY1080P

    def test_empty_input(self):
        """Test ranking an empty list."""
        assert rank_candidates([]) == []

    def test_accepts_generators(self, make_report):
        """Test any iterable can be ranked."""
        reports = [make_report(Quality.SDTV), make_report(Quality.WEBDL)]

        ranked = rank_candidates(r for r in reports)

        assert [r.quality for r in ranked] == [Quality.WEBDL, Quality.SDTV]
