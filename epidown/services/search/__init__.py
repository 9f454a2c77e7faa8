"""
Search services module.

Contains the episode search job and the ranking/selection pipeline it drives.
"""

from epidown.services.search.candidate_selector import CandidateSelector, SelectionResult
from epidown.services.search.episode_search_job import EpisodeSearchJob, SearchJobResult
from epidown.services.search.indexer_aggregator import (
    AggregateResult,
    IndexerAggregator,
    IndexerSearchResult,
)
from epidown.services.search.quality_ranking import compare_candidates, rank_candidates

__all__ = [
    'AggregateResult',
    'CandidateSelector',
    'EpisodeSearchJob',
    'IndexerAggregator',
    'IndexerSearchResult',
    'SearchJobResult',
    'SelectionResult',
    'compare_candidates',
    'rank_candidates',
]
