"""
Indexers module.

Contains indexer adapters and the registry that builds them.
"""

from epidown.infrastructure.indexers.newznab import NewznabIndexer
from epidown.infrastructure.indexers.registry import IndexerRegistry

__all__ = ['IndexerRegistry', 'NewznabIndexer']
