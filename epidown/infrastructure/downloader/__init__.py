"""
Downloader module.

Contains download client adapters.
"""

from epidown.infrastructure.downloader.qbit_adapter import QBitAdapter

__all__ = ['QBitAdapter']
