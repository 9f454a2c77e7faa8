"""
Download services module.

Contains the download provider used by the episode search job.
"""

from epidown.services.download.download_provider import DownloadProvider

__all__ = ['DownloadProvider']
