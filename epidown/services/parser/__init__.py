"""
Parser services module.

Contains the release title parser.
"""

from epidown.services.parser.release_parser import ParsedRelease, ReleaseParser

__all__ = ['ParsedRelease', 'ReleaseParser']
