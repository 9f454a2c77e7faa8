"""
EpiDown - episode search and download manager.
"""

__version__ = '1.0.0'
