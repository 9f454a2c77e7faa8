"""
Release parser module.

Provides regex-based parsing of scene release titles into series title,
season/episode numbers, quality tier and proper flag.
"""

import logging
import re
from dataclasses import dataclass

from epidown.core.domain.entities import EpisodeParseResult
from epidown.core.domain.value_objects import Quality

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedRelease:
    """
    Parsed release title.

    Attributes:
        title: Original release title.
        series_title: Series title as written in the release.
        clean_title: Normalized series title used for library lookups.
        season_number: Season number.
        episode_numbers: Episode numbers covered by the release.
        quality: Quality tier.
        proper: Whether the release is a proper/repack.
    """
    title: str
    series_title: str
    clean_title: str
    season_number: int
    episode_numbers: tuple[int, ...]
    quality: Quality = Quality.UNKNOWN
    proper: bool = False

    def to_parse_result(
        self,
        download_url: str = '',
        indexer: str = '',
        size: int = 0
    ) -> EpisodeParseResult:
        """Build the release report handed to the search core."""
        return EpisodeParseResult(
            title=self.title,
            quality=self.quality,
            proper=self.proper,
            clean_title=self.clean_title,
            season_number=self.season_number,
            episode_numbers=self.episode_numbers,
            download_url=download_url,
            indexer=indexer,
            size=size
        )


class ReleaseParser:
    """
    Release parser service.

    Parses titles such as ``Show.Name.S01E05.720p.HDTV.x264-GRP``,
    ``Show Name S01E01E02 WEB-DL`` or ``Show_Name_1x05_DVDRip``.
    """

    # Title patterns (ordered by specificity)
    TITLE_PATTERNS: list[tuple[str, str]] = [
        # Show.Name.S01E05, S01E01E02, S01E01-E02
        (r'^(?P<title>.+?)[\s._\-]+[Ss](?P<season>\d{1,2})(?P<episodes>(?:[\-\s.]?[Ee]\d{1,3})+)(?![\d])', 'season_episode'),
        # Show.Name.1x05, 1x05-1x06
        (r'^(?P<title>.+?)[\s._\-]+(?P<season>\d{1,2})[xX](?P<episodes>\d{2,3}(?:-(?:\d{1,2}[xX])?\d{2,3})*)(?![\d])', 'cross_format'),
    ]

    PROPER_PATTERN = re.compile(r'\b(proper|repack)\b', re.IGNORECASE)
    ARTICLE_PATTERN = re.compile(r'^(the|a|an)\s+', re.IGNORECASE)

    def __init__(self):
        """Initialize the release parser."""
        self._title_patterns = [
            (re.compile(pattern), name) for pattern, name in self.TITLE_PATTERNS
        ]

    def parse(self, title: str) -> ParsedRelease | None:
        """
        Parse a release title.

        Args:
            title: Release title as reported by an indexer.

        Returns:
            ParsedRelease, or None if no season/episode could be found.
        """
        if not title or not title.strip():
            return None

        for pattern, name in self._title_patterns:
            match = pattern.search(title)
            if not match:
                continue

            episodes = self._parse_episode_numbers(match.group('episodes'), name)
            if not episodes:
                continue

            series_title = self._clean_series_title(match.group('title'))
            if not series_title:
                continue

            logger.debug(f'🔍 [{name}] 解析发布标题: {title}')
            return ParsedRelease(
                title=title,
                series_title=series_title,
                clean_title=self.normalize_title(series_title),
                season_number=int(match.group('season')),
                episode_numbers=episodes,
                quality=self.parse_quality(title),
                proper=self.is_proper(title)
            )

        logger.debug(f'⚠️ 无法解析发布标题: {title}')
        return None

    def parse_quality(self, title: str) -> Quality:
        """
        Detect the quality tier of a release title.

        Args:
            title: Release title.

        Returns:
            Detected Quality, UNKNOWN if nothing matched.
        """
        name = title.lower()

        if 'bluray' in name or 'blu-ray' in name or 'bdrip' in name or 'brrip' in name:
            if '1080p' in name:
                return Quality.BLURAY1080P
            return Quality.BLURAY720P

        if 'web-dl' in name or 'webdl' in name or 'webrip' in name or 'web.dl' in name:
            return Quality.WEBDL

        if 'dvd' in name:
            return Quality.DVD

        is_hd = '720p' in name or '1080p' in name
        if is_hd and ('hdtv' in name or 'x264' in name or 'h264' in name or 'h.264' in name):
            return Quality.HDTV

        if 'hdtv' in name or 'pdtv' in name or 'sdtv' in name or 'xvid' in name or 'divx' in name:
            return Quality.SDTV

        return Quality.UNKNOWN

    def is_proper(self, title: str) -> bool:
        """Check if the release is a proper or repack."""
        return bool(self.PROPER_PATTERN.search(title.replace('.', ' ').replace('_', ' ')))

    def normalize_title(self, title: str) -> str:
        """
        Normalize a series title for matching.

        Lowercases, drops a leading article and keeps only letters and digits,
        so ``The Office (US)`` and ``Office.US`` both become ``officeus``.
        """
        if not title:
            return ''
        text = re.sub(r'[._]', ' ', title).strip()
        text = self.ARTICLE_PATTERN.sub('', text)
        return re.sub(r'[^a-z0-9]', '', text.lower())

    def _clean_series_title(self, raw: str) -> str:
        """Turn the title part of a release name into a readable title."""
        text = re.sub(r'[._]', ' ', raw)
        text = re.sub(r'\s+', ' ', text)
        return text.strip(' -')

    def _parse_episode_numbers(self, text: str, pattern_name: str) -> tuple[int, ...]:
        """Extract episode numbers, expanding E01-E03 style ranges."""
        if pattern_name == 'season_episode':
            numbers = [int(n) for n in re.findall(r'[Ee](\d{1,3})', text)]
            is_range = bool(re.search(r'-[Ee]\d', text))
        else:
            # 1x05-1x06: drop the repeated season prefix
            numbers = [int(n) for n in re.findall(r'(\d{2,3})', re.sub(r'\d{1,2}[xX]', '', text))]
            is_range = '-' in text

        if is_range and len(numbers) == 2 and numbers[0] < numbers[1]:
            return tuple(range(numbers[0], numbers[1] + 1))

        seen = []
        for number in numbers:
            if number not in seen:
                seen.append(number)
        return tuple(seen)
