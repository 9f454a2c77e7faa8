"""
Episode repository module.

Contains the EpisodeRepository class implementing IEpisodeRepository for
series and episode data access operations.
"""

import logging
from datetime import date
from typing import List, Optional

from epidown.core.domain.entities import Episode, Series
from epidown.core.domain.value_objects import Quality, SeriesTitle
from epidown.core.interfaces.repositories import IEpisodeRepository
from epidown.infrastructure.database.models import Episode as EpisodeModel
from epidown.infrastructure.database.models import Series as SeriesModel
from epidown.infrastructure.database.session import DatabaseSessionManager, db_manager

logger = logging.getLogger(__name__)


class EpisodeRepository(IEpisodeRepository):
    """剧集数据仓库"""

    def __init__(self, session_manager: Optional[DatabaseSessionManager] = None):
        self._db = session_manager or db_manager

    def _to_series_entity(self, row: SeriesModel) -> Series:
        """将数据库行转换为系列实体"""
        return Series(
            id=row.id,
            title=SeriesTitle(title=row.title, search_title=row.search_title),
            clean_title=row.clean_title,
            monitored=bool(row.monitored),
            quality_profile=row.quality_profile or ''
        )

    def _to_episode_entity(self, row: EpisodeModel) -> Episode:
        """将数据库行转换为剧集实体"""
        return Episode(
            id=row.id,
            series_id=row.series_id,
            series=self._to_series_entity(row.series) if row.series else None,
            season_number=row.season_number,
            episode_number=row.episode_number,
            title=row.title or '',
            air_date=row.air_date,
            ignored=bool(row.ignored),
            file_quality=Quality(row.file_quality) if row.file_quality is not None else None,
            file_proper=bool(row.file_proper)
        )

    # ==================== IEpisodeRepository Interface ====================

    def get_episode(self, episode_id: int) -> Optional[Episode]:
        """根据ID获取剧集（包含所属系列）"""
        with self._db.session() as session:
            row = session.query(EpisodeModel).filter_by(id=episode_id).first()
            if row:
                return self._to_episode_entity(row)
            return None

    def find_series(self, clean_title: str) -> Optional[Series]:
        """根据规范化标题查找系列"""
        with self._db.session() as session:
            row = session.query(SeriesModel).filter_by(clean_title=clean_title).first()
            if row:
                return self._to_series_entity(row)
            return None

    def find_episode(
        self,
        series_id: int,
        season_number: int,
        episode_number: int
    ) -> Optional[Episode]:
        """根据季号和集号查找剧集"""
        with self._db.session() as session:
            row = session.query(EpisodeModel).filter_by(
                series_id=series_id,
                season_number=season_number,
                episode_number=episode_number
            ).first()
            if row:
                return self._to_episode_entity(row)
            return None

    def get_missing_episodes(self, aired_before: Optional[date] = None) -> List[Episode]:
        """获取已播出但尚无文件的剧集（仅限监控中的系列）"""
        aired_before = aired_before or date.today()
        with self._db.session() as session:
            rows = session.query(EpisodeModel).join(SeriesModel).filter(
                SeriesModel.monitored.is_(True),
                EpisodeModel.ignored.is_(False),
                EpisodeModel.file_quality.is_(None),
                EpisodeModel.air_date.isnot(None),
                EpisodeModel.air_date <= aired_before
            ).order_by(
                EpisodeModel.air_date.asc(),
                EpisodeModel.id.asc()
            ).all()
            return [self._to_episode_entity(row) for row in rows]

    # ==================== Management Methods ====================

    def add_series(
        self,
        title: str,
        clean_title: str,
        search_title: Optional[str] = None,
        monitored: bool = True,
        quality_profile: str = ''
    ) -> int:
        """添加系列，已存在时返回现有ID"""
        with self._db.session() as session:
            existing = session.query(SeriesModel).filter_by(clean_title=clean_title).first()
            if existing:
                return existing.id

            series = SeriesModel(
                title=title,
                clean_title=clean_title,
                search_title=search_title,
                monitored=monitored,
                quality_profile=quality_profile
            )
            session.add(series)
            session.flush()
            logger.info(f'📺 已添加系列: {title} (ID={series.id})')
            return series.id

    def add_episode(
        self,
        series_id: int,
        season_number: int,
        episode_number: int,
        title: str = '',
        air_date: Optional[date] = None,
        ignored: bool = False,
        file_quality: Optional[Quality] = None,
        file_proper: bool = False
    ) -> int:
        """添加剧集，已存在时返回现有ID"""
        with self._db.session() as session:
            existing = session.query(EpisodeModel).filter_by(
                series_id=series_id,
                season_number=season_number,
                episode_number=episode_number
            ).first()
            if existing:
                return existing.id

            episode = EpisodeModel(
                series_id=series_id,
                season_number=season_number,
                episode_number=episode_number,
                title=title,
                air_date=air_date,
                ignored=ignored,
                file_quality=int(file_quality) if file_quality is not None else None,
                file_proper=file_proper
            )
            session.add(episode)
            session.flush()
            return episode.id

    def update_episode_file(
        self,
        episode_id: int,
        file_quality: Optional[Quality],
        file_proper: bool = False
    ) -> bool:
        """更新剧集文件质量"""
        with self._db.session() as session:
            count = session.query(EpisodeModel).filter_by(id=episode_id).update({
                'file_quality': int(file_quality) if file_quality is not None else None,
                'file_proper': file_proper
            })
            return count > 0
