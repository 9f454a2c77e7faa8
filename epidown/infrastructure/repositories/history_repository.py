"""
History repository module.

Contains the HistoryRepository class implementing IHistoryRepository for
grab history records.
"""

import logging
from typing import List, Optional

from epidown.core.domain.entities import HistoryRecord
from epidown.core.domain.value_objects import Quality
from epidown.core.interfaces.repositories import IHistoryRepository
from epidown.core.utils.timezone_utils import to_utc
from epidown.infrastructure.database.models import History
from epidown.infrastructure.database.session import DatabaseSessionManager, db_manager

logger = logging.getLogger(__name__)


class HistoryRepository(IHistoryRepository):
    """抓取历史仓库"""

    def __init__(self, session_manager: Optional[DatabaseSessionManager] = None):
        self._db = session_manager or db_manager

    def _to_entity(self, row: History) -> HistoryRecord:
        """将数据库行转换为实体"""
        return HistoryRecord(
            id=row.id,
            episode_id=row.episode_id,
            release_title=row.release_title or '',
            quality=Quality(row.quality),
            proper=bool(row.proper),
            indexer=row.indexer or '',
            download_url=row.download_url or '',
            grabbed_at=to_utc(row.grabbed_at)
        )

    def add_grab(
        self,
        episode_id: int,
        release_title: str,
        quality: Quality,
        proper: bool,
        indexer: str = '',
        download_url: str = ''
    ) -> int:
        """记录一次抓取"""
        with self._db.session() as session:
            record = History(
                episode_id=episode_id,
                release_title=release_title,
                quality=int(quality),
                proper=proper,
                indexer=indexer,
                download_url=download_url
            )
            session.add(record)
            session.flush()
            logger.debug(f'📝 已记录抓取历史: episode_id={episode_id}, {release_title}')
            return record.id

    def exists(self, episode_id: int, quality: Quality, proper: bool) -> bool:
        """检查是否已抓取过相同质量的发布"""
        with self._db.session() as session:
            count = session.query(History).filter_by(
                episode_id=episode_id,
                quality=int(quality),
                proper=proper
            ).count()
            return count > 0

    def get_by_episode(self, episode_id: int) -> List[HistoryRecord]:
        """获取剧集的抓取历史（最新的在前）"""
        with self._db.session() as session:
            rows = session.query(History).filter_by(
                episode_id=episode_id
            ).order_by(History.grabbed_at.desc(), History.id.desc()).all()
            return [self._to_entity(row) for row in rows]
