"""
Database models module.

Contains SQLAlchemy ORM models for the EpiDown application.
"""

from sqlalchemy import (
    Boolean, Column, Date, ForeignKey, Integer, Text,
    TIMESTAMP, UniqueConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship

from epidown.core.utils.timezone_utils import get_utc_now

Base = declarative_base()


class Series(Base):
    """剧集系列表"""

    __tablename__ = 'series'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    clean_title = Column(Text, nullable=False, unique=True)
    search_title = Column(Text)  # 搜索索引器时使用的场景名称
    monitored = Column(Boolean, default=True, nullable=False)
    quality_profile = Column(Text, default='')
    created_at = Column(TIMESTAMP, default=get_utc_now)
    updated_at = Column(TIMESTAMP, default=get_utc_now, onupdate=get_utc_now)

    # 关系
    episodes = relationship('Episode', back_populates='series', cascade='all, delete-orphan')

    __table_args__ = (
        Index('idx_series_clean_title', 'clean_title'),
    )

    def __repr__(self):
        return f"<Series(id={self.id}, title='{self.title}')>"


class Episode(Base):
    """剧集单集表"""

    __tablename__ = 'episodes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    series_id = Column(Integer, ForeignKey('series.id'), nullable=False)
    season_number = Column(Integer, nullable=False)
    episode_number = Column(Integer, nullable=False)
    title = Column(Text, default='')
    air_date = Column(Date)
    ignored = Column(Boolean, default=False, nullable=False)
    file_quality = Column(Integer)  # Quality 数值, NULL 表示尚无文件
    file_proper = Column(Boolean, default=False, nullable=False)
    created_at = Column(TIMESTAMP, default=get_utc_now)
    updated_at = Column(TIMESTAMP, default=get_utc_now, onupdate=get_utc_now)

    # 关系
    series = relationship('Series', back_populates='episodes')
    history = relationship('History', back_populates='episode', cascade='all, delete-orphan')

    __table_args__ = (
        UniqueConstraint('series_id', 'season_number', 'episode_number', name='uq_episode_number'),
        Index('idx_episode_series', 'series_id'),
    )

    def __repr__(self):
        return (
            f'<Episode(id={self.id}, series_id={self.series_id}, '
            f'S{self.season_number:02d}E{self.episode_number:02d})>'
        )


class History(Base):
    """抓取历史表"""

    __tablename__ = 'history'

    id = Column(Integer, primary_key=True, autoincrement=True)
    episode_id = Column(Integer, ForeignKey('episodes.id'), nullable=False)
    release_title = Column(Text, nullable=False)
    quality = Column(Integer, nullable=False)
    proper = Column(Boolean, default=False, nullable=False)
    indexer = Column(Text, default='')
    download_url = Column(Text, default='')
    grabbed_at = Column(TIMESTAMP, default=get_utc_now)

    # 关系
    episode = relationship('Episode', back_populates='history')

    __table_args__ = (
        Index('idx_history_episode', 'episode_id'),
    )

    def __repr__(self):
        return f"<History(id={self.id}, episode_id={self.episode_id}, title='{self.release_title}')>"
