"""
Configuration module.

Contains Pydantic-based configuration classes for the EpiDown application.
"""

import json
import os
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings

from epidown.core.domain.value_objects import Quality
from epidown.core.exceptions import ConfigError


def _to_quality(value):
    """将质量名称或数值转换为 Quality"""
    if isinstance(value, Quality):
        return value
    if isinstance(value, int):
        return Quality(value)
    return Quality.from_name(value)


class IndexerConfig(BaseModel):
    """单个索引器配置 (Newznab/Torznab API)"""

    name: str
    url: str
    api_key: str = ''
    categories: List[int] = Field(default_factory=lambda: [5030, 5040])
    enabled: bool = True
    timeout: int = Field(default=30, ge=1, le=300)  # 请求超时时间（秒）


class QBitTorrentConfig(BaseModel):
    """qBittorrent 配置"""

    url: str = 'http://localhost:8080'
    username: str = ''
    password: str = ''
    base_download_path: str = '/downloads/EpiDown/'
    category: str = 'EpiDown'
    tv_folder_name: str = 'TV'


class QualityProfileConfig(BaseModel):
    """质量配置档"""

    model_config = ConfigDict(validate_assignment=True)

    name: str = 'Any'
    # 允许下载的质量
    allowed: List[Quality] = Field(
        default_factory=lambda: [q for q in Quality if q != Quality.UNKNOWN]
    )
    # 达到该质量后不再升级
    cutoff: Quality = Quality.HDTV

    @field_validator('allowed', mode='before')
    @classmethod
    def convert_allowed(cls, v):
        """将质量名称列表转换为 Quality 列表"""
        if not isinstance(v, list):
            return v
        return [_to_quality(item) for item in v]

    @field_validator('cutoff', mode='before')
    @classmethod
    def convert_cutoff(cls, v):
        """将质量名称转换为 Quality"""
        return _to_quality(v)

    @model_validator(mode='after')
    def check_cutoff_allowed(self):
        """cutoff 必须在允许的质量中"""
        if self.allowed and self.cutoff not in self.allowed:
            raise ValueError(
                f'cutoff {self.cutoff.name} is not in allowed qualities of profile {self.name}'
            )
        return self

    @field_serializer('allowed')
    def serialize_allowed(self, allowed: List[Quality]) -> List[str]:
        return [q.name.lower() for q in allowed]

    @field_serializer('cutoff')
    def serialize_cutoff(self, cutoff: Quality) -> str:
        return cutoff.name.lower()

    def is_allowed(self, quality: Quality) -> bool:
        """检查质量是否在允许列表中"""
        return quality in self.allowed


class SearchConfig(BaseModel):
    """搜索配置"""

    # 同时查询的索引器数量，1 表示顺序查询
    max_workers: int = Field(default=1, ge=1, le=16)
    # 任一索引器成功抓取后停止处理后续索引器
    stop_on_first_grab: bool = False


class BacklogConfig(BaseModel):
    """缺失剧集定时搜索配置"""

    enabled: bool = False
    interval_minutes: int = Field(default=360, ge=15)


class AppConfig(BaseSettings):
    """主应用配置"""

    indexers: List[IndexerConfig] = Field(default_factory=list)
    qbittorrent: QBitTorrentConfig = Field(default_factory=QBitTorrentConfig)
    quality_profiles: List[QualityProfileConfig] = Field(
        default_factory=lambda: [QualityProfileConfig()]
    )
    search: SearchConfig = Field(default_factory=SearchConfig)
    backlog: BacklogConfig = Field(default_factory=BacklogConfig)

    model_config = ConfigDict(
        env_prefix='EPIDOWN_',
        env_nested_delimiter='__'
    )

    def get_enabled_indexers(self) -> List[IndexerConfig]:
        """获取已启用的索引器配置，保持配置顺序"""
        return [indexer for indexer in self.indexers if indexer.enabled]

    def get_profile(self, name: Optional[str] = None) -> QualityProfileConfig:
        """按名称获取质量配置档，找不到时返回第一个配置档"""
        for profile in self.quality_profiles:
            if profile.name == name:
                return profile
        if self.quality_profiles:
            return self.quality_profiles[0]
        return QualityProfileConfig()

    def get(self, key: str, default=None):
        """获取配置值，支持点分隔的嵌套键"""
        value = self
        for k in key.split('.'):
            if hasattr(value, k):
                value = getattr(value, k)
            else:
                return default
        return value

    def set(self, key: str, value) -> bool:
        """设置配置值，支持点分隔的嵌套键"""
        keys = key.split('.')
        obj = self
        for k in keys[:-1]:
            if hasattr(obj, k):
                obj = getattr(obj, k)
            else:
                return False
        if not hasattr(obj, keys[-1]):
            return False
        setattr(obj, keys[-1], value)
        return True

    @classmethod
    def load(cls, config_path: str = None) -> 'AppConfig':
        """加载配置"""
        if config_path is None:
            config_path = os.getenv('CONFIG_PATH', 'config.json')

        if os.path.exists(config_path):
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)
                return cls(**config_data)
            except json.JSONDecodeError as e:
                raise ConfigError(
                    f'Invalid JSON in config file: {e}',
                    context={'config_path': config_path}
                ) from e
            except ValidationError as e:
                raise ConfigError(
                    f'Invalid configuration: {e}',
                    context={'config_path': config_path}
                ) from e

        # 如果配置文件不存在，创建默认配置并保存
        config_instance = cls()
        config_instance.save(config_path)
        return config_instance

    def save(self, config_path: str = None):
        """保存配置"""
        if config_path is None:
            config_path = os.getenv('CONFIG_PATH', 'config.json')

        config_dir = os.path.dirname(config_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            f.write(self.model_dump_json(indent=2))


# 全局配置实例
config = AppConfig.load()
