"""
基础设施层模块。

提供外部服务集成实现，包括：
- 数据库（SQLAlchemy 模型与会话管理）
- 仓储实现（剧集、抓取历史）
- 索引器适配器（Newznab/Torznab）
- 下载客户端适配器（qBittorrent）
"""
