"""
qBittorrent adapter module.

Contains the QBitAdapter class implementing IDownloadClient interface
for interacting with qBittorrent Web API.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urljoin

import requests

from epidown.core.config import QBitTorrentConfig, config
from epidown.core.interfaces.adapters import IDownloadClient

logger = logging.getLogger(__name__)


class QBitAdapter(IDownloadClient):
    """qBittorrent 客户端适配器"""

    def __init__(self, qbit_config: Optional[QBitTorrentConfig] = None):
        self._config = qbit_config or config.qbittorrent
        self.base_url = self._config.url.rstrip('/')
        self.username = self._config.username
        self.password = self._config.password
        self.session = requests.Session()
        self.cookies = None

    def _ensure_login(self) -> bool:
        """确保已登录"""
        if not self.cookies:
            return self.login()
        return True

    def login(self) -> bool:
        """登录qBittorrent"""
        if not self.username or not self.password:
            logger.warning('⚠️ 未配置 qBittorrent 用户名或密码')
            return False

        try:
            logger.debug(f'🔑 正在登录 qBittorrent: {self.base_url}')
            login_url = urljoin(self.base_url, '/api/v2/auth/login')
            data = {'username': self.username, 'password': self.password}

            response = self.session.post(login_url, data=data)

            if response.status_code == 200 and response.text == 'Ok.':
                self.cookies = self.session.cookies.get_dict()
                logger.info('✅ qBittorrent 登录成功')
                return True

            logger.error(f'❌ qBittorrent 登录失败: {response.status_code} - {response.text}')
            return False
        except requests.RequestException as e:
            logger.error(f'❌ qBittorrent 登录异常: {e}')
            return False

    def _get_headers(self) -> Dict[str, str]:
        """获取请求头"""
        return {
            'Referer': self.base_url,
            'Origin': self.base_url
        }

    def _retry_on_403(self, method, url, **kwargs):
        """在收到403时重新登录并重试一次"""
        headers = kwargs.pop('headers', {})
        headers.update(self._get_headers())
        kwargs['headers'] = headers

        response = method(url, **kwargs)

        if response.status_code == 403:
            logger.warning('⚠️ 收到 403，尝试重新登录后重试...')
            self.cookies = None
            if self.login():
                response = method(url, **kwargs)
            else:
                logger.error('❌ 重新登录失败')

        return response

    # ==================== IDownloadClient Interface ====================

    def is_connected(self) -> bool:
        """检查是否已连接到下载客户端"""
        try:
            if not self._ensure_login():
                return False

            version_url = urljoin(self.base_url, '/api/v2/app/version')
            response = self.session.get(version_url, headers=self._get_headers())
            return response.status_code == 200
        except requests.RequestException as e:
            logger.error(f'❌ qBittorrent 连接检查失败: {e}')
            return False

    def add_torrent(
        self,
        torrent_url: str,
        save_path: str,
        category: Optional[str] = None
    ) -> bool:
        """添加种子任务（URL 或磁力链接）"""
        if not self._ensure_login():
            return False

        try:
            logger.info('➕ 正在添加种子到 qBittorrent...')
            logger.debug(f'  种子URL: {torrent_url[:80]}...')
            if save_path:
                logger.debug(f'  保存路径: {save_path}')

            add_url = urljoin(self.base_url, '/api/v2/torrents/add')
            params = {'urls': torrent_url}

            if save_path:
                params['savepath'] = save_path

            category = category or self._config.category
            if category:
                params['category'] = category

            response = self._retry_on_403(self.session.post, add_url, data=params)

            if response.status_code == 200 and response.text.strip() != 'Fails.':
                logger.info('✅ 种子添加成功到 qBittorrent')
                return True

            logger.error(f'❌ 添加种子失败: {response.status_code} - {response.text}')
            return False

        except requests.RequestException as e:
            logger.error(f'❌ 添加种子异常: {e}')
            return False
