"""
Unit tests for the configuration module.
"""

import json

import pytest
from pydantic import ValidationError

from epidown.core.config import AppConfig, QualityProfileConfig
from epidown.core.domain.value_objects import Quality
from epidown.core.exceptions import ConfigError


class TestQualityProfileConfig:
    """Test suite for QualityProfileConfig."""

    def test_quality_names_are_converted(self):
        profile = QualityProfileConfig(
            name='HD',
            allowed=['hdtv', 'WEB-DL', 'bluray_720p'],
            cutoff='webdl'
        )

        assert profile.allowed == [Quality.HDTV, Quality.WEBDL, Quality.BLURAY720P]
        assert profile.cutoff == Quality.WEBDL
        assert profile.is_allowed(Quality.HDTV) is True
        assert profile.is_allowed(Quality.SDTV) is False

    def test_cutoff_must_be_allowed(self):
        with pytest.raises(ValidationError):
            QualityProfileConfig(name='SD', allowed=['sdtv'], cutoff='hdtv')

    def test_unknown_quality_name(self):
        with pytest.raises(ValidationError):
            QualityProfileConfig(allowed=['vhs'])

    def test_default_profile_allows_everything_known(self):
        profile = QualityProfileConfig()

        assert Quality.UNKNOWN not in profile.allowed
        assert Quality.BLURAY1080P in profile.allowed

    def test_serialized_as_names(self):
        profile = QualityProfileConfig(name='HD', allowed=['hdtv', 'webdl'], cutoff='webdl')

        data = profile.model_dump()

        assert data['allowed'] == ['hdtv', 'webdl']
        assert data['cutoff'] == 'webdl'


class TestAppConfig:
    """Test suite for AppConfig."""

    def test_enabled_indexers_keep_order(self, app_config):
        assert [i.name for i in app_config.get_enabled_indexers()] == ['Alpha', 'Beta']

    def test_get_profile(self, app_config):
        assert app_config.get_profile('HD').name == 'HD'
        assert app_config.get_profile('missing').name == 'Any'
        assert app_config.get_profile(None).name == 'Any'

    def test_get_and_set_nested(self, app_config):
        assert app_config.get('qbittorrent.tv_folder_name') == 'TV'
        assert app_config.get('qbittorrent.nope', 'fallback') == 'fallback'

        assert app_config.set('search.max_workers', 4) is True
        assert app_config.search.max_workers == 4
        assert app_config.set('search.nope', 1) is False

    def test_load_creates_default_file(self, tmp_path):
        path = tmp_path / 'conf' / 'config.json'

        loaded = AppConfig.load(str(path))

        assert path.exists()
        assert loaded.indexers == []
        assert loaded.search.max_workers == 1

    def test_save_and_load_round_trip(self, app_config, tmp_path):
        path = tmp_path / 'config.json'
        app_config.save(str(path))

        data = json.loads(path.read_text(encoding='utf-8'))
        assert data['quality_profiles'][1]['cutoff'] == 'bluray720p'

        loaded = AppConfig.load(str(path))
        assert loaded.get_profile('HD').cutoff == Quality.BLURAY720P
        assert [i.name for i in loaded.indexers] == ['Alpha', 'Beta', 'Disabled']

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('{not json', encoding='utf-8')

        with pytest.raises(ConfigError) as exc_info:
            AppConfig.load(str(path))

        assert exc_info.value.code == 'CONFIG_ERROR'

    def test_load_invalid_values(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'search': {'max_workers': 0}}), encoding='utf-8')

        with pytest.raises(ConfigError):
            AppConfig.load(str(path))
