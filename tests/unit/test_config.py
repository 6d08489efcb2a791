"""
Unit tests for herocorpus.config modules.

Tests for configuration loading, validation, decoder import and game constants.
"""

import pytest
import os
from unittest.mock import patch
from herocorpus.config.corpus_config import CorpusConfig, DEFAULT_DECODER
from herocorpus.config.game_config import GameConfig, TARGET_CATEGORIES
from herocorpus.parsing.event_log import EventLogSource

ENV_KEYS = ['HEROCORPUS_OUTPUT_DIR', 'HEROCORPUS_METADATA_PATH', 'HEROCORPUS_DECODER', 'HEROCORPUS_LOG_LEVEL']


@pytest.fixture
def clean_env():
    """Environment without any HEROCORPUS_* variables and no .env loading."""
    env = {k: v for k, v in os.environ.items() if k not in ENV_KEYS}
    with patch.dict(os.environ, env, clear=True), \
            patch('herocorpus.config.corpus_config.load_dotenv'):
        yield


@pytest.mark.unit
class TestCorpusConfigFromDict:
    """Test creating config from dictionary."""

    def test_creates_config_with_all_fields(self):
        """Config should be created with all provided fields."""
        config = CorpusConfig.from_dict({
            'output_dir': './test_data',
            'metadata_path': './bots/ability_data.lua',
            'decoder': 'mydecoder:DemoSource',
            'log_level': 'DEBUG'
        })

        assert config.output_dir == './test_data'
        assert config.metadata_path == './bots/ability_data.lua'
        assert config.decoder == 'mydecoder:DemoSource'
        assert config.log_level == 'DEBUG'

    def test_uses_default_values(self):
        """Unspecified fields should use default values."""
        config = CorpusConfig.from_dict({})

        assert config.output_dir == './data'
        assert config.metadata_path == './ability_data.lua'
        assert config.decoder == DEFAULT_DECODER
        assert config.log_level == 'INFO'


@pytest.mark.unit
class TestCorpusConfigFromEnv:
    """Test loading config from environment variables."""

    def test_defaults_without_environment(self, clean_env):
        config = CorpusConfig.from_env()

        assert config == CorpusConfig()

    def test_reads_environment_variables(self, clean_env):
        with patch.dict(os.environ, {
            'HEROCORPUS_OUTPUT_DIR': '/tmp/corpus',
            'HEROCORPUS_METADATA_PATH': '/tmp/ability_data.lua',
            'HEROCORPUS_LOG_LEVEL': 'WARNING'
        }):
            config = CorpusConfig.from_env()

        assert config.output_dir == '/tmp/corpus'
        assert config.metadata_path == '/tmp/ability_data.lua'
        assert config.log_level == 'WARNING'
        assert config.decoder == DEFAULT_DECODER


@pytest.mark.unit
class TestCorpusConfigValidation:
    """Test validation and decoder loading."""

    def test_default_config_is_valid(self):
        CorpusConfig().validate()

    @pytest.mark.parametrize('decoder', ['no_colon', ':Missing', 'module:', ''])
    def test_malformed_decoder(self, decoder):
        with pytest.raises(ValueError, match='Invalid decoder'):
            CorpusConfig(decoder=decoder).validate()

    def test_unknown_log_level(self):
        with pytest.raises(ValueError, match='Unknown log level'):
            CorpusConfig(log_level='CHATTY').validate()

    def test_log_level_is_case_insensitive(self):
        CorpusConfig(log_level='debug').validate()

    def test_loads_default_decoder(self):
        assert CorpusConfig().load_decoder() is EventLogSource

    def test_missing_module(self):
        with pytest.raises(ValueError, match='Cannot load decoder'):
            CorpusConfig(decoder='herocorpus.no_such_module:Source').load_decoder()

    def test_missing_attribute(self):
        with pytest.raises(ValueError, match='Cannot load decoder'):
            CorpusConfig(decoder='herocorpus.parsing.event_log:NoSuchSource').load_decoder()


@pytest.mark.unit
class TestGameConfig:
    """Test game constants and helpers."""

    def test_target_codes(self):
        assert GameConfig.target_code('none') == 0
        assert GameConfig.target_code('enemy_hero') == 7
        assert GameConfig.target_code('friendly_hero') == 8
        assert sorted(TARGET_CATEGORIES.values()) == list(range(9))

    def test_unknown_target_category(self):
        with pytest.raises(ValueError, match='Unknown target category'):
            GameConfig.target_code('courier')

    def test_opposing_team(self):
        assert GameConfig.opposing_team(GameConfig.RADIANT) == GameConfig.DIRE
        assert GameConfig.opposing_team(GameConfig.DIRE) == GameConfig.RADIANT

    def test_team_slots(self):
        assert list(GameConfig.team_slots(GameConfig.RADIANT)) == [0, 1, 2, 3, 4]
        assert list(GameConfig.team_slots(GameConfig.DIRE)) == [5, 6, 7, 8, 9]
