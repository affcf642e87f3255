#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置、日志与 Redis 客户端创建测试
"""

import logging
import os
import pytest
from unittest.mock import patch

from bazi_engine.config.app_config import (
    DEFAULT_CACHE_KEY_PREFIX,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_MS,
    AppConfig,
    CacheConfig,
    RedisConfig,
    reload_config,
)
from bazi_engine.config.redis_config import create_redis_client
from bazi_engine.utils.bazi_logging import PACKAGE_LOGGER, SafeStreamHandler, setup_logging


class TestCacheConfig:

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = CacheConfig.from_env()
        assert config.ttl_ms == DEFAULT_CACHE_TTL_MS == 21600000
        assert config.max_entries == DEFAULT_CACHE_MAX_ENTRIES == 500
        assert config.key_prefix == DEFAULT_CACHE_KEY_PREFIX == "bazi_calc:"
        assert config.expiry_enabled
        assert config.eviction_enabled

    def test_from_env(self):
        env = {
            "BAZI_CACHE_TTL_MS": "1000",
            "BAZI_CACHE_MAX_ENTRIES": "3",
            "BAZI_CACHE_KEY_PREFIX": "test:",
        }
        with patch.dict(os.environ, env, clear=True):
            config = CacheConfig.from_env()
        assert (config.ttl_ms, config.max_entries, config.key_prefix) == (1000, 3, "test:")

    def test_zero_disables_expiry_and_eviction(self):
        with patch.dict(os.environ, {"BAZI_CACHE_TTL_MS": "0", "BAZI_CACHE_MAX_ENTRIES": "-1"}, clear=True):
            config = CacheConfig.from_env()
        assert not config.expiry_enabled
        assert not config.eviction_enabled

    @pytest.mark.parametrize("raw", ["abc", "", "  ", "inf", "-inf", "nan", "1e999"])
    def test_invalid_number_falls_back(self, raw):
        with patch.dict(os.environ, {"BAZI_CACHE_TTL_MS": raw}, clear=True):
            assert CacheConfig.from_env().ttl_ms == DEFAULT_CACHE_TTL_MS

    @pytest.mark.parametrize("raw", ["inf", "nan"])
    def test_non_finite_redis_port_falls_back(self, raw):
        with patch.dict(os.environ, {"REDIS_PORT": raw}, clear=True):
            assert RedisConfig.from_env().port == 6379


class TestRedisConfig:

    def test_disabled_by_default(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RedisConfig.from_env()
        assert config.enabled is False
        assert (config.host, config.port, config.db) == ("localhost", 6379, 0)
        assert config.password is None

    def test_from_env(self):
        env = {
            "REDIS_ENABLED": "true",
            "REDIS_HOST": "redis.internal",
            "REDIS_PORT": "6380",
            "REDIS_DB": "2",
            "REDIS_PASSWORD": "secret",
            "REDIS_SOCKET_TIMEOUT": "1.5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = RedisConfig.from_env()
        assert config.enabled is True
        assert config.host == "redis.internal"
        assert config.port == 6380
        assert config.db == 2
        assert config.password == "secret"
        assert config.socket_timeout == 1.5

    def test_create_client_disabled(self):
        assert create_redis_client(RedisConfig(enabled=False)) is None

    def test_create_client_enabled(self):
        import redis.asyncio as aioredis
        client = create_redis_client(RedisConfig(enabled=True, host="127.0.0.1", port=6390))
        assert isinstance(client, aioredis.Redis)


class TestAppConfig:

    def test_from_env(self):
        env = {"BAZI_LOG_LEVEL": "DEBUG", "BAZI_CACHE_MAX_ENTRIES": "7"}
        with patch.dict(os.environ, env, clear=True), \
                patch("bazi_engine.config.app_config.load_dotenv") as mock_load:
            config = AppConfig.from_env()
        mock_load.assert_called_once_with(override=False)
        assert config.log_level == "DEBUG"
        assert config.cache.max_entries == 7
        assert config.redis.enabled is False

    def test_reload_config(self):
        with patch.dict(os.environ, {"BAZI_LOG_LEVEL": "WARNING"}, clear=True), \
                patch("bazi_engine.config.app_config.load_dotenv"):
            config = reload_config()
        assert config.log_level == "WARNING"


class TestLogging:

    def test_setup_logging_sets_level(self):
        logger = setup_logging("debug")
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        setup_logging("WARNING")
        assert logger.level == logging.WARNING

    def test_handler_is_attached_once(self):
        setup_logging("INFO")
        setup_logging("INFO")
        logger = logging.getLogger(PACKAGE_LOGGER)
        assert sum(isinstance(h, SafeStreamHandler) for h in logger.handlers) == 1

    def test_unknown_level_defaults_to_info(self):
        assert setup_logging("verbose").level == logging.INFO

    def test_level_from_env(self):
        with patch.dict(os.environ, {"BAZI_LOG_LEVEL": "error"}):
            assert setup_logging().level == logging.ERROR
