#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一应用配置管理
所有配置统一从这里读取，避免配置分散
"""

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_MS = 6 * 60 * 60 * 1000
DEFAULT_CACHE_MAX_ENTRIES = 500
DEFAULT_CACHE_KEY_PREFIX = 'bazi_calc:'


def _read_number(name: str, default: float) -> float:
    """读取数值型环境变量，缺失、非法或非有限值（inf/nan）时回退默认值"""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        value = None
    if value is None or not math.isfinite(value):
        logger.warning(f"环境变量 {name}={raw!r} 不是有限数字，使用默认值 {default}")
        return default
    return value


def _read_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class CacheConfig:
    """
    八字计算缓存配置

    ttl_ms <= 0 表示不过期；max_entries <= 0 表示不限容量。
    """
    ttl_ms: int = DEFAULT_CACHE_TTL_MS
    max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    key_prefix: str = DEFAULT_CACHE_KEY_PREFIX

    @property
    def expiry_enabled(self) -> bool:
        return self.ttl_ms > 0

    @property
    def eviction_enabled(self) -> bool:
        return self.max_entries > 0

    @classmethod
    def from_env(cls) -> 'CacheConfig':
        """从环境变量创建配置"""
        return cls(
            ttl_ms=int(_read_number('BAZI_CACHE_TTL_MS', DEFAULT_CACHE_TTL_MS)),
            max_entries=int(_read_number('BAZI_CACHE_MAX_ENTRIES', DEFAULT_CACHE_MAX_ENTRIES)),
            key_prefix=os.getenv('BAZI_CACHE_KEY_PREFIX', DEFAULT_CACHE_KEY_PREFIX),
        )


@dataclass
class RedisConfig:
    """Redis 配置（缓存镜像层）"""
    enabled: bool = False
    host: str = 'localhost'
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    socket_timeout: float = 5.0

    @classmethod
    def from_env(cls) -> 'RedisConfig':
        """从环境变量创建配置"""
        return cls(
            enabled=_read_bool('REDIS_ENABLED', False),
            host=os.getenv('REDIS_HOST', 'localhost'),
            port=int(_read_number('REDIS_PORT', 6379)),
            db=int(_read_number('REDIS_DB', 0)),
            password=os.getenv('REDIS_PASSWORD') or None,
            socket_timeout=_read_number('REDIS_SOCKET_TIMEOUT', 5.0),
        )


@dataclass
class AppConfig:
    """应用配置"""
    log_level: str = 'INFO'
    cache: CacheConfig = field(default_factory=CacheConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """从环境变量（含 .env 文件）创建完整配置"""
        load_dotenv(override=False)
        return cls(
            log_level=os.getenv('BAZI_LOG_LEVEL', 'INFO'),
            cache=CacheConfig.from_env(),
            redis=RedisConfig.from_env(),
        )


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置实例"""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reload_config() -> AppConfig:
    """重新加载配置"""
    global _config
    _config = AppConfig.from_env()
    return _config
