#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""配置模块"""

from .app_config import (
    AppConfig,
    CacheConfig,
    RedisConfig,
    get_config,
    reload_config,
)

__all__ = [
    'AppConfig',
    'CacheConfig',
    'RedisConfig',
    'get_config',
    'reload_config',
]
