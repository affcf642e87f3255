#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Redis 配置模块

创建缓存镜像层使用的异步 Redis 客户端。
"""

import logging
from typing import Optional

import redis.asyncio as aioredis

from .app_config import RedisConfig

logger = logging.getLogger(__name__)


def create_redis_client(config: Optional[RedisConfig] = None) -> Optional[aioredis.Redis]:
    """
    创建异步 Redis 客户端

    连接是惰性的：此处不做 ping，首次命令失败时由镜像层降级为未命中。

    Args:
        config: Redis 配置，默认读取环境变量

    Returns:
        Redis 客户端；未启用时返回 None
    """
    config = config or RedisConfig.from_env()
    if not config.enabled:
        logger.info("Redis 镜像缓存未启用，仅使用本地缓存")
        return None

    client = aioredis.Redis(
        host=config.host,
        port=config.port,
        db=config.db,
        password=config.password,
        socket_timeout=config.socket_timeout,
        socket_connect_timeout=config.socket_timeout,
        decode_responses=False,
    )
    logger.info(f"Redis 镜像缓存: {config.host}:{config.port}/{config.db}")
    return client
