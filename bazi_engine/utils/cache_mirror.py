#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
缓存镜像层（L2：Redis 分布式缓存）

所有实例共享，生命周期独立于本地缓存。每个操作都返回 MirrorResult，
Redis 异常、超时、无法解码的数据都在这里收敛为结果值，不向上抛出。
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class MirrorStatus(Enum):
    HIT = "hit"
    MISS = "miss"
    OK = "ok"
    INVALID = "invalid"   # 数据存在但无法解码
    ERROR = "error"       # Redis 不可用 / 超时


@dataclass(frozen=True)
class MirrorResult:
    """镜像层操作结果"""
    status: MirrorStatus
    value: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def hit(cls, value: Any) -> 'MirrorResult':
        return cls(MirrorStatus.HIT, value=value)

    @classmethod
    def miss(cls) -> 'MirrorResult':
        return cls(MirrorStatus.MISS)

    @classmethod
    def ok(cls) -> 'MirrorResult':
        return cls(MirrorStatus.OK)

    @classmethod
    def invalid(cls, error: Optional[BaseException] = None) -> 'MirrorResult':
        return cls(MirrorStatus.INVALID, error=error)

    @classmethod
    def failed(cls, error: BaseException) -> 'MirrorResult':
        return cls(MirrorStatus.ERROR, error=error)

    @property
    def is_hit(self) -> bool:
        return self.status is MirrorStatus.HIT


class RedisCacheMirror:
    """基于 redis.asyncio 的缓存镜像"""

    def __init__(self, redis_client, key_prefix: str = 'bazi_calc:', scan_count: int = 100):
        """
        Args:
            redis_client: redis.asyncio.Redis 客户端
            key_prefix: 键前缀，clear() 只删除该前缀下的键
            scan_count: SCAN 每批数量
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.scan_count = scan_count

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> MirrorResult:
        try:
            data = await self.redis.get(self._key(key))
        except Exception as e:
            logger.warning(f"Redis 读取失败（降级为未命中）: {key}: {e}")
            return MirrorResult.failed(e)
        if data is None:
            return MirrorResult.miss()
        try:
            return MirrorResult.hit(json.loads(data))
        except (TypeError, ValueError) as e:
            logger.warning(f"Redis 数据无法解码: {key}: {e}")
            return MirrorResult.invalid(e)

    async def set(self, key: str, value: Any, ttl_ms: Optional[int] = None) -> MirrorResult:
        try:
            payload = json.dumps(value, ensure_ascii=False)
            px = int(ttl_ms) if ttl_ms and ttl_ms > 0 else None
            await self.redis.set(self._key(key), payload, px=px)
        except Exception as e:
            logger.warning(f"Redis 写入失败（不影响业务）: {key}: {e}")
            return MirrorResult.failed(e)
        return MirrorResult.ok()

    async def delete(self, key: str) -> MirrorResult:
        try:
            await self.redis.delete(self._key(key))
        except Exception as e:
            logger.warning(f"Redis 删除失败（不影响业务）: {key}: {e}")
            return MirrorResult.failed(e)
        return MirrorResult.ok()

    async def clear(self) -> MirrorResult:
        """使用 SCAN 迭代删除前缀下所有键（避免阻塞）"""
        try:
            batch = []
            async for redis_key in self.redis.scan_iter(match=f"{self.key_prefix}*", count=self.scan_count):
                batch.append(redis_key)
                if len(batch) >= self.scan_count:
                    await self.redis.delete(*batch)
                    batch = []
            if batch:
                await self.redis.delete(*batch)
        except Exception as e:
            logger.warning(f"Redis 清空失败（不影响业务）: {e}")
            return MirrorResult.failed(e)
        return MirrorResult.ok()
