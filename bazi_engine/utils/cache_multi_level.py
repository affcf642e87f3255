#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字计算多级缓存
架构：L1(本地内存, LRU + TTL) -> L2(Redis 镜像, 可选, 尽力而为)

- 写入：L1 同步写入，L2 异步 fire-and-forget
- 删除/清空：协程，两层都完成后才返回
- L1 保存与返回的都是副本，调用方修改返回值不会影响缓存
- 读取：L1 命中直接返回；未命中再查 L2，结构校验失败的 L2 数据会被删除并按未命中处理
- L2 的任何失败都只会降级为未命中，不会抛给调用方
"""

import asyncio
import copy
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Set, Union

from bazi_engine.calculators.chart_assembler import build_five_elements_percent
from bazi_engine.config.app_config import CacheConfig
from bazi_engine.utils.bazi_input_processor import (
    BirthInputLike,
    coerce_int,
    get_field,
    normalize_gender,
)
from bazi_engine.utils.cache_mirror import MirrorResult, MirrorStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def _wall_clock_ms() -> float:
    return time.time() * 1000


def build_bazi_cache_key(data: Optional[BirthInputLike]) -> Optional[str]:
    """
    生成缓存键：年-月-日-时-性别

    数值字段先规整为整数，性别去空白并小写；任一字段缺失或非法时返回 None（不缓存）。
    """
    if data is None:
        return None
    birth_year = coerce_int(get_field(data, 'birth_year'))
    birth_month = coerce_int(get_field(data, 'birth_month'))
    birth_day = coerce_int(get_field(data, 'birth_day'))
    birth_hour = coerce_int(get_field(data, 'birth_hour'))
    gender = normalize_gender(get_field(data, 'gender'))
    if None in (birth_year, birth_month, birth_day, birth_hour) or not gender:
        return None
    return f"{birth_year}-{birth_month}-{birth_day}-{birth_hour}-{gender}"


def normalize_bazi_result(result: Any) -> Any:
    """旧数据没有 five_elements_percent 时补算"""
    if not isinstance(result, Mapping):
        return result
    if result.get('five_elements_percent') or not result.get('five_elements'):
        return result
    percent = build_five_elements_percent(result['five_elements'])
    return {**result, 'five_elements_percent': {e.value: n for e, n in percent.items()}}


def is_valid_cache_value(value: Any) -> bool:
    """结构校验：必须有非空的 pillars 与 five_elements"""
    if not isinstance(value, Mapping):
        return False
    pillars = value.get('pillars')
    five_elements = value.get('five_elements')
    return isinstance(pillars, Mapping) and bool(pillars) \
        and isinstance(five_elements, Mapping) and bool(five_elements)


@dataclass
class CacheEntry:
    value: Any
    expires_at: Optional[float]


class L1MemoryCache:
    """L1缓存：本地内存，插入有序结构充当 LRU"""

    def __init__(self, max_entries: int = 500, ttl_ms: int = 0, clock: Optional[Clock] = None):
        """
        初始化 L1 缓存

        Args:
            max_entries: 最大条目数，<= 0 不限
            ttl_ms: 默认过期时间（毫秒），<= 0 不过期
            clock: 当前时间（毫秒），测试可注入
        """
        self._cache: 'OrderedDict[str, CacheEntry]' = OrderedDict()
        self._lock = threading.Lock()
        self.max_entries = max_entries
        self.ttl_ms = ttl_ms
        self._clock = clock or _wall_clock_ms
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> Optional[Any]:
        """读取；过期条目删除并视为未命中，命中条目移到最近使用位置"""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.expires_at is not None and entry.expires_at <= self._clock():
                del self._cache[key]
                self._misses += 1
                return None
            self._cache.move_to_end(key)
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl_ms: Optional[int] = None):
        """写入；超过容量时从最久未使用的一端淘汰"""
        ttl = self.ttl_ms if ttl_ms is None else ttl_ms
        expires_at = self._clock() + ttl if ttl and ttl > 0 else None
        with self._lock:
            self._cache.pop(key, None)
            self._cache[key] = CacheEntry(value=value, expires_at=expires_at)
            if self.max_entries > 0:
                while len(self._cache) > self.max_entries:
                    oldest, _ = self._cache.popitem(last=False)
                    self._evictions += 1
                    logger.debug(f"L1 淘汰: {oldest}")

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self):
        with self._lock:
            self._cache.clear()

    def keys(self):
        """从最久未使用到最近使用"""
        with self._lock:
            return list(self._cache.keys())

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    def stats(self) -> dict:
        """获取缓存统计信息"""
        total = self._hits + self._misses
        return {
            "size": len(self._cache),
            "max_entries": self.max_entries,
            "ttl_ms": self.ttl_ms,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_rate_percent": round(self._hits / total * 100, 2) if total else 0.0,
        }


class BaziCalculationCache:
    """八字计算缓存（L1 本地 + 可选 L2 镜像）"""

    def __init__(self, config: Optional[CacheConfig] = None, mirror=None, clock: Optional[Clock] = None):
        """
        Args:
            config: 缓存配置，默认读取环境变量
            mirror: 镜像层（如 RedisCacheMirror），需提供异步 get/set/delete/clear
            clock: 当前时间（毫秒），测试可注入
        """
        self.config = config or CacheConfig.from_env()
        self.l1 = L1MemoryCache(
            max_entries=self.config.max_entries,
            ttl_ms=self.config.ttl_ms,
            clock=clock,
        )
        self.mirror = mirror
        self._pending: Set[asyncio.Task] = set()

    @property
    def has_mirror(self) -> bool:
        return self.mirror is not None

    # ---------- 镜像层调用（永不抛出） ----------

    async def _mirror_call(self, method: str, *args) -> MirrorResult:
        try:
            result = await getattr(self.mirror, method)(*args)
        except Exception as e:
            logger.warning(f"镜像缓存 {method} 失败（不影响业务）: {e}")
            return MirrorResult.failed(e)
        if isinstance(result, MirrorResult):
            return result
        # 兼容直接返回值的镜像实现
        return MirrorResult.miss() if result is None else MirrorResult.hit(result)

    def _schedule(self, method: str, *args):
        """在当前事件循环里 fire-and-forget；无运行中的事件循环时跳过"""
        if self.mirror is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"无运行中的事件循环，跳过镜像 {method}")
            return
        task = loop.create_task(self._mirror_call(method, *args))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self):
        """等待所有未完成的镜像写入"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ---------- 读写接口 ----------

    def get_local(self, key: Optional[str]) -> Optional[Any]:
        """只读 L1"""
        if not key:
            return None
        value = self.l1.get(key)
        if value is None:
            return None
        return copy.deepcopy(normalize_bazi_result(value))

    async def get(self, key: Optional[str]) -> Optional[Any]:
        """
        多级缓存读取：L1 -> L2

        Args:
            key: 缓存键；None 直接未命中

        Returns:
            缓存值，不存在时返回 None
        """
        if not key:
            return None

        value = self.get_local(key)
        if value is not None:
            logger.debug(f"L1 命中: {key}")
            return value

        if self.mirror is None:
            return None

        result = await self._mirror_call('get', key)
        if result.status is MirrorStatus.INVALID:
            await self._mirror_call('delete', key)
            return None
        if not result.is_hit:
            logger.debug(f"缓存未命中: {key}")
            return None

        normalized = normalize_bazi_result(result.value)
        if not is_valid_cache_value(normalized):
            logger.warning(f"L2 数据结构无效，已删除: {key}")
            await self._mirror_call('delete', key)
            return None

        self.l1.set(key, copy.deepcopy(normalized))
        logger.debug(f"L2 命中并回填 L1: {key}")
        return normalized

    def set(self, key: Optional[str], value: Any, ttl_ms: Optional[int] = None):
        """
        多级缓存写入：L1 同步，L2 异步

        Args:
            key: 缓存键；None 时不写入
            value: 计算结果（字典形状）
            ttl_ms: 过期时间（毫秒），默认使用配置
        """
        if not key:
            return
        normalized = copy.deepcopy(normalize_bazi_result(value))
        self.l1.set(key, normalized, ttl_ms=ttl_ms)
        ttl = self.config.ttl_ms if ttl_ms is None else ttl_ms
        self._schedule('set', key, normalized, ttl)

    def prime(self, data: BirthInputLike, result: Any):
        """用已有结果预热缓存（如导入记录时）"""
        key = build_bazi_cache_key(data)
        if not key or not result:
            return
        self.set(key, result)

    async def invalidate(self, data: Union[str, BirthInputLike, None]) -> bool:
        """
        删除缓存（所有层级）

        先等待未完成的镜像写入，避免旧的写入在删除之后落地。

        Args:
            data: 缓存键或出生参数

        Returns:
            镜像层删除是否成功（无镜像时为 True）
        """
        key = data if isinstance(data, str) else build_bazi_cache_key(data)
        if not key:
            return True
        self.l1.delete(key)
        if self.mirror is None:
            return True
        await self.drain()
        result = await self._mirror_call('delete', key)
        return result.status is not MirrorStatus.ERROR

    async def clear(self) -> bool:
        """清空所有缓存；返回镜像层清空是否成功"""
        self.l1.clear()
        if self.mirror is None:
            return True
        await self.drain()
        result = await self._mirror_call('clear')
        return result.status is not MirrorStatus.ERROR

    def stats(self) -> dict:
        """获取缓存统计信息"""
        return {
            "l1": self.l1.stats(),
            "l2": {"status": "available" if self.mirror is not None else "unavailable",
                   "pending_writes": len(self._pending)},
        }
