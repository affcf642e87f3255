#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字计算服务 - 缓存与命盘组装的衔接

调用方 -> 缓存查询 -> 未命中时万年历 + 命盘组装 -> 写回两级缓存 -> 返回
真太阳时校正可在排盘前替换出生时间；评分器直接使用命盘，不经过缓存。
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from bazi_engine.analyzers import calculate_compatibility, calculate_daily_pillar, calculate_daily_score
from bazi_engine.calculators.chart_assembler import assemble_chart
from bazi_engine.calculators.lunar_converter import LunarCalendarService
from bazi_engine.config.app_config import AppConfig, CacheConfig, get_config
from bazi_engine.config.redis_config import create_redis_client
from bazi_engine.utils.bazi_input_processor import BirthInputLike, get_field
from bazi_engine.utils.bazi_logging import setup_logging
from bazi_engine.utils.cache_mirror import RedisCacheMirror
from bazi_engine.utils.cache_multi_level import BaziCalculationCache, build_bazi_cache_key
from bazi_engine.utils.location_mapping import Location, resolve_location
from bazi_engine.utils.timezone_converter import (
    SolarTimeCorrection,
    build_birth_time_meta,
    build_true_solar_meta,
    correct_birth_time,
)

logger = logging.getLogger(__name__)

FULL_RESULT_FIELDS = ('pillars', 'five_elements', 'ten_gods', 'luck_cycles')
INPUT_FIELDS = ('birth_year', 'birth_month', 'birth_day', 'birth_hour', 'birth_minute', 'gender',
                'birth_location', 'timezone', 'timezone_offset_minutes')


def has_full_bazi_result(result: Any) -> bool:
    """缓存值是否包含完整的命盘字段"""
    if not isinstance(result, Mapping):
        return False
    return all(result.get(name) is not None for name in FULL_RESULT_FIELDS) \
        and bool(result['pillars']) and bool(result['five_elements'])


def resolve_bazi_calculation_input(birth_input: BirthInputLike,
                                   resolver: Callable[[Any], Optional[Location]] = resolve_location
                                   ) -> Dict[str, Any]:
    """
    排盘前的出生参数处理：时间元信息 + 真太阳时校正

    校正生效时，用校正后的年、月、日、时、分替换原参数，再参与排盘与缓存键。

    Returns:
        {'calculation_input': 字典形式的出生参数, 'time_meta': ..., 'true_solar_meta': ...}
    """
    calculation_input = {name: get_field(birth_input, name) for name in INPUT_FIELDS}
    time_meta = build_birth_time_meta(birth_input)
    true_solar_meta = build_true_solar_meta(birth_input, time_meta, resolver=resolver)
    if true_solar_meta and true_solar_meta['applied'] and true_solar_meta['corrected']:
        corrected = true_solar_meta['corrected']
        calculation_input.update(
            birth_year=corrected['year'],
            birth_month=corrected['month'],
            birth_day=corrected['day'],
            birth_hour=corrected['hour'],
            birth_minute=corrected['minute'],
        )
    return {
        'calculation_input': calculation_input,
        'time_meta': time_meta,
        'true_solar_meta': true_solar_meta,
    }


def create_calculation_cache(config: Optional[AppConfig] = None, redis_client=None) -> BaziCalculationCache:
    """
    按配置创建缓存实例

    Args:
        config: 应用配置，默认读取环境变量
        redis_client: 已有的 redis.asyncio 客户端；为空时按配置创建

    Returns:
        BaziCalculationCache
    """
    config = config or get_config()
    setup_logging(config.log_level)
    client = redis_client if redis_client is not None else create_redis_client(config.redis)
    mirror = RedisCacheMirror(client, key_prefix=config.cache.key_prefix) if client is not None else None
    return BaziCalculationCache(config=config.cache, mirror=mirror)


class BaziCalculationService:
    """八字计算服务"""

    def __init__(self,
                 cache: Optional[BaziCalculationCache] = None,
                 calendar: Optional[LunarCalendarService] = None):
        """
        Args:
            cache: 计算缓存，默认只有本地层
            calendar: 万年历服务
        """
        self.cache = cache or BaziCalculationCache(config=CacheConfig.from_env())
        self.calendar = calendar or LunarCalendarService()

    def calculate(self, birth_input: BirthInputLike) -> Dict[str, Any]:
        """
        直接计算（不读缓存）

        Raises:
            CalendarServiceError: 万年历无法给出结果
        """
        reading = self.calendar.read(birth_input)
        return assemble_chart(reading).to_dict()

    async def get_bazi_calculation_with_meta(self,
                                             birth_input: BirthInputLike,
                                             bypass_cache: bool = False) -> Tuple[Dict[str, Any], bool]:
        """
        获取命盘，并返回是否命中缓存

        Args:
            birth_input: 出生参数
            bypass_cache: 为 True 时跳过读取，但结果仍写回缓存

        Returns:
            (命盘字典, 是否命中缓存)

        Raises:
            CalendarServiceError: 万年历无法给出结果
        """
        key = build_bazi_cache_key(birth_input)
        if not bypass_cache and key:
            cached = await self.cache.get(key)
            if has_full_bazi_result(cached):
                return cached, True

        result = self.calculate(birth_input)
        if key:
            self.cache.set(key, result)
        else:
            logger.debug("出生参数不完整，结果不缓存")
        return result, False

    async def get_bazi_calculation(self, birth_input: BirthInputLike, bypass_cache: bool = False) -> Dict[str, Any]:
        """获取命盘（优先缓存）"""
        result, _ = await self.get_bazi_calculation_with_meta(birth_input, bypass_cache=bypass_cache)
        return result

    async def get_corrected_bazi_calculation(self,
                                             birth_input: BirthInputLike,
                                             bypass_cache: bool = False) -> Dict[str, Any]:
        """
        按真太阳时校正后的出生时间排盘

        Returns:
            {'result', 'cache_hit', 'time_meta', 'true_solar_meta'}
        """
        resolved = resolve_bazi_calculation_input(birth_input)
        result, cache_hit = await self.get_bazi_calculation_with_meta(
            resolved['calculation_input'], bypass_cache=bypass_cache)
        return {
            'result': result,
            'cache_hit': cache_hit,
            'time_meta': resolved['time_meta'],
            'true_solar_meta': resolved['true_solar_meta'],
        }

    def correct_birth_time(self, birth_input: BirthInputLike) -> Optional[SolarTimeCorrection]:
        """真太阳时校正；不适用时返回 None"""
        return correct_birth_time(birth_input)

    def compatibility(self, chart_a: Any, chart_b: Any) -> Dict[str, Any]:
        return calculate_compatibility(chart_a, chart_b)

    def daily_fortune(self, chart: Any, target_date: Optional[date] = None) -> Dict[str, Any]:
        """
        每日运势

        Raises:
            CalendarServiceError: 当日日柱无法计算
        """
        daily_pillar = calculate_daily_pillar(target_date, calendar=self.calendar)
        result = calculate_daily_score(chart, daily_pillar)
        result['date'] = (target_date or date.today()).isoformat()
        return result
