#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest 全局配置

提供：
- 共享 fixtures（出生参数、假万年历、可控时钟、镜像层 Mock）
- 测试钩子
"""

import os
import sys
import pytest
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

# 添加项目根目录到路径（未安装时也可直接运行）
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)


# ==================== 数据 Fixtures ====================

@pytest.fixture(scope="function")
def sample_birth_input() -> Dict[str, Any]:
    """
    示例出生参数

    Returns:
        出生参数字典
    """
    return {
        "birth_year": 1990,
        "birth_month": 5,
        "birth_day": 15,
        "birth_hour": 14,
        "gender": "male",
    }


@pytest.fixture(scope="function")
def make_reading():
    """
    构造万年历输出的工厂

    用法：make_reading("甲子", "丙寅", "戊辰", "庚申")

    Returns:
        工厂函数，返回 SexagenaryReading（附带 10 条大运，第 0 条为起运前）
    """
    from bazi_engine.calculators.lunar_converter import LuckEntry, SexagenaryReading

    luck_gan_zhi = ["", "丁卯", "戊辰", "己巳", "庚午", "辛未", "壬申", "癸酉", "甲戌", "乙亥"]

    def _make(year: str, month: str, day: str, hour: str, luck_sequence=None) -> SexagenaryReading:
        if luck_sequence is None:
            luck_sequence = [
                LuckEntry(
                    start_age=0 if i == 0 else i * 10 - 2,
                    end_age=7 if i == 0 else i * 10 + 7,
                    gan_zhi=gz,
                    start_year=1990 + max(i * 10 - 2, 0),
                    end_year=1997 + i * 10,
                )
                for i, gz in enumerate(luck_gan_zhi)
            ]
        return SexagenaryReading(
            year=tuple(year),
            month=tuple(month),
            day=tuple(day),
            hour=tuple(hour),
            luck_sequence=luck_sequence,
        )

    return _make


@pytest.fixture(scope="function")
def make_chart(make_reading):
    """
    直接组装命盘的工厂

    Returns:
        工厂函数，返回 FourPillarsChart
    """
    from bazi_engine.calculators.chart_assembler import assemble_chart

    def _make(year: str, month: str, day: str, hour: str):
        return assemble_chart(make_reading(year, month, day, hour))

    return _make


# ==================== Mock Fixtures ====================

class FakeClock:
    """可手动推进的毫秒时钟"""

    def __init__(self, now: float = 0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture(scope="function")
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
def fake_calendar(make_reading):
    """
    假万年历服务（不依赖 lunar_python 的具体结果）

    Yields:
        MagicMock，read() 固定返回 庚午 辛巳 庚辰 癸未
    """
    from bazi_engine.calculators.lunar_converter import LunarCalendarService
    calendar = MagicMock(spec=LunarCalendarService)
    calendar.read.return_value = make_reading("庚午", "辛巳", "庚辰", "癸未")
    calendar.read_day.return_value = ("甲", "子")
    yield calendar


@pytest.fixture(scope="function")
def mock_mirror():
    """
    Mock 镜像层（异步接口）

    Yields:
        AsyncMock，默认 get 未命中、写入成功
    """
    from bazi_engine.utils.cache_mirror import MirrorResult
    mirror = AsyncMock()
    mirror.get.return_value = MirrorResult.miss()
    mirror.set.return_value = MirrorResult.ok()
    mirror.delete.return_value = MirrorResult.ok()
    mirror.clear.return_value = MirrorResult.ok()
    yield mirror


@pytest.fixture(scope="function")
def mock_redis_client():
    """
    Mock redis.asyncio 客户端

    Yields:
        AsyncMock Redis 客户端对象
    """
    mock_redis = AsyncMock()
    mock_redis.get.return_value = None
    mock_redis.set.return_value = True
    mock_redis.delete.return_value = 1
    yield mock_redis


@pytest.fixture(scope="function")
def l1_cache(fake_clock):
    from bazi_engine.utils.cache_multi_level import L1MemoryCache
    return L1MemoryCache(max_entries=100, ttl_ms=0, clock=fake_clock)


# ==================== Pytest Hooks ====================

def pytest_configure(config):
    """
    pytest 配置钩子

    在 pytest 初始化时调用
    """
    config.addinivalue_line("markers", "slow: 标记为慢速测试，可通过 -m 'not slow' 跳过")
    config.addinivalue_line("markers", "integration: 集成测试")
    config.addinivalue_line("markers", "unit: 单元测试")


def pytest_collection_modifyitems(config, items):
    """
    修改测试收集

    根据路径自动添加标记
    """
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        elif "unit" in item.nodeid:
            item.add_marker(pytest.mark.unit)
