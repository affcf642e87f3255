#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""命盘评分分析器"""

from .compatibility_analyzer import calculate_compatibility
from .daily_fortune_analyzer import calculate_daily_pillar, calculate_daily_score

__all__ = [
    'calculate_compatibility',
    'calculate_daily_pillar',
    'calculate_daily_score',
]
