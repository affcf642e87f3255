#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""评分器共用：把缓存里的字典命盘还原为 FourPillarsChart"""

from typing import Any, Mapping, Optional

from bazi_engine.calculators.chart_assembler import FourPillarsChart


def as_chart(chart: Any) -> Optional[FourPillarsChart]:
    """FourPillarsChart 原样返回；带 pillars 的字典还原；其他返回 None"""
    if isinstance(chart, FourPillarsChart):
        return chart
    if isinstance(chart, Mapping) and isinstance(chart.get('pillars'), Mapping):
        pillars = chart['pillars']
        if all(isinstance(pillars.get(p), Mapping) for p in ('year', 'month', 'day', 'hour')):
            return FourPillarsChart.from_dict(chart)
    return None
