#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""八字计算器"""

from .chart_assembler import (
    FourPillarsChart,
    LuckCycle,
    Pillar,
    assemble_chart,
    build_five_elements_percent,
    build_pillar,
)
from .lunar_converter import LuckEntry, LunarCalendarService, SexagenaryReading

__all__ = [
    'FourPillarsChart',
    'LuckCycle',
    'Pillar',
    'assemble_chart',
    'build_five_elements_percent',
    'build_pillar',
    'LuckEntry',
    'LunarCalendarService',
    'SexagenaryReading',
]
