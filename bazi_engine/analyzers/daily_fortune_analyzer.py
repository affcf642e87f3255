#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
每日运势评分

以当日日柱作用于日主：基础分 60，按五行关系加减，当日地支冲日支再扣 20。
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from bazi_engine.calculators.bazi_core import Relation, get_element_relation
from bazi_engine.calculators.chart_assembler import Pillar, build_pillar
from bazi_engine.calculators.lunar_converter import LunarCalendarService
from bazi_engine.data.stems_branches import BRANCH_CLASHES

from .chart_helpers import as_chart

logger = logging.getLogger(__name__)

BASE_SCORE = 60
CLASH_PENALTY = 20
FALLBACK_SCORE = 50

# 当日五行 -> 日主 的关系
_RELATION_ADJUSTMENTS = {
    Relation.GENERATES: (15, "Today supports you securely. Good for planning."),
    Relation.SAME: (10, "Social energy is high. Connect with friends."),
    Relation.CONTROLS: (-10, "Pressure might be high. Stay disciplined."),
    Relation.CONTROLLED_BY: (5, "Opportunity for gain, but requires effort."),
    Relation.GENERATED_BY: (5, "Good day for creative expression."),
}


def calculate_daily_pillar(target_date: Optional[date] = None,
                           calendar: Optional[LunarCalendarService] = None) -> Pillar:
    """
    当日日柱

    Raises:
        CalendarServiceError: 万年历计算失败
    """
    target_date = target_date or date.today()
    calendar = calendar or LunarCalendarService()
    return build_pillar(*calendar.read_day(target_date))


def calculate_daily_score(chart: Any, daily_pillar: Optional[Pillar]) -> Dict[str, Any]:
    """
    计算每日运势分数

    Args:
        chart: 用户命盘（FourPillarsChart 或字典）
        daily_pillar: 当日日柱

    Returns:
        dict: score (0-100)、advice (建议片段列表)、element (当日天干五行名)
    """
    user_chart = as_chart(chart)
    if user_chart is None or daily_pillar is None:
        return {'score': FALLBACK_SCORE, 'advice': ["Stay balanced."], 'element': None}

    score = BASE_SCORE
    advice = []

    day_element = daily_pillar.stem.element
    relation = get_element_relation(day_element, user_chart.day.stem.element)
    if relation in _RELATION_ADJUSTMENTS:
        delta, text = _RELATION_ADJUSTMENTS[relation]
        score += delta
        advice.append(text)

    if BRANCH_CLASHES.get(user_chart.day.branch.name) == daily_pillar.branch.name:
        score -= CLASH_PENALTY
        advice.append("Watch out for conflicts in personal life.")

    score = max(0, min(100, score))
    logger.debug(f"每日运势: {relation.value}, 分数 {score}")
    return {'score': score, 'advice': advice, 'element': day_element.value}
