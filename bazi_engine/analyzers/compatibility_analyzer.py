#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
合盘分析器 - 两人命盘的契合度评分

评分构成：
1. 日主（日干五行）关系
2. 日支（夫妻宫）五行关系
3. 五行互补：一方不足（<10%）而另一方充足（>30%），每项 +10，上限 30
"""

import logging
from typing import Any, Dict, List

from bazi_engine.calculators.bazi_core import Relation, get_element_relation
from bazi_engine.data.stems_branches import ELEMENT_CYCLE, Element
from bazi_engine.utils.exceptions import InvalidChartError

from .chart_helpers import as_chart

logger = logging.getLogger(__name__)

DEFICIENT_PERCENT = 10
ABUNDANT_PERCENT = 30
BALANCE_BONUS = 10
BALANCE_CAP = 30

DAY_MASTER_SCORES = {
    Relation.GENERATES: 40,
    Relation.GENERATED_BY: 40,
    Relation.SAME: 30,
    Relation.CONTROLS: 20,
    Relation.CONTROLLED_BY: 20,
}
DAY_MASTER_DEFAULT = 10

DAY_BRANCH_SCORES = {
    Relation.GENERATES: 30,
    Relation.GENERATED_BY: 30,
    Relation.SAME: 30,
}
DAY_BRANCH_DEFAULT = 10

_DAY_MASTER_INSIGHTS = {
    Relation.GENERATES: "Strong emotional connection: The Day Masters support each other (Generates).",
    Relation.GENERATED_BY: "Strong emotional connection: The Day Masters support each other (GeneratedBy).",
    Relation.SAME: "Great friendship potential: Detailed understanding due to similar nature.",
    Relation.CONTROLS: "Dynamic tension: Can be attractive but requires patience.",
    Relation.CONTROLLED_BY: "Dynamic tension: Can be attractive but requires patience.",
}

_DAY_BRANCH_INSIGHTS = {
    Relation.GENERATES: "Harmonious domestic life: Spouse palaces are compatible.",
    Relation.GENERATED_BY: "Harmonious domestic life: Spouse palaces are compatible.",
    Relation.SAME: "Similar values in relationships.",
}


def _element_balance(percent_a: Dict[Element, int],
                     percent_b: Dict[Element, int],
                     insights: List[str]) -> int:
    bonus = 0
    for element in ELEMENT_CYCLE:
        if percent_a.get(element, 0) < DEFICIENT_PERCENT and percent_b.get(element, 0) > ABUNDANT_PERCENT:
            bonus += BALANCE_BONUS
            insights.append(f"Person B brings the {element.value} element that Person A needs.")
    for element in ELEMENT_CYCLE:
        if percent_b.get(element, 0) < DEFICIENT_PERCENT and percent_a.get(element, 0) > ABUNDANT_PERCENT:
            bonus += BALANCE_BONUS
            insights.append(f"Person A brings the {element.value} element that Person B needs.")
    return min(bonus, BALANCE_CAP)


def calculate_compatibility(chart_a: Any, chart_b: Any) -> Dict[str, Any]:
    """
    计算两人合盘分数

    Args:
        chart_a: 甲方命盘（FourPillarsChart 或 to_dict() 形状的字典）
        chart_b: 乙方命盘

    Returns:
        dict: score (0-100)、insights (文字要点)、details (各项关系说明)

    Raises:
        InvalidChartError: 任一命盘缺少四柱
    """
    a = as_chart(chart_a)
    b = as_chart(chart_b)
    if a is None or b is None:
        raise InvalidChartError()

    insights: List[str] = []
    score = 0

    dm_a, dm_b = a.day.stem.element, b.day.stem.element
    dm_relation = get_element_relation(dm_a, dm_b)
    score += DAY_MASTER_SCORES.get(dm_relation, DAY_MASTER_DEFAULT)
    if dm_relation in _DAY_MASTER_INSIGHTS:
        insights.append(_DAY_MASTER_INSIGHTS[dm_relation])

    db_a, db_b = a.day.branch.element, b.day.branch.element
    db_relation = get_element_relation(db_a, db_b)
    score += DAY_BRANCH_SCORES.get(db_relation, DAY_BRANCH_DEFAULT)
    if db_relation in _DAY_BRANCH_INSIGHTS:
        insights.append(_DAY_BRANCH_INSIGHTS[db_relation])

    balance = _element_balance(a.five_elements_percent, b.five_elements_percent, insights)
    score += balance

    score = max(0, min(100, score))
    logger.debug(f"合盘: 日主 {dm_relation.value}, 日支 {db_relation.value}, 互补 +{balance}, 总分 {score}")

    return {
        'score': score,
        'insights': insights,
        'details': {
            'day_master_relation': f"{dm_a.value} and {dm_b.value} relation: {dm_relation.value}",
            'day_branch_relation': f"{db_a.value} and {db_b.value} relation: {db_relation.value}",
            'element_balance': f"Balance Score boost: {balance}",
        },
    }
