#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
五行生克关系模块

提供五行生克关系的枚举定义和计算函数。
"""

from enum import Enum
from typing import Union

from bazi_engine.data.stems_branches import Element, ELEMENT_CYCLE


class Relation(Enum):
    """五行关系类型（以 A 为主体）"""
    SAME = "Same"
    GENERATES = "Generates"          # 我生
    GENERATED_BY = "GeneratedBy"     # 生我
    CONTROLS = "Controls"            # 我克
    CONTROLLED_BY = "ControlledBy"   # 克我
    UNKNOWN = "Unknown"


ElementLike = Union[Element, str]


def _cycle_index(element: ElementLike) -> int:
    parsed = Element.parse(element)
    if parsed not in ELEMENT_CYCLE:
        return -1
    return ELEMENT_CYCLE.index(parsed)


def get_element_relation(element_a: ElementLike, element_b: ElementLike) -> Relation:
    """
    判断五行生克关系

    Args:
        element_a: 主体五行（Element 或 "Wood"/"Fire"/... 字符串）
        element_b: 目标五行

    Returns:
        Relation: 关系类型；任一五行无法识别时为 UNKNOWN
    """
    i = _cycle_index(element_a)
    j = _cycle_index(element_b)
    if i == -1 or j == -1:
        return Relation.UNKNOWN

    if i == j:
        return Relation.SAME
    if (i + 1) % 5 == j:
        return Relation.GENERATES
    if (j + 1) % 5 == i:
        return Relation.GENERATED_BY
    if (i + 2) % 5 == j:
        return Relation.CONTROLS
    if (j + 2) % 5 == i:
        return Relation.CONTROLLED_BY

    return Relation.UNKNOWN


def get_generated_element(element: ElementLike) -> Element:
    """获取被生的元素"""
    i = _cycle_index(element)
    return ELEMENT_CYCLE[(i + 1) % 5] if i != -1 else Element.UNKNOWN


def get_controlled_element(element: ElementLike) -> Element:
    """获取被克的元素"""
    i = _cycle_index(element)
    return ELEMENT_CYCLE[(i + 2) % 5] if i != -1 else Element.UNKNOWN
