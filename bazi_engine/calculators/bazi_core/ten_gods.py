#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
十神计算模块

以日主（日干）为参照，按五行生克与阴阳异同推出十神。
"""

from enum import Enum
from typing import Optional, Tuple

from bazi_engine.data.stems_branches import STEMS_MAP, BRANCH_MAIN_STEM

from .element_relations import Relation, get_element_relation


class TenGod(Enum):
    """十神"""
    FRIEND = "Friend (Bi Jian)"
    ROB_WEALTH = "Rob Wealth (Jie Cai)"
    EATING_GOD = "Eating God (Shi Shen)"
    HURTING_OFFICER = "Hurting Officer (Shang Guan)"
    INDIRECT_WEALTH = "Indirect Wealth (Pian Cai)"
    DIRECT_WEALTH = "Direct Wealth (Zheng Cai)"
    SEVEN_KILLINGS = "Seven Killings (Qi Sha)"
    DIRECT_OFFICER = "Direct Officer (Zheng Guan)"
    INDIRECT_RESOURCE = "Indirect Resource (Pian Yin)"
    DIRECT_RESOURCE = "Direct Resource (Zheng Yin)"
    UNKNOWN = "Unknown"


# 输出顺序固定
TEN_GOD_ORDER: Tuple[TenGod, ...] = (
    TenGod.FRIEND,
    TenGod.ROB_WEALTH,
    TenGod.EATING_GOD,
    TenGod.HURTING_OFFICER,
    TenGod.INDIRECT_WEALTH,
    TenGod.DIRECT_WEALTH,
    TenGod.SEVEN_KILLINGS,
    TenGod.DIRECT_OFFICER,
    TenGod.INDIRECT_RESOURCE,
    TenGod.DIRECT_RESOURCE,
)

# 关系 -> (同阴阳, 异阴阳)
_RELATION_TEN_GODS = {
    Relation.SAME: (TenGod.FRIEND, TenGod.ROB_WEALTH),
    Relation.GENERATES: (TenGod.EATING_GOD, TenGod.HURTING_OFFICER),
    Relation.GENERATED_BY: (TenGod.INDIRECT_RESOURCE, TenGod.DIRECT_RESOURCE),
    Relation.CONTROLS: (TenGod.INDIRECT_WEALTH, TenGod.DIRECT_WEALTH),
    Relation.CONTROLLED_BY: (TenGod.SEVEN_KILLINGS, TenGod.DIRECT_OFFICER),
}


def calculate_ten_god(day_master_stem: str, target_stem: str) -> TenGod:
    """
    计算目标天干相对日主的十神

    Args:
        day_master_stem: 日干字符（如 '甲'）
        target_stem: 目标天干字符；地支需先经 stem_equivalent 转为本气

    Returns:
        TenGod: 十神；任一字符不是天干时为 UNKNOWN
    """
    day_master = STEMS_MAP.get(day_master_stem)
    target = STEMS_MAP.get(target_stem)
    if day_master is None or target is None:
        return TenGod.UNKNOWN

    relation = get_element_relation(day_master.element, target.element)
    pair = _RELATION_TEN_GODS.get(relation)
    if pair is None:
        return TenGod.UNKNOWN

    same_polarity = day_master.polarity == target.polarity
    return pair[0] if same_polarity else pair[1]


def branch_main_stem(branch: str) -> Optional[str]:
    """地支本气天干"""
    return BRANCH_MAIN_STEM.get(branch)


def stem_equivalent(char: str) -> Optional[str]:
    """天干原样返回，地支取本气，其余为 None"""
    if char in STEMS_MAP:
        return char
    return branch_main_stem(char)
