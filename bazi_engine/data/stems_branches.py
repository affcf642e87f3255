#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
天干地支基础数据

提供：
- 五行（Element）与阴阳（Polarity）枚举
- 10 天干 / 12 地支静态表
- 原始字符解析（未识别字符返回带 UNKNOWN 五行的条目，而不是 None）
- 地支本气、六冲等固定查表
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Element(Enum):
    """五行"""
    WOOD = "Wood"
    FIRE = "Fire"
    EARTH = "Earth"
    METAL = "Metal"
    WATER = "Water"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value) -> 'Element':
        """将字符串或枚举统一为 Element，无法识别时返回 UNKNOWN"""
        if isinstance(value, Element):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return cls.UNKNOWN


class Polarity(Enum):
    """阴阳"""
    YANG = "+"
    YIN = "-"


# 五行相生顺序：木 → 火 → 土 → 金 → 水
ELEMENT_CYCLE: Tuple[Element, ...] = (
    Element.WOOD,
    Element.FIRE,
    Element.EARTH,
    Element.METAL,
    Element.WATER,
)


@dataclass(frozen=True)
class StemEntry:
    """天干条目"""
    char: str
    name: str
    element: Element
    polarity: Optional[Polarity]

    @property
    def recognized(self) -> bool:
        return self.element is not Element.UNKNOWN

    @classmethod
    def unrecognized(cls, char: str) -> 'StemEntry':
        return cls(char=char, name=char, element=Element.UNKNOWN, polarity=None)


@dataclass(frozen=True)
class BranchEntry:
    """地支条目"""
    char: str
    name: str
    element: Element
    polarity: Optional[Polarity]

    @property
    def recognized(self) -> bool:
        return self.element is not Element.UNKNOWN

    @classmethod
    def unrecognized(cls, char: str) -> 'BranchEntry':
        return cls(char=char, name=char, element=Element.UNKNOWN, polarity=None)


HEAVENLY_STEMS: Tuple[StemEntry, ...] = (
    StemEntry('甲', 'Jia', Element.WOOD, Polarity.YANG),
    StemEntry('乙', 'Yi', Element.WOOD, Polarity.YIN),
    StemEntry('丙', 'Bing', Element.FIRE, Polarity.YANG),
    StemEntry('丁', 'Ding', Element.FIRE, Polarity.YIN),
    StemEntry('戊', 'Wu', Element.EARTH, Polarity.YANG),
    StemEntry('己', 'Ji', Element.EARTH, Polarity.YIN),
    StemEntry('庚', 'Geng', Element.METAL, Polarity.YANG),
    StemEntry('辛', 'Xin', Element.METAL, Polarity.YIN),
    StemEntry('壬', 'Ren', Element.WATER, Polarity.YANG),
    StemEntry('癸', 'Gui', Element.WATER, Polarity.YIN),
)

EARTHLY_BRANCHES: Tuple[BranchEntry, ...] = (
    BranchEntry('子', 'Zi', Element.WATER, Polarity.YANG),
    BranchEntry('丑', 'Chou', Element.EARTH, Polarity.YIN),
    BranchEntry('寅', 'Yin', Element.WOOD, Polarity.YANG),
    BranchEntry('卯', 'Mao', Element.WOOD, Polarity.YIN),
    BranchEntry('辰', 'Chen', Element.EARTH, Polarity.YANG),
    BranchEntry('巳', 'Si', Element.FIRE, Polarity.YIN),
    BranchEntry('午', 'Wu', Element.FIRE, Polarity.YANG),
    BranchEntry('未', 'Wei', Element.EARTH, Polarity.YIN),
    BranchEntry('申', 'Shen', Element.METAL, Polarity.YANG),
    BranchEntry('酉', 'You', Element.METAL, Polarity.YIN),
    BranchEntry('戌', 'Xu', Element.EARTH, Polarity.YANG),
    BranchEntry('亥', 'Hai', Element.WATER, Polarity.YIN),
)

# 按原始字符查表
STEMS_MAP: Dict[str, StemEntry] = {s.char: s for s in HEAVENLY_STEMS}
BRANCHES_MAP: Dict[str, BranchEntry] = {b.char: b for b in EARTHLY_BRANCHES}

# 地支本气（藏干主气）
BRANCH_MAIN_STEM: Dict[str, str] = {
    '子': '癸', '丑': '己', '寅': '甲', '卯': '乙', '辰': '戊', '巳': '丙',
    '午': '丁', '未': '己', '申': '庚', '酉': '辛', '戌': '戊', '亥': '壬',
}

# 地支六冲（按拼音名，双向）
BRANCH_CLASHES: Dict[str, str] = {
    'Zi': 'Wu', 'Wu': 'Zi',
    'Chou': 'Wei', 'Wei': 'Chou',
    'Yin': 'Shen', 'Shen': 'Yin',
    'Mao': 'You', 'You': 'Mao',
    'Chen': 'Xu', 'Xu': 'Chen',
    'Si': 'Hai', 'Hai': 'Si',
}


def parse_stem(char: str) -> StemEntry:
    """解析天干字符，未识别时返回 unrecognized 条目"""
    return STEMS_MAP.get(char) or StemEntry.unrecognized(char)


def parse_branch(char: str) -> BranchEntry:
    """解析地支字符，未识别时返回 unrecognized 条目"""
    return BRANCHES_MAP.get(char) or BranchEntry.unrecognized(char)


def romanize_stem(char: str) -> str:
    return parse_stem(char).name


def romanize_branch(char: str) -> str:
    return parse_branch(char).name
