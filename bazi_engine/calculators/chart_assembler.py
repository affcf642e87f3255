#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命盘组装模块

输入万年历给出的八个干支字符与大运序列，输出：
- 四柱（年/月/日/时）
- 五行计数与百分比
- 十神权重
- 大运（去掉起运前的第 0 条，保留 8 步）

未识别的单个字符不会导致失败，该柱以原字符为名、五行记为 Unknown。
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from bazi_engine.data.stems_branches import (
    ELEMENT_CYCLE,
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    BranchEntry,
    Element,
    StemEntry,
    parse_branch,
    parse_stem,
)
from bazi_engine.utils.exceptions import CalendarServiceError

from .bazi_core import TEN_GOD_ORDER, TenGod, calculate_ten_god, stem_equivalent
from .lunar_converter import PILLAR_POSITIONS, LuckEntry, SexagenaryReading

logger = logging.getLogger(__name__)

TEN_GOD_WEIGHT = 10
LUCK_CYCLE_COUNT = 8


@dataclass(frozen=True)
class Pillar:
    """一柱：天干 + 地支"""
    stem: StemEntry
    branch: BranchEntry

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stem': self.stem.name,
            'branch': self.branch.name,
            'element_stem': self.stem.element.value,
            'element_branch': self.branch.element.value,
            'char_stem': self.stem.char,
            'char_branch': self.branch.char,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Pillar':
        stem_char = data.get('char_stem')
        branch_char = data.get('char_branch')
        stem = parse_stem(stem_char) if stem_char else _stem_by_name(data.get('stem'))
        branch = parse_branch(branch_char) if branch_char else _branch_by_name(data.get('branch'))
        return cls(stem=stem, branch=branch)


@dataclass(frozen=True)
class LuckCycle:
    """大运一步"""
    age_range: str
    stem: str
    branch: str
    start_year: Optional[int] = None
    end_year: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'age_range': self.age_range,
            'stem': self.stem,
            'branch': self.branch,
            'start_year': self.start_year,
            'end_year': self.end_year,
        }


@dataclass
class FourPillarsChart:
    """四柱命盘"""
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar
    five_elements: Dict[Element, int] = field(default_factory=dict)
    five_elements_percent: Dict[Element, int] = field(default_factory=dict)
    ten_gods: List[Dict[str, Any]] = field(default_factory=list)
    luck_cycles: List[LuckCycle] = field(default_factory=list)

    @property
    def pillars(self) -> Dict[str, Pillar]:
        return {'year': self.year, 'month': self.month, 'day': self.day, 'hour': self.hour}

    @property
    def day_master(self) -> StemEntry:
        return self.day.stem

    def to_dict(self) -> Dict[str, Any]:
        """转为可 JSON 序列化的字典（缓存与上层使用的形状）"""
        return {
            'pillars': {name: pillar.to_dict() for name, pillar in self.pillars.items()},
            'five_elements': {e.value: n for e, n in self.five_elements.items()},
            'five_elements_percent': {e.value: n for e, n in self.five_elements_percent.items()},
            'ten_gods': [dict(item) for item in self.ten_gods],
            'luck_cycles': [cycle.to_dict() for cycle in self.luck_cycles],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'FourPillarsChart':
        pillars = data['pillars']
        five_elements = {Element.parse(k): int(v) for k, v in (data.get('five_elements') or {}).items()}
        percent_raw = data.get('five_elements_percent')
        percent = (
            {Element.parse(k): int(v) for k, v in percent_raw.items()}
            if percent_raw else build_five_elements_percent(five_elements)
        )
        return cls(
            year=Pillar.from_dict(pillars['year']),
            month=Pillar.from_dict(pillars['month']),
            day=Pillar.from_dict(pillars['day']),
            hour=Pillar.from_dict(pillars['hour']),
            five_elements=five_elements,
            five_elements_percent=percent,
            ten_gods=[dict(item) for item in data.get('ten_gods') or []],
            luck_cycles=[
                LuckCycle(
                    age_range=item.get('age_range', ''),
                    stem=item.get('stem', ''),
                    branch=item.get('branch', ''),
                    start_year=item.get('start_year'),
                    end_year=item.get('end_year'),
                )
                for item in data.get('luck_cycles') or []
            ],
        )


def _stem_by_name(name: Optional[str]) -> StemEntry:
    for stem in HEAVENLY_STEMS:
        if stem.name == name:
            return stem
    return StemEntry.unrecognized(name or '')


def _branch_by_name(name: Optional[str]) -> BranchEntry:
    for branch in EARTHLY_BRANCHES:
        if branch.name == name:
            return branch
    return BranchEntry.unrecognized(name or '')


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_pillar(stem_char: str, branch_char: str) -> Pillar:
    """按字符组装一柱，未识别字符降级为 Unknown"""
    pillar = Pillar(stem=parse_stem(stem_char), branch=parse_branch(branch_char))
    if not pillar.stem.recognized or not pillar.branch.recognized:
        logger.warning(f"未识别的干支字符: {stem_char!r}{branch_char!r}")
    return pillar


def count_five_elements(pillars: List[Pillar]) -> Dict[Element, int]:
    """五行计数：每柱天干、地支各计一次，Unknown 不计"""
    counts = {element: 0 for element in ELEMENT_CYCLE}
    for pillar in pillars:
        for element in (pillar.stem.element, pillar.branch.element):
            if element in counts:
                counts[element] += 1
    return counts


def build_five_elements_percent(counts: Mapping[Any, Any]) -> Dict[Element, int]:
    """
    五行百分比（四舍五入）

    Args:
        counts: 五行计数，键可以是 Element 或其字符串名

    Returns:
        每个五行的百分比；总数为 0 时全部为 0
    """
    safe: Dict[Element, float] = {element: 0 for element in ELEMENT_CYCLE}
    for key, raw in counts.items():
        element = Element.parse(key)
        if element not in safe:
            continue
        try:
            number = float(raw)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number):
            safe[element] += number

    total = sum(safe.values())
    return {
        element: _round_half_up(safe[element] / total * 100) if total else 0
        for element in ELEMENT_CYCLE
    }


def count_ten_gods(year: Pillar, month: Pillar, day: Pillar, hour: Pillar) -> List[Dict[str, Any]]:
    """
    十神权重

    日干是日主本身，不参与；日支参与。地支取本气天干后再与日主比较。
    """
    weights = {god: 0 for god in TEN_GOD_ORDER}
    day_master = day.stem.char
    positions = (
        year.stem.char, year.branch.char,
        month.stem.char, month.branch.char,
        day.branch.char,
        hour.stem.char, hour.branch.char,
    )
    for char in positions:
        stem_char = stem_equivalent(char)
        if stem_char is None:
            continue
        god = calculate_ten_god(day_master, stem_char)
        if god in weights:
            weights[god] += TEN_GOD_WEIGHT
    return [{'name': god.value, 'strength': weights[god]} for god in TEN_GOD_ORDER]


def format_luck_cycles(luck_sequence: List[LuckEntry]) -> List[LuckCycle]:
    """大运：丢弃第 0 条（起运前），取其后 8 步"""
    cycles = []
    for entry in luck_sequence[1:1 + LUCK_CYCLE_COUNT]:
        gan = entry.gan_zhi[0:1]
        zhi = entry.gan_zhi[1:2]
        cycles.append(LuckCycle(
            age_range=f"{entry.start_age}-{entry.end_age}",
            stem=parse_stem(gan).name,
            branch=parse_branch(zhi).name,
            start_year=entry.start_year,
            end_year=entry.end_year,
        ))
    return cycles


def assemble_chart(reading: Optional[SexagenaryReading]) -> FourPillarsChart:
    """
    组装命盘

    Args:
        reading: 万年历输出

    Returns:
        FourPillarsChart

    Raises:
        CalendarServiceError: 万年历没有给出完整的八个字符
    """
    if reading is None:
        raise CalendarServiceError("万年历未返回干支序列")
    for position in PILLAR_POSITIONS:
        chars = reading.pillar_chars(position)
        if not chars or len(chars) != 2 or not all(chars):
            raise CalendarServiceError(f"万年历返回的{position}柱不完整: {chars!r}")

    year, month, day, hour = (build_pillar(*reading.pillar_chars(p)) for p in PILLAR_POSITIONS)
    counts = count_five_elements([year, month, day, hour])

    return FourPillarsChart(
        year=year,
        month=month,
        day=day,
        hour=hour,
        five_elements=counts,
        five_elements_percent=build_five_elements_percent(counts),
        ten_gods=count_ten_gods(year, month, day, hour),
        luck_cycles=format_luck_cycles(list(reading.luck_sequence or [])),
    )
