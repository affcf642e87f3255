#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
万年历适配层 - 基于 lunar_python 的公历转干支

只负责把公历出生时间换算为四柱八个字符和原始大运序列，
命盘的解读（五行、十神、大运格式化）由 chart_assembler 完成。
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from lunar_python import Solar

from bazi_engine.utils.bazi_input_processor import (
    BirthInputLike,
    coerce_int,
    get_field,
    is_male,
)
from bazi_engine.utils.exceptions import CalendarServiceError

logger = logging.getLogger(__name__)

PILLAR_POSITIONS = ('year', 'month', 'day', 'hour')


@dataclass(frozen=True)
class LuckEntry:
    """原始大运条目（第 0 条为起运前，不含干支）"""
    start_age: int
    end_age: int
    gan_zhi: str
    start_year: Optional[int] = None
    end_year: Optional[int] = None


@dataclass(frozen=True)
class SexagenaryReading:
    """万年历输出：四柱干支字符 + 大运序列"""
    year: Tuple[str, str]
    month: Tuple[str, str]
    day: Tuple[str, str]
    hour: Tuple[str, str]
    luck_sequence: List[LuckEntry] = field(default_factory=list)

    def pillar_chars(self, position: str) -> Tuple[str, str]:
        return getattr(self, position)

    @property
    def day_master(self) -> str:
        return self.day[0]


class LunarCalendarService:
    """万年历服务：公历出生时间 -> 干支"""

    def __init__(self, luck_count: int = 10):
        """
        Args:
            luck_count: 向库请求的大运条数（含第 0 条起运前），至少 9
        """
        self.luck_count = max(luck_count, 9)

    def read(self, birth_input: BirthInputLike) -> SexagenaryReading:
        """
        计算四柱与大运

        Args:
            birth_input: 出生参数

        Returns:
            SexagenaryReading

        Raises:
            CalendarServiceError: 日期缺失/非法，或 lunar_python 计算失败
        """
        year = coerce_int(get_field(birth_input, 'birth_year'))
        month = coerce_int(get_field(birth_input, 'birth_month'))
        day = coerce_int(get_field(birth_input, 'birth_day'))
        hour = coerce_int(get_field(birth_input, 'birth_hour')) or 0
        minute = coerce_int(get_field(birth_input, 'birth_minute')) or 0
        if year is None or month is None or day is None:
            raise CalendarServiceError(f"出生日期不完整: {year}-{month}-{day}")

        try:
            solar = Solar.fromYmdHms(year, month, day, hour, minute, 0)
            eight_char = solar.getLunar().getEightChar()
            yun = eight_char.getYun(1 if is_male(get_field(birth_input, 'gender')) else 0)
            luck_sequence = [
                LuckEntry(
                    start_age=dy.getStartAge(),
                    end_age=dy.getEndAge(),
                    gan_zhi=dy.getGanZhi(),
                    start_year=dy.getStartYear(),
                    end_year=dy.getEndYear(),
                )
                for dy in yun.getDaYun(self.luck_count)
            ]
            reading = SexagenaryReading(
                year=(eight_char.getYearGan(), eight_char.getYearZhi()),
                month=(eight_char.getMonthGan(), eight_char.getMonthZhi()),
                day=(eight_char.getDayGan(), eight_char.getDayZhi()),
                hour=(eight_char.getTimeGan(), eight_char.getTimeZhi()),
                luck_sequence=luck_sequence,
            )
        except Exception as e:
            logger.error(f"万年历计算失败 {year}-{month}-{day} {hour}:{minute}: {e}")
            raise CalendarServiceError(f"万年历计算失败: {e}", cause=e) from e

        logger.debug(f"干支: {reading.year} {reading.month} {reading.day} {reading.hour}")
        return reading

    def read_day(self, target_date: date) -> Tuple[str, str]:
        """
        获取某日的日柱干支

        Raises:
            CalendarServiceError: lunar_python 计算失败
        """
        try:
            eight_char = Solar.fromYmd(target_date.year, target_date.month, target_date.day) \
                .getLunar().getEightChar()
            return eight_char.getDayGan(), eight_char.getDayZhi()
        except Exception as e:
            logger.error(f"日柱计算失败 {target_date}: {e}")
            raise CalendarServiceError(f"日柱计算失败: {e}", cause=e) from e
