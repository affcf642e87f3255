#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
时区转换工具
提供时区偏移解析与真太阳时计算功能
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Callable, Dict, Optional

import pytz

from bazi_engine.utils.bazi_input_processor import BirthInputLike, coerce_int, get_field
from bazi_engine.utils.location_mapping import Location, resolve_location

logger = logging.getLogger(__name__)

_OFFSET_LABEL = re.compile(r'^(?:utc|gmt)?\s*([+-])\s*(\d{1,2})(?::?(\d{2}))?$', re.IGNORECASE)
_EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


@dataclass(frozen=True)
class SolarTimeCorrection:
    """真太阳时校正结果"""
    correction_minutes: float
    corrected_datetime: datetime
    location: Optional[Location] = None

    @property
    def corrected(self) -> Dict[str, int]:
        dt = self.corrected_datetime
        return {'year': dt.year, 'month': dt.month, 'day': dt.day, 'hour': dt.hour, 'minute': dt.minute}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'applied': True,
            'correction_minutes': self.correction_minutes,
            'corrected_datetime': self.corrected_datetime.isoformat(),
            'corrected': self.corrected,
            'location': self.location.to_dict() if self.location else None,
        }


def _is_finite_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def parse_timezone_offset_minutes(value) -> Optional[int]:
    """
    解析时区偏移（分钟）

    支持整数分钟、"UTC"/"GMT"/"Z"、"+8"、"UTC+08:00"、"GMT-0530" 等。

    Returns:
        偏移分钟数，无法解析时返回 None
    """
    if _is_finite_number(value):
        return int(value)
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    if trimmed.lower() in ('utc', 'gmt', 'z'):
        return 0
    match = _OFFSET_LABEL.match(trimmed)
    if not match:
        return None
    sign = -1 if match.group(1) == '-' else 1
    hours = int(match.group(2))
    minutes = int(match.group(3) or 0)
    if hours > 14 or minutes > 59:
        return None
    return sign * (hours * 60 + minutes)


def format_timezone_offset(offset_minutes) -> str:
    """480 -> "UTC+08:00" """
    if not _is_finite_number(offset_minutes):
        return 'UTC'
    offset_minutes = int(offset_minutes)
    sign = '+' if offset_minutes >= 0 else '-'
    hours, minutes = divmod(abs(offset_minutes), 60)
    return f"UTC{sign}{hours:02d}:{minutes:02d}"


def get_offset_minutes_from_timezone(timezone_name, moment: datetime) -> Optional[int]:
    """
    按 IANA 时区名求某一本地时刻的 UTC 偏移（自动处理夏令时）

    Args:
        timezone_name: 如 "Europe/Berlin"
        moment: 本地时间（naive）

    Returns:
        偏移分钟数，时区无法识别时返回 None
    """
    if not isinstance(timezone_name, str) or not timezone_name.strip():
        return None
    try:
        tz = pytz.timezone(timezone_name.strip())
    except pytz.UnknownTimeZoneError:
        return None
    offset = tz.localize(moment.replace(tzinfo=None)).utcoffset()
    return int(offset.total_seconds() // 60)


def reference_meridian(timezone_offset_minutes: float) -> float:
    """时区中央经线（度）：每小时 15 度"""
    return timezone_offset_minutes / 60 * 15


def compute_true_solar_time(birth_moment: datetime,
                            timezone_offset_minutes,
                            longitude,
                            location: Optional[Location] = None) -> Optional[SolarTimeCorrection]:
    """
    计算真太阳时

    时差 = (经度 - 时区中央经线) * 4 分钟；经度在中央经线以东时太阳时快于钟表时间。
    校正时刻使用未取整的时差，只有回显的 correction_minutes 保留两位小数。

    Args:
        birth_moment: 出生时钟时间（本地）
        timezone_offset_minutes: 时区偏移（分钟）
        longitude: 出生地经度（东经为正）
        location: 出生地（仅用于回显）

    Returns:
        SolarTimeCorrection；偏移或经度不是有限数值时返回 None（不适用）
    """
    if not _is_finite_number(timezone_offset_minutes) or not _is_finite_number(longitude):
        return None

    correction = (longitude - reference_meridian(timezone_offset_minutes)) * 4
    corrected = birth_moment + timedelta(minutes=correction)
    return SolarTimeCorrection(
        correction_minutes=round(correction, 2),
        corrected_datetime=corrected,
        location=location,
    )


def resolve_timezone_offset(birth_input: BirthInputLike, moment: datetime) -> Optional[int]:
    """偏移来源优先级：显式分钟数 > 偏移标签 > IANA 时区名"""
    offset = parse_timezone_offset_minutes(get_field(birth_input, 'timezone_offset_minutes'))
    if offset is not None:
        return offset
    timezone = get_field(birth_input, 'timezone')
    offset = parse_timezone_offset_minutes(timezone)
    if offset is not None:
        return offset
    return get_offset_minutes_from_timezone(timezone, moment)


def _birth_moment(birth_input: BirthInputLike, require_hour: bool = True) -> Optional[datetime]:
    """出生时钟时间（本地）；年月日缺失或日期非法时返回 None，分钟缺省为 0"""
    year = coerce_int(get_field(birth_input, 'birth_year'))
    month = coerce_int(get_field(birth_input, 'birth_month'))
    day = coerce_int(get_field(birth_input, 'birth_day'))
    hour = coerce_int(get_field(birth_input, 'birth_hour'))
    minute = coerce_int(get_field(birth_input, 'birth_minute')) or 0
    if None in (year, month, day):
        return None
    if hour is None:
        if require_hour:
            return None
        hour = 0
    try:
        return datetime(year, month, day, hour, minute)
    except ValueError:
        return None


def correct_birth_time(birth_input: BirthInputLike,
                       resolver: Callable[[Any], Optional[Location]] = resolve_location,
                       timezone_offset_minutes: Optional[int] = None
                       ) -> Optional[SolarTimeCorrection]:
    """
    对出生参数做真太阳时校正（完整流程）

    Args:
        birth_input: 出生参数（需 birth_location 与 timezone / timezone_offset_minutes）
        resolver: 地点解析函数，默认使用内置城市表
        timezone_offset_minutes: 已解析好的偏移；为空时从出生参数解析

    Returns:
        SolarTimeCorrection；地点或时区无法确定时返回 None
    """
    moment = _birth_moment(birth_input)
    if moment is None:
        return None

    location = resolver(get_field(birth_input, 'birth_location'))
    if location is None:
        logger.debug(f"出生地无法解析，跳过真太阳时: {get_field(birth_input, 'birth_location')!r}")
        return None

    offset = timezone_offset_minutes
    if not _is_finite_number(offset):
        offset = resolve_timezone_offset(birth_input, moment)
    if offset is None:
        logger.debug("时区无法确定，跳过真太阳时")
        return None

    return compute_true_solar_time(moment, offset, location.longitude, location=location)


def build_birth_time_meta(birth_input: BirthInputLike) -> Dict[str, Any]:
    """
    出生时间元信息：时区偏移、UTC 毫秒时间戳、ISO 字符串

    时、分缺失按 0 处理；日期非法或偏移无法确定时各字段均为 None。

    Returns:
        {'timezone_offset_minutes', 'birth_timestamp', 'birth_iso'}
    """
    empty = {'timezone_offset_minutes': None, 'birth_timestamp': None, 'birth_iso': None}
    moment = _birth_moment(birth_input, require_hour=False)
    if moment is None:
        return empty
    offset = resolve_timezone_offset(birth_input, moment)
    if offset is None:
        return empty

    birth_utc = moment.replace(tzinfo=dt_timezone.utc) - timedelta(minutes=offset)
    return {
        'timezone_offset_minutes': offset,
        'birth_timestamp': (birth_utc - _EPOCH) // timedelta(milliseconds=1),
        'birth_iso': birth_utc.strftime('%Y-%m-%dT%H:%M:%S.') + f"{birth_utc.microsecond // 1000:03d}Z",
    }


def build_true_solar_meta(birth_input: Optional[BirthInputLike],
                          time_meta: Optional[Dict[str, Any]] = None,
                          resolver: Callable[[Any], Optional[Location]] = resolve_location
                          ) -> Optional[Dict[str, Any]]:
    """
    真太阳时元信息

    Args:
        birth_input: 出生参数
        time_meta: build_birth_time_meta 的结果；其中的偏移优先使用
        resolver: 地点解析函数

    Returns:
        applied 为 False 时 correction_minutes / corrected / corrected_datetime 均为 None；
        birth_input 为空时返回 None
    """
    if birth_input is None:
        return None
    location = resolver(get_field(birth_input, 'birth_location'))
    not_applied = {
        'applied': False,
        'correction_minutes': None,
        'corrected_datetime': None,
        'corrected': None,
        'location': location.to_dict() if location else None,
    }
    if location is None:
        return not_applied

    offset = (time_meta or {}).get('timezone_offset_minutes')
    correction = correct_birth_time(birth_input, resolver=lambda _: location, timezone_offset_minutes=offset)
    if correction is None:
        return not_applied
    return correction.to_dict()
