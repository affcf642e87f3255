#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字输入处理工具 - 出生参数的数据结构与数值规整
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union


@dataclass
class BirthInput:
    """调用方提交的出生参数（本模块不持久化）"""
    birth_year: Any
    birth_month: Any
    birth_day: Any
    birth_hour: Any
    gender: Any
    birth_minute: Any = 0
    birth_location: Optional[str] = None
    timezone: Optional[str] = None
    timezone_offset_minutes: Any = None


BirthInputLike = Union[BirthInput, Mapping[str, Any]]


def get_field(data: Any, name: str, default: Any = None) -> Any:
    """从 BirthInput 或字典中取字段"""
    if data is None:
        return default
    if isinstance(data, Mapping):
        return data.get(name, default)
    return getattr(data, name, default)


def coerce_int(value: Any) -> Optional[int]:
    """
    将输入规整为整数（向零截断）

    None、空白字符串、布尔值、非数字与非有限值均返回 None。
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def normalize_gender(value: Any) -> Optional[str]:
    """性别去空白并小写，非字符串或空值返回 None"""
    if not isinstance(value, str):
        return None
    gender = value.strip().lower()
    return gender or None


def is_male(gender: Any) -> bool:
    return normalize_gender(gender) in ('male', 'm', '男')
