#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字核心计算模块

提供八字计算的核心功能：
- 五行关系计算
- 十神计算
"""

from .element_relations import (
    Relation,
    get_element_relation,
    get_generated_element,
    get_controlled_element,
)
from .ten_gods import (
    TenGod,
    TEN_GOD_ORDER,
    calculate_ten_god,
    branch_main_stem,
    stem_equivalent,
)

__all__ = [
    'Relation',
    'get_element_relation',
    'get_generated_element',
    'get_controlled_element',
    'TenGod',
    'TEN_GOD_ORDER',
    'calculate_ten_god',
    'branch_main_stem',
    'stem_equivalent',
]
