#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""天干地支静态数据"""

from .stems_branches import (
    Element,
    Polarity,
    ELEMENT_CYCLE,
    StemEntry,
    BranchEntry,
    HEAVENLY_STEMS,
    EARTHLY_BRANCHES,
    STEMS_MAP,
    BRANCHES_MAP,
    BRANCH_MAIN_STEM,
    BRANCH_CLASHES,
    parse_stem,
    parse_branch,
)

__all__ = [
    'Element',
    'Polarity',
    'ELEMENT_CYCLE',
    'StemEntry',
    'BranchEntry',
    'HEAVENLY_STEMS',
    'EARTHLY_BRANCHES',
    'STEMS_MAP',
    'BRANCHES_MAP',
    'BRANCH_MAIN_STEM',
    'BRANCH_CLASHES',
    'parse_stem',
    'parse_branch',
]
