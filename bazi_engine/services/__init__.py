#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""业务服务"""

from .bazi_calculation_service import (
    BaziCalculationService,
    create_calculation_cache,
    has_full_bazi_result,
)

__all__ = [
    'BaziCalculationService',
    'create_calculation_cache',
    'has_full_bazi_result',
]
