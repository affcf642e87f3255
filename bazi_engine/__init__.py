#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
bazi_engine - 四柱八字计算与缓存核心

提供命盘组装、十神、五行生克、真太阳时、合盘与每日运势评分，
以及带 LRU/TTL 的本地缓存 + 可选 Redis 镜像。
"""

__version__ = "0.1.0"
