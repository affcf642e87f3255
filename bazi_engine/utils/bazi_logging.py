#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
八字计算模块共享日志工具

提供安全的日志输出 Handler，捕获 Broken pipe 等异常。
"""

import logging
import os
from typing import Optional

PACKAGE_LOGGER = "bazi_engine"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class SafeStreamHandler(logging.StreamHandler):
    """安全的 StreamHandler，捕获 Broken pipe 异常"""
    def emit(self, record):
        try:
            super().emit(record)
        except (BrokenPipeError, OSError):
            pass


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    为 bazi_engine 包挂载日志输出

    Args:
        level: 日志级别，默认读取 BAZI_LOG_LEVEL，缺省 INFO

    Returns:
        包级 logger
    """
    level = (level or os.getenv('BAZI_LOG_LEVEL', 'INFO')).upper()
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, SafeStreamHandler) for h in logger.handlers):
        handler = SafeStreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
