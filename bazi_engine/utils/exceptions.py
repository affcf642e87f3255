#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
自定义业务异常

未识别的天干/地支/五行关系属于正常返回值（UNKNOWN），不在此列。
"""


class BaziEngineError(Exception):
    """
    业务异常基类

    code 对应上层 HTTP 层应返回的状态码。
    """
    def __init__(self, message: str, code: int = 400, error_type: str = "business_error"):
        self.message = message
        self.code = code
        self.error_type = error_type
        super().__init__(message)


class CalendarServiceError(BaziEngineError):
    """万年历（干支换算）服务无法给出可用结果"""
    def __init__(self, message: str = "万年历服务不可用", cause: Exception = None):
        self.cause = cause
        super().__init__(message, code=503, error_type="calendar_unavailable")


class InvalidChartError(BaziEngineError):
    """命盘数据不完整，无法参与评分"""
    def __init__(self, message: str = "Invalid chart data for comparison"):
        super().__init__(message, code=400, error_type="invalid_chart")
