#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
出生参数规整与业务异常测试
"""

import pytest

from bazi_engine.utils.bazi_input_processor import (
    BirthInput,
    coerce_int,
    get_field,
    is_male,
    normalize_gender,
)
from bazi_engine.utils.exceptions import BaziEngineError, CalendarServiceError, InvalidChartError


class TestCoerceInt:

    @pytest.mark.parametrize("value, expected", [
        (1990, 1990),
        (1990.9, 1990),
        ("2001.9", 2001),
        (" 14 ", 14),
        (-3.7, -3),
        ("0", 0),
    ])
    def test_valid(self, value, expected):
        assert coerce_int(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", True, float("nan"), float("inf"), [1]])
    def test_invalid(self, value):
        assert coerce_int(value) is None


class TestFields:

    def test_get_field_from_mapping_and_object(self):
        assert get_field({"birth_year": 1990}, "birth_year") == 1990
        assert get_field(BirthInput(1990, 5, 15, 14, "male"), "birth_minute") == 0
        assert get_field(None, "birth_year") is None
        assert get_field({}, "gender", "x") == "x"

    @pytest.mark.parametrize("value, expected", [
        (" Male ", "male"),
        ("FEMALE", "female"),
        ("", None),
        (None, None),
        (1, None),
    ])
    def test_normalize_gender(self, value, expected):
        assert normalize_gender(value) == expected

    @pytest.mark.parametrize("value, expected", [
        ("male", True),
        ("M", True),
        ("男", True),
        ("female", False),
        ("女", False),
        (None, False),
    ])
    def test_is_male(self, value, expected):
        assert is_male(value) is expected


class TestExceptions:

    def test_calendar_error(self):
        cause = RuntimeError("boom")
        error = CalendarServiceError("万年历计算失败", cause=cause)
        assert isinstance(error, BaziEngineError)
        assert error.code == 503
        assert error.error_type == "calendar_unavailable"
        assert error.cause is cause

    def test_invalid_chart_error(self):
        error = InvalidChartError()
        assert error.code == 400
        assert str(error) == "Invalid chart data for comparison"
