#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
合盘与每日运势评分测试
"""

import pytest
from datetime import date

from bazi_engine.analyzers import (
    calculate_compatibility,
    calculate_daily_pillar,
    calculate_daily_score,
)
from bazi_engine.calculators.chart_assembler import build_pillar
from bazi_engine.utils.exceptions import InvalidChartError


def _dict_chart(day, percent):
    """只含四柱字符与五行百分比的字典命盘"""
    pillar = {"char_stem": day[0], "char_branch": day[1]}
    return {
        "pillars": {"year": pillar, "month": pillar, "day": pillar, "hour": pillar},
        "five_elements_percent": percent,
    }


class TestCompatibility:

    def test_generating_day_masters_with_same_day_branch(self, make_chart):
        """日主木生火 40 + 日支同为水 30，五行分布均衡无互补加分"""
        chart_a = make_chart("丙午", "戊辰", "甲子", "庚寅")
        chart_b = make_chart("甲寅", "戊辰", "丙子", "庚午")
        result = calculate_compatibility(chart_a, chart_b)
        assert result["score"] == 70
        assert result["details"]["day_master_relation"] == "Wood and Fire relation: Generates"
        assert result["details"]["day_branch_relation"] == "Water and Water relation: Same"
        assert result["details"]["element_balance"] == "Balance Score boost: 0"
        assert len(result["insights"]) == 2

    def test_accepts_dict_charts(self, make_chart):
        chart_a = make_chart("丙午", "戊辰", "甲子", "庚寅")
        chart_b = make_chart("甲寅", "戊辰", "丙子", "庚午")
        assert calculate_compatibility(chart_a.to_dict(), chart_b.to_dict())["score"] == 70

    def test_element_balance_is_capped(self):
        chart_a = _dict_chart("庚申", {"Wood": 0, "Fire": 0, "Earth": 0, "Metal": 50, "Water": 50})
        chart_b = _dict_chart("甲寅", {"Wood": 40, "Fire": 40, "Earth": 20, "Metal": 0, "Water": 0})
        result = calculate_compatibility(chart_a, chart_b)
        # 金克木 20 + 日支非生非同 10 + 互补 40 封顶 30
        assert result["details"]["element_balance"] == "Balance Score boost: 30"
        assert result["score"] == 60
        assert "Person B brings the Wood element that Person A needs." in result["insights"]
        assert "Person A brings the Water element that Person B needs." in result["insights"]

    def test_unknown_day_master_gets_base_score(self):
        percent = {"Wood": 20, "Fire": 20, "Earth": 20, "Metal": 20, "Water": 20}
        result = calculate_compatibility(_dict_chart("X子", percent), _dict_chart("甲子", percent))
        assert result["score"] == 10 + 30
        assert result["details"]["day_master_relation"] == "Unknown and Wood relation: Unknown"

    @pytest.mark.parametrize("chart", [
        None,
        {},
        {"pillars": {"year": {}, "month": {}, "hour": {}}},
        "甲子",
    ])
    def test_invalid_chart_raises(self, make_chart, chart):
        valid = make_chart("丙午", "戊辰", "甲子", "庚寅")
        with pytest.raises(InvalidChartError) as exc_info:
            calculate_compatibility(valid, chart)
        assert exc_info.value.message == "Invalid chart data for comparison"
        with pytest.raises(InvalidChartError):
            calculate_compatibility(chart, valid)


class TestDailyScore:

    @pytest.fixture
    def wood_chart(self, make_chart):
        """日主甲木，日支子"""
        return make_chart("丙午", "戊辰", "甲子", "庚寅")

    @pytest.mark.parametrize("day, expected_score, expected_element", [
        ("壬申", 75, "Water"),   # 水生木
        ("甲寅", 70, "Wood"),    # 同
        ("庚申", 50, "Metal"),   # 金克木
        ("戊辰", 65, "Earth"),   # 木克土
        ("丙寅", 65, "Fire"),    # 木生火
    ])
    def test_relation_adjustments(self, wood_chart, day, expected_score, expected_element):
        result = calculate_daily_score(wood_chart, build_pillar(*day))
        assert result["score"] == expected_score
        assert result["element"] == expected_element
        assert len(result["advice"]) == 1

    def test_branch_clash_penalty(self, wood_chart):
        """午冲子：水生木 +15，冲 -20"""
        result = calculate_daily_score(wood_chart, build_pillar("壬", "午"))
        assert result["score"] == 55
        assert result["advice"][-1] == "Watch out for conflicts in personal life."

    def test_unknown_daily_stem(self, wood_chart):
        result = calculate_daily_score(wood_chart, build_pillar("X", "寅"))
        assert result["score"] == 60
        assert result["advice"] == []
        assert result["element"] == "Unknown"

    def test_missing_input_falls_back(self, wood_chart):
        expected = {"score": 50, "advice": ["Stay balanced."], "element": None}
        assert calculate_daily_score(None, build_pillar("甲", "子")) == expected
        assert calculate_daily_score(wood_chart, None) == expected

    def test_accepts_dict_chart(self, wood_chart):
        result = calculate_daily_score(wood_chart.to_dict(), build_pillar("甲", "寅"))
        assert result["score"] == 70

    def test_daily_pillar_from_calendar(self, fake_calendar):
        pillar = calculate_daily_pillar(date(2024, 3, 1), calendar=fake_calendar)
        fake_calendar.read_day.assert_called_once_with(date(2024, 3, 1))
        assert (pillar.stem.name, pillar.branch.name) == ("Jia", "Zi")
