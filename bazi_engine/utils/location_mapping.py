#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
出生地映射配置
提供地点字符串到经纬度的解析（已知城市表 + "纬度, 经度" 字面量）
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Location:
    """解析后的地点"""
    name: Optional[str]
    latitude: float
    longitude: float
    source: str = 'known'

    def to_dict(self) -> dict:
        return {'name': self.name, 'latitude': self.latitude, 'longitude': self.longitude}


def _city(name: str, latitude: float, longitude: float) -> Location:
    return Location(name=name, latitude=latitude, longitude=longitude)


# 键为 normalize_location_key 之后的形式
KNOWN_LOCATIONS: Dict[str, Location] = {
    'beijing': _city('Beijing', 39.9042, 116.4074),
    'shanghai': _city('Shanghai', 31.2304, 121.4737),
    'shenzhen': _city('Shenzhen', 22.5431, 114.0579),
    'guangzhou': _city('Guangzhou', 23.1291, 113.2644),
    'hong kong': _city('Hong Kong', 22.3193, 114.1694),
    'taipei': _city('Taipei', 25.033, 121.5654),
    'tokyo': _city('Tokyo', 35.6762, 139.6503),
    'seoul': _city('Seoul', 37.5665, 126.978),
    'singapore': _city('Singapore', 1.3521, 103.8198),
    'london': _city('London', 51.5074, -0.1278),
    'paris': _city('Paris', 48.8566, 2.3522),
    'berlin': _city('Berlin', 52.52, 13.405),
    'rome': _city('Rome', 41.9028, 12.4964),
    'madrid': _city('Madrid', 40.4168, -3.7038),
    'new york': _city('New York', 40.7128, -74.006),
    'new york city': _city('New York', 40.7128, -74.006),
    'nyc': _city('New York', 40.7128, -74.006),
    'los angeles': _city('Los Angeles', 34.0522, -118.2437),
    'san francisco': _city('San Francisco', 37.7749, -122.4194),
    'chicago': _city('Chicago', 41.8781, -87.6298),
    'toronto': _city('Toronto', 43.6532, -79.3832),
    'vancouver': _city('Vancouver', 49.2827, -123.1207),
    'sydney': _city('Sydney', -33.8688, 151.2093),
    'melbourne': _city('Melbourne', -37.8136, 144.9631),
    'sao paulo': _city('Sao Paulo', -23.5558, -46.6396),
    'mexico city': _city('Mexico City', 19.4326, -99.1332),
    'cape town': _city('Cape Town', -33.9249, 18.4241),
    'nairobi': _city('Nairobi', -1.2921, 36.8219),
    'lagos': _city('Lagos', 6.5244, 3.3792),
    'mumbai': _city('Mumbai', 19.076, 72.8777),
    'delhi': _city('Delhi', 28.7041, 77.1025),
    'bangalore': _city('Bangalore', 12.9716, 77.5946),
    'dubai': _city('Dubai', 25.2048, 55.2708),
}

_COORDINATE_PAIR = re.compile(r'(-?\d{1,3}(?:\.\d+)?)\s*,\s*(-?\d{1,3}(?:\.\d+)?)')


def normalize_location_key(value) -> str:
    """小写、去括号内容、标点与空白合并"""
    if not isinstance(value, str):
        return ''
    key = value.lower()
    key = re.sub(r'\([^)]*\)', ' ', key)
    key = re.sub(r'[^a-z0-9\s,.-]', ' ', key)
    key = re.sub(r'[\s,.-]+', ' ', key)
    return key.strip()


def parse_coordinate_pair(value) -> Optional[Location]:
    """解析 "纬度, 经度"；两数范围可判定时也接受 "经度, 纬度" """
    if not isinstance(value, str):
        return None
    match = _COORDINATE_PAIR.search(value)
    if not match:
        return None
    first, second = float(match.group(1)), float(match.group(2))
    if abs(first) <= 90 and abs(second) <= 180:
        return Location(name=None, latitude=first, longitude=second, source='coordinates')
    if abs(first) <= 180 and abs(second) <= 90:
        return Location(name=None, latitude=second, longitude=first, source='coordinates')
    return None


def resolve_location(birth_location) -> Optional[Location]:
    """
    解析出生地

    优先级：坐标字面量 > 已知城市精确匹配 > 已知城市包含匹配

    Args:
        birth_location: 地点文本

    Returns:
        Location，无法解析时返回 None
    """
    if not isinstance(birth_location, str):
        return None
    trimmed = birth_location.strip()
    if not trimmed:
        return None

    coords = parse_coordinate_pair(trimmed)
    if coords:
        return coords

    key = normalize_location_key(trimmed)
    if not key:
        return None
    if key in KNOWN_LOCATIONS:
        return KNOWN_LOCATIONS[key]
    for known_key, location in KNOWN_LOCATIONS.items():
        if known_key in key:
            return location
    return None


def list_known_locations() -> List[Location]:
    """去重后的已知城市列表（按名称排序）"""
    seen = set()
    locations = []
    for location in KNOWN_LOCATIONS.values():
        ident = (location.name, location.latitude, location.longitude)
        if ident in seen:
            continue
        seen.add(ident)
        locations.append(location)
    return sorted(locations, key=lambda loc: loc.name or '')
