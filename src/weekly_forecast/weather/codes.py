"""WMO weather code translation.

Open-Meteo reports daily conditions as WMO weather codes. This module maps
each code to a short description (one table per output locale) and an icon
file name shared by all locales.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple

from weekly_forecast.config import DEFAULT_LOCALE

ICON_EXTENSION = ".svg"
UNKNOWN_ICON = "unknown"

WEATHER_ICONS: Mapping[int, str] = MappingProxyType({
    0: "sunny",
    1: "sunny",
    2: "partly-cloudy",
    3: "cloudy",
    45: "fog",
    48: "fog",
    51: "rain",
    53: "rain",
    55: "rain",
    56: "sleet",
    57: "sleet",
    61: "rain",
    63: "rain",
    65: "rain",
    66: "hail",
    67: "hail",
    71: "snow",
    73: "snow",
    75: "snow",
    77: "snow",
    80: "rain",
    81: "rain",
    82: "rain",
    85: "snow",
    86: "snow",
    95: "thunderstorm",
    96: "thunderstorm",
    99: "thunderstorm",
})

WEATHER_TEXT: Mapping[str, Mapping[int, str]] = MappingProxyType({
    "en": MappingProxyType({
        0: "clear",
        1: "clear",
        2: "partly cloudy",
        3: "overcast",
        45: "fog",
        48: "freezing fog",
        51: "light rain",
        53: "moderate rain",
        55: "heavy rain",
        56: "freezing rain",
        57: "freezing rain",
        61: "light rain",
        63: "moderate rain",
        65: "heavy rain",
        66: "hail",
        67: "hail",
        71: "light snow",
        73: "moderate snow",
        75: "heavy snow",
        77: "snow grains",
        80: "showers",
        81: "heavy showers",
        82: "violent showers",
        85: "snow showers",
        86: "heavy snow showers",
        95: "thunderstorm",
        96: "severe thunderstorm",
        99: "violent thunderstorm",
    }),
    "zh": MappingProxyType({
        0: "晴",
        1: "晴",
        2: "局部多云",
        3: "多云",
        45: "雾",
        48: "冻雾",
        51: "小雨",
        53: "中雨",
        55: "大雨",
        56: "冻雨",
        57: "冻雨",
        61: "小雨",
        63: "中雨",
        65: "大雨",
        66: "冰雹",
        67: "冰雹",
        71: "小雪",
        73: "中雪",
        75: "大雪",
        77: "冰晶",
        80: "阵雨",
        81: "强阵雨",
        82: "暴雨",
        85: "阵雪",
        86: "暴雪",
        95: "雷雨",
        96: "雷暴",
        99: "强雷暴",
    }),
})

UNKNOWN_TEXT: Mapping[str, str] = MappingProxyType({
    "en": "unknown",
    "zh": "未知天气",
})


class WeatherCondition(NamedTuple):
    """Description and icon file for a weather code."""
    text: str
    icon: str


def translate(code: int, locale: str = DEFAULT_LOCALE) -> WeatherCondition:
    """Translate a WMO weather code into a description and icon file name.

    Args:
        code: WMO weather code
        locale: Output locale ('en' or 'zh'); other values use the default locale

    Returns:
        WeatherCondition; unknown codes map to the fallback text and 'unknown.svg'
    """
    if locale not in WEATHER_TEXT:
        locale = DEFAULT_LOCALE if DEFAULT_LOCALE in WEATHER_TEXT else "en"

    text = WEATHER_TEXT[locale].get(code, UNKNOWN_TEXT[locale])
    icon = WEATHER_ICONS.get(code, UNKNOWN_ICON)
    return WeatherCondition(text=text, icon=f"{icon}{ICON_EXTENSION}")
