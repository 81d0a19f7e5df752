# worldpixel/conf/registry.py

"""Sample pixel registry.

서버 시작 시 store에 한 번 심어지는 샘플 픽셀 목록입니다.

데이터 구조:
- SAMPLE_PIXELS: 도시 이름 -> 픽셀 기본값. store에는 복사본만 전달.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List

# -----------------------------------------------------------------------------
# Seed data: one pixel at each named world city
# -----------------------------------------------------------------------------
SAMPLE_PIXELS: Dict[str, Dict[str, Any]] = {
    "New York": {
        "latitude": 40.7128, "longitude": -74.0060,
        "color": "#ff0000", "placed_by": "Anonymous", "brush_size": 2,
    },
    "London": {
        "latitude": 51.5074, "longitude": -0.1278,
        "color": "#00ff00", "placed_by": "Anonymous", "brush_size": 1,
    },
    "Tokyo": {
        "latitude": 35.6762, "longitude": 139.6503,
        "color": "#0000ff", "placed_by": "Anonymous", "brush_size": 3,
    },
    "Sydney": {
        "latitude": -33.8688, "longitude": 151.2093,
        "color": "#ffff00", "placed_by": "Anonymous", "brush_size": 1,
    },
    "Paris": {
        "latitude": 48.8566, "longitude": 2.3522,
        "color": "#ff00ff", "placed_by": "Anonymous", "brush_size": 2,
    },
    "San Francisco": {
        "latitude": 37.7749, "longitude": -122.4194,
        "color": "#00ffff", "placed_by": "Anonymous", "brush_size": 1,
    },
    "Moscow": {
        "latitude": 55.7558, "longitude": 37.6173,
        "color": "#ffa500", "placed_by": "Anonymous", "brush_size": 2,
    },
    "Rio de Janeiro": {
        "latitude": -22.9068, "longitude": -43.1729,
        "color": "#800080", "placed_by": "Anonymous", "brush_size": 1,
    },
}


def get_sample_pixels() -> List[Dict[str, Any]]:
    """Return a deep-copied list of the seed pixels, in city order.

    Notes:
        Callers may mutate the returned dicts freely; the registry itself
        is never touched.
    """
    return [deepcopy(cfg) for cfg in SAMPLE_PIXELS.values()]


def get_sample_city(name: str) -> Dict[str, Any] | None:
    """Return one seed pixel by city name, or None if unknown."""
    cfg = SAMPLE_PIXELS.get(name)
    return deepcopy(cfg) if cfg is not None else None
