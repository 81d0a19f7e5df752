# worldpixel/grid/quantizer.py

"""Coordinate quantizer.

클릭 좌표(연속값)를 브러시 크기에 맞는 격자 좌표로 스냅합니다.
같은 칸을 여러 번 클릭해도 항상 같은 (lat, lng)이 나와야
store의 덮어쓰기 규칙이 "같은 위치"로 동작합니다.

순서:
1) normalize: 경도는 ±360 래핑, 위도는 clamp
2) grid = brush_size * GRID_UNIT_DEG
3) snap: round(v / grid) * grid (half-up)
4) 다시 clamp (스냅 결과가 극점/날짜변경선을 넘을 수 있음)
"""

from __future__ import annotations

import math
from typing import Dict, Tuple

import numpy as np

from worldpixel.conf.settings import (
    GRID_UNIT_DEG,
    LAT_MAX,
    LAT_MIN,
    LNG_MAX,
    LNG_MIN,
    MAX_BRUSH_SIZE,
    MIN_BRUSH_SIZE,
)


def _check_finite(name: str, value: float) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return v


def _check_brush_size(brush_size: int) -> int:
    if isinstance(brush_size, bool) or int(brush_size) != brush_size:
        raise ValueError(f"brush_size must be an integer, got {brush_size!r}")
    b = int(brush_size)
    if not MIN_BRUSH_SIZE <= b <= MAX_BRUSH_SIZE:
        raise ValueError(
            f"brush_size must be in [{MIN_BRUSH_SIZE},{MAX_BRUSH_SIZE}], got {b}"
        )
    return b


def normalize_longitude(lng: float) -> float:
    """Wrap longitude into [-180, 180].

    Same result as repeatedly adding/subtracting 360 until in range,
    so 180 and -180 stay where they are (540 -> 180, -540 -> -180).
    """
    lng = _check_finite("longitude", lng)
    if LNG_MIN <= lng <= LNG_MAX:
        return lng
    # fmod is exact, so huge inputs (1e300) still land in range
    r = math.fmod(lng, 360.0)
    if r > LNG_MAX:
        r -= 360.0
    elif r < LNG_MIN:
        r += 360.0
    return r + 0.0


def clamp_latitude(lat: float) -> float:
    """Clamp latitude into [-90, 90]. No wraparound."""
    lat = _check_finite("latitude", lat)
    return max(LAT_MIN, min(LAT_MAX, lat))


def grid_size(brush_size: int) -> float:
    """Grid pitch in degrees for a brush size."""
    return _check_brush_size(brush_size) * GRID_UNIT_DEG


def snap(value: float, grid: float) -> float:
    """Snap value to the nearest multiple of grid, halves rounding up."""
    # 0.0 더해서 -0.0 제거 (키 문자열이 "-0.000000"이 되지 않도록)
    return math.floor(value / grid + 0.5) * grid + 0.0


def quantize(lat: float, lng: float, brush_size: int) -> Tuple[float, float]:
    """Map a raw click to its canonical grid cell.

    Args:
        lat: Raw latitude, any real.
        lng: Raw longitude, any real.
        brush_size: Integer in [1, 10].

    Returns:
        (snapped_lat, snapped_lng), finite and within geographic bounds.

    Raises:
        ValueError: non-finite coordinate or brush size out of range.
            The request boundary rejects these before calling in.
    """
    grid = grid_size(brush_size)
    nlat = clamp_latitude(lat)
    nlng = normalize_longitude(lng)

    slat = snap(nlat, grid)
    slng = snap(nlng, grid)

    # e.g. brush 7 @ lng 180 -> 180.0008
    slat = max(LAT_MIN, min(LAT_MAX, slat))
    slng = max(LNG_MIN, min(LNG_MAX, slng))
    return slat, slng


def cell_bounds(lat: float, lng: float, brush_size: int) -> Dict[str, float]:
    """Bounds of the rendered square around a pixel.

    Half-height is one grid pitch of latitude; the longitude half-width is
    stretched by 1/cos(lat) so the square looks square on a Mercator map.
    """
    half_lat = grid_size(brush_size)
    cos_lat = float(np.cos(np.deg2rad(lat)))
    half_lng = half_lat / cos_lat if abs(cos_lat) > 1e-12 else 360.0
    return {
        "north": min(LAT_MAX, lat + half_lat),
        "south": max(LAT_MIN, lat - half_lat),
        "east": lng + half_lng,
        "west": lng - half_lng,
    }
