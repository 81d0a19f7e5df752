# worldpixel/conf/settings.py

"""Tunable constants for the pixel grid and the store.

그리드 관련 상수는 한 곳에서만 관리합니다.
GRID_UNIT_DEG 는 화면에 그려지는 픽셀 크기와 스냅 간격을 동시에 결정하므로
둘 중 하나만 바꾸면 픽셀 사이에 틈/겹침이 생깁니다.
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Grid / quantizer
# -----------------------------------------------------------------------------
GRID_UNIT_DEG: float = 0.0008     # grid pitch (deg) per brush size step
MIN_BRUSH_SIZE: int = 1
MAX_BRUSH_SIZE: int = 10

LAT_MIN, LAT_MAX = -90.0, 90.0
LNG_MIN, LNG_MAX = -180.0, 180.0

# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------
KEY_PRECISION: int = 6            # decimals used by the location dedup key
ERASE_RADIUS_DEG: float = 0.001   # per-axis tolerance for erase fallback

DEFAULT_RECENT_LIMIT: int = 10

# -----------------------------------------------------------------------------
# Stats endpoint
# -----------------------------------------------------------------------------
STATS_RECENT_LIMIT: int = 5
# placeholder, not a distinct-user count
CONTRIBUTORS_DIVISOR: int = 10
CONTRIBUTORS_BASE: int = 100
