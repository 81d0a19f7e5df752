"""worldpixel/schemas.py

요청 본문은 pydantic 모델로 검증하고, 응답 메시지 형태는 TypedDict로 명시합니다.

용도
1) PixelCreate: 클라이언트 -> 서버 (픽셀 배치)
2) PixelLocation: 클라이언트 -> 서버 (지우기)
3) PixelClick: 클라이언트 -> 서버 (원시 클릭, 서버에서 스냅)
4) PixelMsg / StatsMsg / BoundsMsg: 서버 -> 클라이언트
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Literal, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from worldpixel.conf.settings import (
    LAT_MAX,
    LAT_MIN,
    LNG_MAX,
    LNG_MIN,
    MAX_BRUSH_SIZE,
    MIN_BRUSH_SIZE,
)
from worldpixel.store.pixel_store import Pixel

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# ----------------------------
# client -> server
# ----------------------------
class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PixelCreate(_CamelModel):
    latitude: float = Field(..., strict=True, ge=LAT_MIN, le=LAT_MAX)
    longitude: float = Field(..., strict=True, ge=LNG_MIN, le=LNG_MAX)
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)
    brush_size: int = Field(..., alias="brushSize", strict=True, ge=MIN_BRUSH_SIZE, le=MAX_BRUSH_SIZE)
    placed_by: Optional[str] = Field(None, alias="placedBy")


class PixelLocation(_CamelModel):
    """Erase target. Out-of-range values are allowed; they just match nothing."""

    latitude: float = Field(..., strict=True, allow_inf_nan=False)
    longitude: float = Field(..., strict=True, allow_inf_nan=False)


class PixelClick(_CamelModel):
    """Raw map click. Coordinates may be outside geographic range (wrapped/clamped later)."""

    latitude: float = Field(..., strict=True, allow_inf_nan=False)
    longitude: float = Field(..., strict=True, allow_inf_nan=False)
    brush_size: int = Field(..., alias="brushSize", strict=True, ge=MIN_BRUSH_SIZE, le=MAX_BRUSH_SIZE)
    mode: Literal["paint", "erase"] = "paint"
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    placed_by: Optional[str] = Field(None, alias="placedBy")


def field_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic/FastAPI error dicts into JSON-safe per-field entries.

    Only loc/msg/type are kept; `ctx` may hold exception objects.
    """
    out: List[Dict[str, Any]] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query")]
        out.append({
            "field": ".".join(loc) or None,
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        })
    return out


# ----------------------------
# server -> client
# ----------------------------
class PixelMsg(TypedDict):
    id: str
    latitude: float
    longitude: float
    color: str
    brushSize: int
    placedBy: Optional[str]
    placedAt: str  # ISO-8601 (UTC)


class StatsMsg(TypedDict):
    totalPixels: int
    recentPixels: List[PixelMsg]
    contributors: int


class BoundsMsg(TypedDict):
    north: float
    south: float
    east: float
    west: float


def pixel_to_msg(pixel: Pixel) -> PixelMsg:
    return {
        "id": pixel.id,
        "latitude": pixel.latitude,
        "longitude": pixel.longitude,
        "color": pixel.color,
        "brushSize": pixel.brush_size,
        "placedBy": pixel.placed_by,
        "placedAt": pixel.placed_at.isoformat(),
    }
