# worldpixel/routes.py
import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from worldpixel.conf.settings import (
    CONTRIBUTORS_BASE,
    CONTRIBUTORS_DIVISOR,
    STATS_RECENT_LIMIT,
)
from worldpixel.grid.geo import extent_of
from worldpixel.grid.quantizer import cell_bounds, quantize
from worldpixel.schemas import (
    BoundsMsg,
    PixelClick,
    PixelCreate,
    PixelLocation,
    StatsMsg,
    field_errors,
    pixel_to_msg,
)
from worldpixel.store.pixel_store import PixelStore

pixel_router = APIRouter(prefix="/api")

logger = logging.getLogger("pixels")
logger.setLevel(logging.INFO)


def get_store(request: Request) -> PixelStore:
    """Store instance attached by create_app()."""
    return request.app.state.store


def _message(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, **extra})


def _internal_error(message: str) -> JSONResponse:
    # 상세 내용은 로그에만 남기고 클라이언트에는 일반 메시지만
    logger.exception(message)
    return _message(500, message)


# ----------------------------
# Reads
# ----------------------------
@pixel_router.get("/pixels")
async def list_pixels(request: Request):
    try:
        pixels = await get_store(request).get_all_pixels()
        return [pixel_to_msg(p) for p in pixels]
    except Exception:
        return _internal_error("Failed to fetch pixels")


@pixel_router.get("/pixels/bounds")
async def pixels_in_bounds(
    request: Request,
    north: Optional[float] = Query(None),
    south: Optional[float] = Query(None),
    east: Optional[float] = Query(None),
    west: Optional[float] = Query(None),
):
    """Pixels inside [south, north] x [west, east].

    Boxes crossing the antimeridian (west > east) return an empty list.
    """
    if north is None or south is None or east is None or west is None:
        return _message(400, "Missing bounds parameters")
    try:
        pixels = await get_store(request).get_pixels_in_bounds(north, south, east, west)
        return [pixel_to_msg(p) for p in pixels]
    except Exception:
        return _internal_error("Failed to fetch pixels in bounds")


@pixel_router.get("/pixels/extent")
async def pixels_extent(request: Request):
    try:
        pixels = await get_store(request).get_all_pixels()
        payload: BoundsMsg = extent_of((p.latitude, p.longitude) for p in pixels)
        return payload
    except Exception:
        return _internal_error("Failed to compute pixel extent")


@pixel_router.get("/pixels/{pixel_id}")
async def get_pixel(request: Request, pixel_id: str):
    try:
        pixel = await get_store(request).get_pixel(pixel_id)
    except Exception:
        return _internal_error("Failed to fetch pixel")
    if pixel is None:
        return _message(404, "Pixel not found")
    return pixel_to_msg(pixel)


@pixel_router.get("/stats")
async def stats(request: Request):
    try:
        store = get_store(request)
        total = await store.get_pixel_count()
        recent = await store.get_recent_pixels(STATS_RECENT_LIMIT)
        payload: StatsMsg = {
            "totalPixels": total,
            "recentPixels": [pixel_to_msg(p) for p in recent],
            "contributors": total // CONTRIBUTORS_DIVISOR + CONTRIBUTORS_BASE,
        }
        return payload
    except Exception:
        return _internal_error("Failed to fetch statistics")


# ----------------------------
# Writes
# ----------------------------
@pixel_router.post("/pixels")
async def create_pixel(request: Request, body: Any = Body(None)):
    try:
        data = PixelCreate.model_validate(body if body is not None else {})
    except ValidationError as e:
        return _message(400, "Invalid pixel data", errors=field_errors(e.errors()))

    try:
        pixel = await get_store(request).create_pixel(
            latitude=data.latitude,
            longitude=data.longitude,
            color=data.color,
            brush_size=data.brush_size,
            placed_by=data.placed_by,
        )
    except Exception:
        return _internal_error("Failed to create pixel")

    logger.info("pixel placed id=%s at=(%.6f,%.6f) color=%s",
        pixel.id, pixel.latitude, pixel.longitude, pixel.color
    )
    return JSONResponse(status_code=201, content=pixel_to_msg(pixel))


@pixel_router.delete("/pixels")
async def delete_pixel(request: Request, body: Any = Body(None)):
    if not isinstance(body, dict) or body.get("latitude") is None or body.get("longitude") is None:
        return _message(400, "Missing latitude or longitude")
    try:
        loc = PixelLocation.model_validate(body)
    except ValidationError as e:
        return _message(400, "Invalid location", errors=field_errors(e.errors()))

    try:
        deleted = await get_store(request).delete_pixel_at(loc.latitude, loc.longitude)
    except Exception:
        return _internal_error("Failed to delete pixel")

    if not deleted:
        return _message(404, "No pixel found at this location")
    logger.info("pixel erased near=(%.6f,%.6f)", loc.latitude, loc.longitude)
    return _message(200, "Pixel deleted successfully")


@pixel_router.post("/pixels/click")
async def click_pixel(request: Request, body: Any = Body(None)):
    """Raw map click -> snap to the brush grid -> paint or erase.

    Message examples:
      {"latitude": 40.71283, "longitude": -74.00597, "brushSize": 2, "mode": "paint", "color": "#ff0000"}
      {"latitude": 40.71283, "longitude": -74.00597, "brushSize": 2, "mode": "erase"}
    """
    try:
        click = PixelClick.model_validate(body if body is not None else {})
    except ValidationError as e:
        return _message(400, "Invalid pixel data", errors=field_errors(e.errors()))

    if click.mode == "paint" and click.color is None:
        return _message(400, "Invalid pixel data", errors=[
            {"field": "color", "message": "color is required in paint mode", "type": "missing"},
        ])

    lat, lng = quantize(click.latitude, click.longitude, click.brush_size)
    out = {
        "mode": click.mode,
        "latitude": lat,
        "longitude": lng,
        "cell": cell_bounds(lat, lng, click.brush_size),
    }
    store = get_store(request)

    if click.mode == "erase":
        try:
            deleted = await store.delete_pixel_at(lat, lng)
        except Exception:
            return _internal_error("Failed to delete pixel")
        if not deleted:
            return _message(404, "No pixel found at this location", **out)
        return _message(200, "Pixel deleted successfully", **out)

    try:
        pixel = await store.create_pixel(
            latitude=lat,
            longitude=lng,
            color=click.color,
            brush_size=click.brush_size,
            placed_by=click.placed_by,
        )
    except Exception:
        return _internal_error("Failed to create pixel")
    out["pixel"] = pixel_to_msg(pixel)
    return JSONResponse(status_code=201, content=out)
