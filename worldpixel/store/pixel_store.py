# worldpixel/store/pixel_store.py

"""In-memory pixel store.

동작 요약
- create_pixel: 같은 위치 키(소수점 6자리)에 픽셀이 있으면 지우고 새로 넣음 (last-write-wins)
- delete_pixel_at: 정확한 키 매칭 -> 없으면 ±ERASE_RADIUS_DEG 박스 안의 첫 픽셀
- 조회: bounds / all / count / recent

모든 메서드는 하나의 asyncio.Lock 안에서 실행되므로
scan -> mutate 가 쪼개지지 않고, 읽기는 항상 쓰기 전/후 상태만 봅니다.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np

from worldpixel.conf.settings import DEFAULT_RECENT_LIMIT, ERASE_RADIUS_DEG
from worldpixel.grid.geo import coordinate_to_key

logger = logging.getLogger("store")
logger.setLevel(logging.INFO)


@dataclass(frozen=True)
class Pixel:
    """One placed pixel. Immutable; recoloring is delete + insert."""

    id: str
    latitude: float
    longitude: float
    color: str
    brush_size: int
    placed_at: datetime
    placed_by: Optional[str] = None
    seq: int = field(default=0, compare=False, repr=False)

    @property
    def location_key(self) -> str:
        return coordinate_to_key(self.latitude, self.longitude)


class PixelStore:
    """Authoritative collection of live pixels.

    - pixels: id -> Pixel (dict 삽입 순서 = 배치 순서)
    - by_key: location key -> id (덮어쓰기 O(1) 조회용 인덱스)
    """

    def __init__(self, erase_radius: float = ERASE_RADIUS_DEG):
        self.erase_radius = erase_radius
        self._pixels: Dict[str, Pixel] = {}
        self._by_key: Dict[str, str] = {}
        self._seq = itertools.count(1)
        self._last_placed_at: Optional[datetime] = None
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # internal helpers (call with the lock held)
    # ------------------------------------------------------------------
    def _next_timestamp(self) -> datetime:
        now = datetime.now(timezone.utc)
        # 시계가 뒤로 가더라도 placed_at 은 감소하지 않음
        if self._last_placed_at is not None and now < self._last_placed_at:
            now = self._last_placed_at
        self._last_placed_at = now
        return now

    def _remove(self, pixel_id: str) -> Pixel:
        pixel = self._pixels.pop(pixel_id)
        key = pixel.location_key
        if self._by_key.get(key) == pixel_id:
            del self._by_key[key]
        return pixel

    def _coords(self) -> np.ndarray:
        """(N, 2) array of [lat, lng] in insertion order."""
        if not self._pixels:
            return np.empty((0, 2), dtype=np.float64)
        return np.array(
            [(p.latitude, p.longitude) for p in self._pixels.values()],
            dtype=np.float64,
        )

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    async def create_pixel(
        self,
        latitude: float,
        longitude: float,
        color: str,
        brush_size: int,
        placed_by: Optional[str] = None,
    ) -> Pixel:
        """Insert a pixel, replacing any pixel at the same 6-decimal location.

        Inputs are assumed validated by the request boundary.

        Returns:
            The newly created Pixel with id and placed_at populated.
        """
        async with self._lock:
            key = coordinate_to_key(latitude, longitude)

            existing_id = self._by_key.get(key)
            if existing_id is not None:
                old = self._remove(existing_id)
                logger.debug("overwrite key=%s old_id=%s old_color=%s", key, old.id, old.color)

            pixel = Pixel(
                id=str(uuid.uuid4()),
                latitude=float(latitude),
                longitude=float(longitude),
                color=color,
                brush_size=int(brush_size),
                placed_at=self._next_timestamp(),
                placed_by=placed_by or None,
                seq=next(self._seq),
            )
            self._pixels[pixel.id] = pixel
            self._by_key[key] = pixel.id
            return pixel

    async def delete_pixel_at(self, latitude: float, longitude: float) -> bool:
        """Delete the pixel at (or near) a location.

        1) exact match on the 6-decimal location key
        2) otherwise the first pixel, in insertion order (oldest first), with
           |dlat| <= erase_radius and |dlng| <= erase_radius

        Returns:
            True if a pixel was deleted; False if nothing matched.
        """
        async with self._lock:
            key = coordinate_to_key(latitude, longitude)
            target_id = self._by_key.get(key)

            if target_id is None and self._pixels:
                coords = self._coords()
                near = (np.abs(coords[:, 0] - latitude) <= self.erase_radius) & (
                    np.abs(coords[:, 1] - longitude) <= self.erase_radius
                )
                hits = np.flatnonzero(near)
                if hits.size:
                    target_id = list(self._pixels.keys())[int(hits[0])]

            if target_id is None:
                return False

            self._remove(target_id)
            return True

    async def seed(self, samples: Iterable[Mapping[str, Any]]) -> int:
        """Insert sample pixels through create_pixel. Returns how many went in."""
        n = 0
        for s in samples:
            await self.create_pixel(
                latitude=s["latitude"],
                longitude=s["longitude"],
                color=s["color"],
                brush_size=s.get("brush_size", 1),
                placed_by=s.get("placed_by"),
            )
            n += 1
        return n

    async def clear(self) -> None:
        async with self._lock:
            self._pixels.clear()
            self._by_key.clear()

    # ------------------------------------------------------------------
    # reads (snapshot lists; Pixel itself is immutable)
    # ------------------------------------------------------------------
    async def get_pixel(self, pixel_id: str) -> Optional[Pixel]:
        async with self._lock:
            return self._pixels.get(pixel_id)

    async def get_all_pixels(self) -> List[Pixel]:
        async with self._lock:
            return list(self._pixels.values())

    async def get_pixel_count(self) -> int:
        async with self._lock:
            return len(self._pixels)

    async def get_pixels_in_bounds(
        self, north: float, south: float, east: float, west: float
    ) -> List[Pixel]:
        """Pixels with south <= lat <= north and west <= lng <= east.

        A box crossing the antimeridian (west > east) matches nothing.
        """
        async with self._lock:
            if not self._pixels:
                return []
            coords = self._coords()
            inside = (
                (coords[:, 0] >= south)
                & (coords[:, 0] <= north)
                & (coords[:, 1] >= west)
                & (coords[:, 1] <= east)
            )
            pixels = list(self._pixels.values())
            return [pixels[i] for i in np.flatnonzero(inside)]

    async def get_recent_pixels(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[Pixel]:
        """Most recent pixels first; equal timestamps ordered newest insertion first."""
        if limit <= 0:
            return []
        async with self._lock:
            ordered = sorted(
                self._pixels.values(),
                key=lambda p: (p.placed_at, p.seq),
                reverse=True,
            )
            return ordered[:limit]
