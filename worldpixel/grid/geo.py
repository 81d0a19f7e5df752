# worldpixel/grid/geo.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Dict, Iterable, Tuple

import numpy as np

from worldpixel.conf.settings import KEY_PRECISION, LAT_MAX, LAT_MIN, LNG_MAX, LNG_MIN

# wide enough for any finite float at 6 decimals
_KEY_CONTEXT = Context(prec=400)


def _fixed(value: float, precision: int) -> str:
    # exact binary value, ties away from zero (same digits as JS toFixed)
    step = Decimal(1).scaleb(-precision)
    d = Decimal(float(value)).quantize(step, rounding=ROUND_HALF_UP, context=_KEY_CONTEXT)
    if d.is_zero():
        d = d.copy_abs()
    return f"{d:.{precision}f}"


def coordinate_to_key(lat: float, lng: float, precision: int = KEY_PRECISION) -> str:
    """Location key, e.g. "40.712800,-74.006000".

    Both coordinates are rounded half-up to `precision` decimals
    (0.0078125 -> "0.007813"); a value that rounds to zero always keys as
    "0.000000", never "-0.000000".
    """
    return f"{_fixed(lat, precision)},{_fixed(lng, precision)}"


def extent_of(points: Iterable[Tuple[float, float]]) -> Dict[str, float]:
    """Smallest box enclosing all (lat, lng) points.

    Returns the whole world when there are no points.
    """
    arr = np.asarray(list(points), dtype=np.float64).reshape(-1, 2)
    if arr.shape[0] == 0:
        return {"north": LAT_MAX, "south": LAT_MIN, "east": LNG_MAX, "west": LNG_MIN}
    return {
        "north": float(arr[:, 0].max()),
        "south": float(arr[:, 0].min()),
        "east": float(arr[:, 1].max()),
        "west": float(arr[:, 1].min()),
    }
