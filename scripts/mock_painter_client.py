import asyncio
import random

import httpx

from worldpixel.conf.registry import get_sample_city

SERVER = "http://127.0.0.1:8001"
CITY = "New York"
PALETTE = ["#ff0000", "#00ff00", "#0000ff", "#ffff00", "#ff00ff", "#00ffff"]


def make_color(painter_id: int) -> str:
    """Deterministic color per painter (same id -> same color)."""
    rng = random.Random(painter_id)
    return rng.choice(PALETTE)


async def main():
    center = get_sample_city(CITY)
    if center is None:
        raise SystemExit(f"unknown city: {CITY}")
    url = f"{SERVER}/api/pixels/click"
    print("paint around:", CITY, "->", url)

    painters = {
        0: [center["latitude"], center["longitude"]],
        1: [center["latitude"] + 0.01, center["longitude"] + 0.01],
        2: [center["latitude"] - 0.01, center["longitude"] - 0.01],
    }

    async with httpx.AsyncClient(timeout=5.0) as client:
        while True:
            for pid, pos in painters.items():
                pos[0] += random.uniform(-0.002, 0.002)
                pos[1] += random.uniform(-0.002, 0.002)

                click = {
                    "latitude": float(pos[0]),
                    "longitude": float(pos[1]),
                    "brushSize": 1 + pid,
                    "mode": "paint",
                    "color": make_color(pid),
                    "placedBy": f"mock-painter-{pid}",
                }
                r = await client.post(url, json=click)
                if r.status_code != 201:
                    print("click rejected:", r.status_code, r.text)

            stats = (await client.get(f"{SERVER}/api/stats")).json()
            print("total pixels:", stats["totalPixels"])
            await asyncio.sleep(0.5)


if __name__ == "__main__":
    asyncio.run(main())
