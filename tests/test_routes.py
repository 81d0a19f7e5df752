from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from worldpixel.app import create_app
from worldpixel.conf import registry
from worldpixel.store.pixel_store import PixelStore

NY = {"latitude": 40.7128, "longitude": -74.0060}
LONDON = {"latitude": 51.5074, "longitude": -0.1278}


@pytest.fixture
def client():
    app = create_app(store=PixelStore(), seed=False)
    with TestClient(app) as c:
        yield c


def place(client, color="#ff0000", brush=1, **coords):
    body = {**coords, "color": color, "brushSize": brush}
    return client.post("/api/pixels", json=body)


def count(client) -> int:
    return client.get("/api/stats").json()["totalPixels"]


def test_ping(client):
    assert client.get("/ping").json() == {"msg": "pong"}


def test_startup_seeds_sample_cities():
    with TestClient(create_app()) as c:
        pixels = c.get("/api/pixels").json()
    assert len(pixels) == len(registry.SAMPLE_PIXELS)
    assert {p["placedBy"] for p in pixels} == {"Anonymous"}


def test_apps_do_not_share_state():
    with TestClient(create_app(seed=False)) as a, TestClient(create_app(seed=False)) as b:
        place(a, **NY)
        assert count(a) == 1
        assert count(b) == 0


def test_create_pixel_returns_201_with_camel_case(client):
    r = place(client, color="#AbCdEf", brush=3, placedBy="bob", **NY)
    assert r.status_code == 201
    body = r.json()
    assert body["color"] == "#AbCdEf"
    assert body["brushSize"] == 3
    assert body["placedBy"] == "bob"
    assert body["id"] and body["placedAt"]
    assert client.get(f"/api/pixels/{body['id']}").json() == body


def test_create_pixel_overwrites_same_location(client):
    place(client, color="#ff0000", latitude=40.0, longitude=-74.0)
    place(client, color="#00ff00", latitude=40.0000001, longitude=-74.0000001)
    pixels = client.get("/api/pixels").json()
    assert len(pixels) == 1
    assert pixels[0]["color"] == "#00ff00"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"color": "red"}, "color"),
        ({"brushSize": 11}, "brushSize"),
        ({"brushSize": 0}, "brushSize"),
        ({"latitude": 91}, "latitude"),
        ({"longitude": -181}, "longitude"),
        ({"brushSize": True}, "brushSize"),
        ({"brushSize": 2.5}, "brushSize"),
        ({"brushSize": "2"}, "brushSize"),
        ({"latitude": "1.5"}, "latitude"),
        ({"longitude": False}, "longitude"),
    ],
)
def test_create_pixel_rejects_invalid_fields(client, overrides, field):
    body = {**NY, "color": "#ff0000", "brushSize": 1, **overrides}
    r = client.post("/api/pixels", json=body)
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid pixel data"
    assert field in [e["field"] for e in r.json()["errors"]]
    assert count(client) == 0


def test_create_pixel_accepts_integer_coordinates(client):
    r = place(client, latitude=40, longitude=-74)
    assert r.status_code == 201
    assert r.json()["latitude"] == 40.0


def test_delete_and_click_reject_non_numbers(client):
    r = client.request("DELETE", "/api/pixels", json={"latitude": "40.7", "longitude": -74.0})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "latitude"

    r = client.post("/api/pixels/click", json={
        "latitude": 1.0, "longitude": 1.0, "brushSize": True, "color": "#ff0000",
    })
    assert r.status_code == 400
    assert count(client) == 0


def test_create_pixel_lists_every_missing_field(client):
    r = client.post("/api/pixels", json={})
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert {"latitude", "longitude", "color", "brushSize"} <= fields


def test_bounds_query(client):
    place(client, **NY)
    place(client, **LONDON)
    r = client.get("/api/pixels/bounds", params={"north": 41, "south": 40, "east": -73, "west": -75})
    assert r.status_code == 200
    assert [(p["latitude"], p["longitude"]) for p in r.json()] == [(40.7128, -74.0060)]


def test_bounds_query_requires_all_params(client):
    r = client.get("/api/pixels/bounds", params={"north": 41, "south": 40, "east": -73})
    assert r.status_code == 400
    assert r.json()["message"] == "Missing bounds parameters"


def test_bounds_query_rejects_non_numeric(client):
    r = client.get("/api/pixels/bounds", params={"north": "x", "south": 40, "east": -73, "west": -75})
    assert r.status_code == 400


def test_delete_then_not_found(client):
    place(client, **NY)
    r = client.request("DELETE", "/api/pixels", json=NY)
    assert r.status_code == 200
    assert r.json()["message"] == "Pixel deleted successfully"
    assert client.get("/api/pixels").json() == []

    r = client.request("DELETE", "/api/pixels", json=NY)
    assert r.status_code == 404
    assert r.json()["message"] == "No pixel found at this location"


def test_delete_far_outside_the_map_is_not_found(client):
    place(client, **NY)
    r = client.request("DELETE", "/api/pixels", json={"latitude": 1e30, "longitude": -1e300})
    assert r.status_code == 404


def test_delete_requires_coordinates(client):
    r = client.request("DELETE", "/api/pixels", json={"latitude": 1.0})
    assert r.status_code == 400
    assert r.json()["message"] == "Missing latitude or longitude"


def test_unknown_pixel_id_is_404(client):
    assert client.get("/api/pixels/does-not-exist").status_code == 404


def test_stats(client):
    for i in range(12):
        place(client, latitude=float(i), longitude=0.0)
    body = client.get("/api/stats").json()
    assert body["totalPixels"] == 12
    assert body["contributors"] == 101
    assert len(body["recentPixels"]) == 5
    assert body["recentPixels"][0]["latitude"] == 11.0


def test_extent(client):
    assert client.get("/api/pixels/extent").json() == {
        "north": 90.0, "south": -90.0, "east": 180.0, "west": -180.0,
    }
    place(client, **NY)
    place(client, **LONDON)
    assert client.get("/api/pixels/extent").json() == {
        "north": 51.5074, "south": 40.7128, "east": -0.1278, "west": -74.0060,
    }


def test_click_paint_snaps_to_grid(client):
    click = {"latitude": 35.67621, "longitude": 139.65031, "brushSize": 3, "color": "#0000ff"}
    r1 = client.post("/api/pixels/click", json=click)
    r2 = client.post("/api/pixels/click", json={**click, "latitude": 35.67625, "color": "#00ff00"})
    assert r1.status_code == r2.status_code == 201
    assert r1.json()["latitude"] == r2.json()["latitude"]
    assert r1.json()["longitude"] == r2.json()["longitude"]
    pixels = client.get("/api/pixels").json()
    assert len(pixels) == 1
    assert pixels[0]["color"] == "#00ff00"


def test_click_wraps_longitude(client):
    r = client.post("/api/pixels/click", json={
        "latitude": 10.0, "longitude": 190.0, "brushSize": 1, "color": "#ff0000",
    })
    assert r.status_code == 201
    assert r.json()["pixel"]["longitude"] == pytest.approx(-170.0)


def test_click_erase(client):
    click = {"latitude": 48.8566, "longitude": 2.3522, "brushSize": 2}
    assert client.post("/api/pixels/click", json={**click, "mode": "erase"}).status_code == 404
    client.post("/api/pixels/click", json={**click, "color": "#ff00ff"})
    r = client.post("/api/pixels/click", json={**click, "mode": "erase"})
    assert r.status_code == 200
    assert count(client) == 0


def test_click_paint_requires_color(client):
    r = client.post("/api/pixels/click", json={"latitude": 1.0, "longitude": 1.0, "brushSize": 1})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "color"


def test_internal_failure_is_generic(client, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("secret detail")

    monkeypatch.setattr(client.app.state.store, "get_all_pixels", boom)
    r = client.get("/api/pixels")
    assert r.status_code == 500
    assert r.json() == {"message": "Failed to fetch pixels"}
