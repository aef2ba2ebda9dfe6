import pytest
from sqlalchemy import select

from wayamba.geo import BoundaryGate
from wayamba.main import create_app
from wayamba.models import Feedback, FeedbackStatus

from tests.conftest import INSIDE, OUTSIDE, FakeImageHost, count_rows, serve


@pytest.mark.asyncio
async def test_submit_feedback_form(client, db, notifier):
    resp = await client.post(
        "/submit",
        data={"name": "Alice", "comment": "Beautiful lake", "latitude": "7.8", "longitude": "80.5"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Feedback submitted!"}

    async with db() as s:
        stored = (await s.execute(select(Feedback))).scalar_one()
    assert stored.name == "Alice"
    assert stored.comment == "Beautiful lake"
    assert stored.latitude == 7.8
    assert stored.longitude == 80.5
    assert stored.status == FeedbackStatus.PENDING
    assert len(notifier.notified) == 1


@pytest.mark.asyncio
async def test_submit_feedback_json(client, db):
    resp = await client.post(
        "/submit",
        json={"name": "Bob", "comment": "Great", "latitude": INSIDE[0], "longitude": INSIDE[1]},
    )
    assert resp.status_code == 200
    assert await count_rows(db, Feedback) == 1


@pytest.mark.asyncio
async def test_submit_feedback_with_photo(client, db, image_host):
    resp = await client.post(
        "/submit",
        data={"name": "Carol", "comment": "Sunset", "latitude": "7.8", "longitude": "80.5"},
        files={"image": ("sunset.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
    )
    assert resp.status_code == 200

    image, folder = image_host.uploads[0]
    assert folder == "tourist-feedback"
    assert image.filename == "sunset.jpg"
    assert image.content_type == "image/jpeg"

    async with db() as s:
        stored = (await s.execute(select(Feedback))).scalar_one()
    assert stored.image_url == "https://images.test/tourist-feedback/sunset.jpg"


@pytest.mark.asyncio
async def test_submit_feedback_outside_province(client, db):
    resp = await client.post(
        "/submit",
        data={"name": "Dan", "comment": "Colombo", "latitude": str(OUTSIDE[0]), "longitude": str(OUTSIDE[1])},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "outside" in body["error"].lower()
    assert await count_rows(db, Feedback) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Eve", "comment": "No location"},
        {"name": "Eve", "comment": "Bad", "latitude": "north", "longitude": "80.5"},
        {"name": "Eve", "comment": "Half", "latitude": "7.8", "longitude": ""},
    ],
)
async def test_submit_feedback_requires_coordinates(client, db, payload):
    resp = await client.post("/submit", data=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Latitude and Longitude are required."
    assert await count_rows(db, Feedback) == 0


@pytest.mark.asyncio
async def test_submit_feedback_rejects_non_object_json(client):
    resp = await client.post("/submit", json=[7.8, 80.5])
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_submit_feedback_image_failure(client, db, image_host):
    image_host.fail = True
    resp = await client.post(
        "/submit",
        data={"latitude": "7.8", "longitude": "80.5"},
        files={"image": ("a.png", b"png", "image/png")},
    )
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to upload image."
    assert await count_rows(db, Feedback) == 0


@pytest.mark.asyncio
async def test_health(client, boundary):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "boundary_loaded": True}


@pytest.mark.asyncio
async def test_submit_feedback_with_unloaded_boundary(settings, notifier, db):
    app = create_app(settings, boundary=BoundaryGate.unloaded(), image_host=FakeImageHost(), notifier=notifier)
    async with serve(app) as ac:
        resp = await ac.post("/submit", json={"name": "A", "comment": "nice", "latitude": 7.8, "longitude": 80.5})
        health = await ac.get("/health")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Province boundary data not loaded."}
    assert health.json()["boundary_loaded"] is False
    assert await count_rows(db, Feedback) == 0
    assert notifier.notified == []
