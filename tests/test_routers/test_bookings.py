import asyncio
import json

import respx
from httpx import Response

ROOM_URL = "http://api.test/api/rooms/r1"
BOOKINGS_URL = "http://api.test/api/bookings"

IDENTITY = {"_id": "u1", "email": "asha@example.com", "firstName": "Asha", "lastName": "Rao"}
AUTH = {"Authorization": "Bearer tok-123"}


def _mock_room():
    return respx.get(ROOM_URL).mock(
        return_value=Response(
            200,
            json={
                "_id": "r1",
                "roomType": "Deluxe Room",
                "pricePerNight": "10,000",
                "hotel": {"_id": "h1", "name": "Villa Serena", "city": "Goa"},
            },
        )
    )


def _submission(**overrides):
    body = {
        "room_id": "r1",
        "check_in": "2025-01-01",
        "check_out": "2025-01-04",
        "guests": 2,
        "payment_method": "Pay At Hotel",
        "identity": IDENTITY,
    }
    body.update(overrides)
    return body


@respx.mock
async def test_booking_success(client):
    _mock_room()
    route = respx.post(BOOKINGS_URL).mock(return_value=Response(201, json={"_id": "b1"}))

    resp = await client.post("/bookings", json=_submission(), headers=AUTH)

    assert resp.status_code == 201
    data = resp.json()
    assert data["status"] == "succeeded"
    assert data["state"] == "succeeded"
    assert data["booking"]["id"] == "b1"

    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer tok-123"
    body = json.loads(request.content)
    assert body["totalPrice"] == 35400
    assert body["hotelId"] == "h1"
    assert body["userId"] == "u1"
    assert body["isPaid"] is False
    assert body["userName"] == "Asha Rao"


@respx.mock
async def test_booking_without_login_sends_nothing(client):
    _mock_room()
    route = respx.post(BOOKINGS_URL).mock(return_value=Response(201, json={"_id": "b1"}))

    resp = await client.post("/bookings", json=_submission(identity=None))

    assert resp.status_code == 422
    data = resp.json()
    assert data["status"] == "invalid"
    assert data["state"] == "idle"
    assert data["message"] == "Please log in to book a room"
    assert not route.called


@respx.mock
async def test_booking_rejected_keeps_form(client):
    _mock_room()
    respx.post(BOOKINGS_URL).mock(
        return_value=Response(409, json={"error": "Room is already booked for these dates"})
    )

    resp = await client.post("/bookings", json=_submission(session_id="s1"), headers=AUTH)

    assert resp.status_code == 400
    data = resp.json()
    assert data["status"] == "rejected"
    assert data["message"] == "Room is already booked for these dates"
    assert data["state"] == "idle"
    assert data["form"]["check_in"] == "2025-01-01"
    assert data["form"]["guests"] == 2
    assert data["transitions"][-2:] == ["failed", "idle"]

    status = await client.get("/bookings/sessions/s1")
    assert status.json()["last_error"] == "Room is already booked for these dates"


@respx.mock
async def test_missing_email_then_prompt_answer(client):
    room_route = _mock_room()
    respx.post(BOOKINGS_URL).mock(return_value=Response(201, json={"_id": "b1"}))
    identity = {"_id": "u1", "firstName": "Asha"}
    headers = {**AUTH, "X-Device-Id": "device-9"}

    first = await client.post(
        "/bookings", json=_submission(session_id="s2", identity=identity), headers=headers
    )
    assert first.status_code == 422
    assert first.json()["status"] == "missing_email"

    second = await client.post(
        "/bookings",
        json=_submission(session_id="s2", identity=identity, contact_email="asha@example.com"),
        headers=headers,
    )
    assert second.status_code == 201
    assert room_route.call_count == 1

    # remembered for the device on the next session
    third = await client.post(
        "/bookings", json=_submission(session_id="s3", identity=identity), headers=headers
    )
    assert third.status_code == 201


@respx.mock
async def test_completed_session_is_closed_until_reset(client):
    _mock_room()
    route = respx.post(BOOKINGS_URL).mock(return_value=Response(201, json={"_id": "b1"}))

    await client.post("/bookings", json=_submission(session_id="s4"), headers=AUTH)
    again = await client.post("/bookings", json=_submission(session_id="s4"), headers=AUTH)
    assert again.status_code == 409
    assert again.json()["status"] == "closed"
    assert route.call_count == 1

    reset = await client.post("/bookings/sessions/s4/reset")
    assert reset.json()["state"] == "idle"


@respx.mock
async def test_session_for_other_room(client):
    _mock_room()
    respx.post(BOOKINGS_URL).mock(return_value=Response(409, json={"error": "nope"}))
    await client.post("/bookings", json=_submission(session_id="s5"), headers=AUTH)

    resp = await client.post("/bookings", json=_submission(session_id="s5", room_id="r2"), headers=AUTH)
    assert resp.status_code == 409


@respx.mock
async def test_login_after_anonymous_attempt_on_same_session(client):
    room_route = _mock_room()
    route = respx.post(BOOKINGS_URL).mock(return_value=Response(201, json={"_id": "b1"}))

    first = await client.post("/bookings", json=_submission(session_id="s6", identity=None))
    assert first.status_code == 422
    assert first.json()["message"] == "Please log in to book a room"

    second = await client.post("/bookings", json=_submission(session_id="s6"), headers=AUTH)

    assert second.status_code == 201
    assert second.json()["booking"]["id"] == "b1"
    assert route.calls.last.request.headers["Authorization"] == "Bearer tok-123"
    assert room_route.call_count == 1


@respx.mock
async def test_concurrent_first_submissions_share_session(client, monkeypatch):
    from app.main import app

    _mock_room()
    route = respx.post(BOOKINGS_URL).mock(return_value=Response(201, json={"_id": "b1"}))

    catalog = app.state.catalog_service
    load_room = catalog.get_by_id
    loading = 0
    both_loading = asyncio.Event()

    async def _get_by_id(room_id):
        nonlocal loading
        loading += 1
        if loading == 2:
            both_loading.set()
        await both_loading.wait()
        return await load_room(room_id)

    monkeypatch.setattr(catalog, "get_by_id", _get_by_id)

    first, second = await asyncio.gather(
        client.post("/bookings", json=_submission(session_id="s7"), headers=AUTH),
        client.post("/bookings", json=_submission(session_id="s7"), headers=AUTH),
    )

    assert sorted([first.status_code, second.status_code]) == [201, 409]
    assert route.call_count == 1
    status = await client.get("/bookings/sessions/s7")
    assert status.json()["state"] == "succeeded"


@respx.mock
async def test_booking_room_not_found(client):
    respx.get("http://api.test/api/rooms/gone").mock(return_value=Response(404))
    resp = await client.post("/bookings", json=_submission(room_id="gone"), headers=AUTH)
    assert resp.status_code == 404


async def test_unknown_session(client):
    resp = await client.get("/bookings/sessions/nope")
    assert resp.status_code == 404
