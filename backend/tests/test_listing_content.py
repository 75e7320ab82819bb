"""
Tests for facility, notice and picture endpoints.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import make_lodging

FACILITIES = "/api/v1/facilities/"
NOTICES = "/api/v1/notices/"
PICTURES = "/api/v1/pictures/"


@pytest.mark.asyncio
async def test_facility_is_one_per_lodging(client: AsyncClient, business, lodging_id):
    assert (await client.get(f"{FACILITIES}lodging/{lodging_id}", headers=business.headers)).json() is None

    created = await client.post(FACILITIES, json={
        "lodging_id": lodging_id,
        "service_name": "Parking",
        "service_detail": "20 spaces",
    }, headers=business.headers)
    assert created.status_code == 201
    facility = created.json()
    assert facility["lodging_id"] == lodging_id

    replaced = await client.post(FACILITIES, json={
        "lodging_id": lodging_id,
        "service_name": "Breakfast",
    }, headers=business.headers)
    assert replaced.status_code == 201
    assert replaced.json()["id"] == facility["id"]
    assert replaced.json()["service_detail"] == ""

    updated = await client.put(
        f"{FACILITIES}{facility['id']}", json={"service_detail": "7-10am"}, headers=business.headers
    )
    assert updated.status_code == 200
    assert updated.json()["service_name"] == "Breakfast"
    assert updated.json()["service_detail"] == "7-10am"

    # Path kept for clients of the previous API
    legacy = await client.get(f"{FACILITIES}hotel/{lodging_id}", headers=business.headers)
    assert legacy.json()["service_detail"] == "7-10am"


@pytest.mark.asyncio
async def test_facility_of_foreign_lodging_looks_missing(client: AsyncClient, business, other_business, lodging_id):
    created = await client.post(FACILITIES, json={
        "lodging_id": lodging_id,
        "service_name": "Pool",
    }, headers=business.headers)
    facility_id = created.json()["id"]

    response = await client.get(f"{FACILITIES}lodging/{lodging_id}", headers=other_business.headers)
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "LODGING_NOT_FOUND"

    response = await client.put(
        f"{FACILITIES}{facility_id}", json={"service_name": "Taken"}, headers=other_business.headers
    )
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "FACILITY_NOT_FOUND"

    response = await client.post(FACILITIES, json={
        "lodging_id": lodging_id,
        "service_name": "Taken",
    }, headers=other_business.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_facility_name_length_is_validated(client: AsyncClient, business, lodging_id):
    response = await client.post(FACILITIES, json={
        "lodging_id": lodging_id,
        "service_name": "x" * 51,
    }, headers=business.headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_lodging_with_facility_can_be_deleted(client: AsyncClient, db_session, business):
    lodging_id = await make_lodging(db_session, business.id, name="Empty Inn")
    await client.post(FACILITIES, json={"lodging_id": lodging_id, "service_name": "Wifi"}, headers=business.headers)

    response = await client.delete(f"/api/v1/lodgings/{lodging_id}", headers=business.headers)
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_notice_upsert_read_and_update(client: AsyncClient, business, room_id):
    assert (await client.get(f"{NOTICES}room/{room_id}", headers=business.headers)).json() is None

    created = await client.post(NOTICES, json={
        "room_id": room_id,
        "content": "Pool closed on Mondays",
        "usage_guide": "Quiet hours after 22:00",
    }, headers=business.headers)
    assert created.status_code == 201
    notice = created.json()
    assert notice["introduction"] == ""

    replaced = await client.post(NOTICES, json={"room_id": room_id, "content": "Pool open daily"},
                                 headers=business.headers)
    assert replaced.json()["id"] == notice["id"]
    assert replaced.json()["usage_guide"] == ""

    updated = await client.put(
        f"{NOTICES}{notice['id']}", json={"introduction": "Sea view double"}, headers=business.headers
    )
    assert updated.status_code == 200
    assert updated.json()["content"] == "Pool open daily"
    assert updated.json()["introduction"] == "Sea view double"

    legacy = await client.get(f"{NOTICES}own-hotel/{room_id}", headers=business.headers)
    assert legacy.json()["id"] == notice["id"]


@pytest.mark.asyncio
async def test_notice_of_foreign_room_is_refused(client: AsyncClient, business, other_business, room_id):
    created = await client.post(NOTICES, json={"room_id": room_id, "content": "Mine"}, headers=business.headers)
    notice_id = created.json()["id"]

    for response in (
        await client.get(f"{NOTICES}room/{room_id}", headers=other_business.headers),
        await client.post(NOTICES, json={"room_id": room_id}, headers=other_business.headers),
        await client.put(f"{NOTICES}{notice_id}", json={"content": "Theirs"}, headers=other_business.headers),
    ):
        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "UNAUTHORIZED"

    missing_room = await client.post(NOTICES, json={"room_id": 9999}, headers=business.headers)
    assert missing_room.status_code == 404
    assert missing_room.json()["detail"]["code"] == "ROOM_NOT_FOUND"

    missing = await client.put(f"{NOTICES}9999", json={"content": "x"}, headers=business.headers)
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "NOTICE_NOT_FOUND"


@pytest.mark.asyncio
async def test_notice_fields_are_limited(client: AsyncClient, business, room_id):
    response = await client.post(NOTICES, json={"room_id": room_id, "content": "x" * 101}, headers=business.headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_picture_records(client: AsyncClient, business, room_id):
    ids = []
    for name in ("lobby", "balcony"):
        response = await client.post(PICTURES, json={
            "room_id": room_id,
            "picture_name": name,
            "picture_url": f"https://cdn.example.com/rooms/{room_id}/{name}.jpg",
        }, headers=business.headers)
        assert response.status_code == 201
        ids.append(response.json()["id"])

    listing = (await client.get(f"{PICTURES}room/{room_id}", headers=business.headers)).json()
    assert [p["id"] for p in listing] == list(reversed(ids))
    assert listing[0]["picture_name"] == "balcony"

    deleted = await client.delete(f"{PICTURES}{ids[0]}", headers=business.headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"ok": True, "id": ids[0]}

    legacy = (await client.get(f"{PICTURES}own-hotel/{room_id}", headers=business.headers)).json()
    assert [p["id"] for p in legacy] == [ids[1]]

    gone = await client.delete(f"{PICTURES}{ids[0]}", headers=business.headers)
    assert gone.status_code == 404
    assert gone.json()["detail"]["code"] == "PICTURE_NOT_FOUND"


@pytest.mark.asyncio
async def test_pictures_of_foreign_room_are_refused(client: AsyncClient, business, other_business, guest, room_id):
    created = await client.post(PICTURES, json={
        "room_id": room_id,
        "picture_name": "front",
        "picture_url": "rooms/front.jpg",
    }, headers=business.headers)
    picture_id = created.json()["id"]

    assert (await client.get(f"{PICTURES}room/{room_id}", headers=other_business.headers)).status_code == 403
    assert (await client.delete(f"{PICTURES}{picture_id}", headers=other_business.headers)).status_code == 403
    assert (await client.get(f"{PICTURES}room/{room_id}", headers=guest.headers)).status_code == 403
    assert (await client.get(f"{PICTURES}room/9999", headers=business.headers)).status_code == 404
