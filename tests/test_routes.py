"""Endpoint tests for dish views, restaurants, community actions and profiles."""

import uuid
from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from conftest import SERVICE_HEADERS, add_dish, add_restaurant
from safebyte.database import get_db
from safebyte.main import app

USER = str(uuid.uuid4())
USER_HEADERS = {"X-User-ID": USER}


async def test_health(client):
    resp = await client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_ready_reports_db(client):
    resp = await client.get("/ready")

    assert resp.status_code == 200
    assert resp.json() == {"db": "ok"}


# ── Dish views ───────────────────────────────────────────────────────────────


async def test_trending_filters_by_query_allergies(client, db):
    r = await add_restaurant(db, "Thai Place")
    await add_dish(db, r, "Satay", allergens=["Peanuts"], trending_score=9)
    await add_dish(db, r, "Pho", trending_score=3, safety_score=80)

    resp = await client.get("/dishes/trending", params={"allergies": ["peanuts"]})

    assert resp.status_code == 200
    dishes = resp.json()["dishes"]
    assert [d["name"] for d in dishes] == ["Pho"]
    assert dishes[0]["restaurantName"] == "Thai Place"
    assert dishes[0]["safetyScore"] == 80
    assert dishes[0]["safetyBadge"] == "caution"


async def test_dish_views_fall_back_to_stored_allergies(client, db, profile_store):
    r = await add_restaurant(db, "Thai Place")
    await add_dish(db, r, "Satay", allergens=["peanuts"])
    await add_dish(db, r, "Pho")
    profile_store.add_allergy("Peanuts", "severe")

    resp = await client.get("/dishes/trending")

    assert [d["name"] for d in resp.json()["dishes"]] == ["Pho"]


async def test_search_endpoint(client, db):
    r = await add_restaurant(db, "Cafe")
    await add_dish(db, r, "Falafel Wrap", ingredients=["chickpeas", "tahini"])
    await add_dish(db, r, "Hummus", description="Chickpea dip")

    resp = await client.get("/dishes/search", params={"q": "chickpea"})

    assert resp.status_code == 200
    assert {d["name"] for d in resp.json()["dishes"]} == {"Falafel Wrap", "Hummus"}


async def test_blank_search_is_a_client_error(client):
    resp = await client.get("/dishes/search", params={"q": "  "})

    assert resp.status_code == 400
    assert "error" in resp.json()


async def test_query_failure_is_503_not_empty_list(client):
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

    async def _broken_db():
        yield session

    app.dependency_overrides[get_db] = _broken_db
    resp = await client.get("/dishes/trending", params={"allergies": ["soy"]})

    assert resp.status_code == 503
    assert "error" in resp.json()
    assert resp.headers["X-Error-Code"] == "QUERY_FAILED"


async def test_restaurant_list_and_menu(client, db):
    b = await add_restaurant(db, "Bistro")
    await add_restaurant(db, "Amber")
    await add_dish(db, b, "Soup", safety_score=70)
    await add_dish(db, b, "Salad", safety_score=95)

    listing = await client.get("/restaurants")
    assert [r["name"] for r in listing.json()] == ["Amber", "Bistro"]

    menu = await client.get(f"/restaurants/{b.id}/menu")
    assert [d["name"] for d in menu.json()["dishes"]] == ["Salad", "Soup"]


async def test_unknown_restaurant_menu_is_404(client):
    resp = await client.get(f"/restaurants/{uuid.uuid4()}/menu")

    assert resp.status_code == 404


async def test_map_endpoint(client, db):
    r = await add_restaurant(db, "Pier 9", safety_rating=88, latitude=37.8, longitude=-122.4)
    for i in range(5):
        await add_dish(db, r, f"Fish {i}", safety_score=80 + i)

    resp = await client.get("/map", params={"lat": 40.7, "lng": -74.0})

    body = resp.json()
    assert body["center"] == {"lat": 40.7, "lng": -74.0}
    assert len(body["restaurants"][0]["topDishes"]) == 3
    assert body["restaurants"][0]["topDishes"][0]["name"] == "Fish 4"


# ── Community ────────────────────────────────────────────────────────────────


async def test_feedback_increments_counters(client, db):
    r = await add_restaurant(db, "Cafe")
    dish = await add_dish(db, r, "Toast")

    await client.post(f"/dishes/{dish.id}/feedback", json={"type": "safe"}, headers=USER_HEADERS)
    resp = await client.post(f"/dishes/{dish.id}/feedback", json={"type": "issue"}, headers=USER_HEADERS)

    assert resp.status_code == 201
    assert resp.json()["community_safe_count"] == 1
    assert resp.json()["community_issue_count"] == 1


async def test_feedback_validation(client, db):
    r = await add_restaurant(db, "Cafe")
    dish = await add_dish(db, r, "Toast")

    bad_type = await client.post(f"/dishes/{dish.id}/feedback", json={"type": "meh"}, headers=USER_HEADERS)
    bad_user = await client.post(f"/dishes/{dish.id}/feedback", json={"type": "safe"}, headers={"X-User-ID": "nope"})
    missing = await client.post(f"/dishes/{uuid.uuid4()}/feedback", json={"type": "safe"}, headers=USER_HEADERS)

    assert bad_type.status_code == 422
    assert bad_user.status_code == 400
    assert bad_user.headers["X-Error-Code"] == "MISSING_USER_ID"
    assert missing.status_code == 404


async def test_save_and_unsave_dish(client, db):
    r = await add_restaurant(db, "Cafe")
    dish = await add_dish(db, r, "Toast")

    assert (await client.post(f"/saved/{dish.id}", headers=USER_HEADERS)).json()["saved"] is True
    await client.post(f"/saved/{dish.id}", headers=USER_HEADERS)
    saved = await client.get("/saved", headers=USER_HEADERS)
    assert [d["name"] for d in saved.json()["dishes"]] == ["Toast"]

    other_user = await client.get("/saved", headers={"X-User-ID": str(uuid.uuid4())})
    assert other_user.json()["dishes"] == []

    assert (await client.delete(f"/saved/{dish.id}", headers=USER_HEADERS)).json()["saved"] is False
    assert (await client.get("/saved", headers=USER_HEADERS)).json()["dishes"] == []


# ── Local profile ────────────────────────────────────────────────────────────


async def test_profile_editing_flow(client):
    await client.post("/profile/allergies", json={"allergy": "Peanuts", "severity": "severe"})
    await client.post("/profile/allergies", json={"allergy": "Soy"})
    await client.post("/profile/diet-tags", json={"tag": "Vegan"})
    await client.put("/profile/allergies/Soy/severity/mild")
    resp = await client.put("/profile", json={"notes": "Carries EpiPen", "isComplete": True})

    assert resp.json() == {
        "allergies": ["Peanuts", "Soy"],
        "severityLevels": {"Peanuts": "severe", "Soy": "mild"},
        "dietTags": ["Vegan"],
        "notes": "Carries EpiPen",
        "isComplete": True,
    }


async def test_removing_unknown_allergy_is_noop(client):
    await client.post("/profile/allergies", json={"allergy": "Fish"})

    resp = await client.delete("/profile/allergies/Shellfish")

    assert resp.status_code == 200
    assert resp.json()["allergies"] == ["Fish"]


async def test_severity_for_unknown_allergy_is_404(client):
    resp = await client.put("/profile/allergies/Fish/severity/mild")

    assert resp.status_code == 404


async def test_profile_reset(client):
    await client.post("/profile/allergies", json={"allergy": "Fish"})

    resp = await client.delete("/profile")

    assert resp.json()["allergies"] == []


async def test_profile_options(client):
    body = (await client.get("/profile/options")).json()

    assert "Peanuts" in body["allergens"]
    assert "Vegan" in body["dietTags"]
    assert set(body["severityLevels"]) == {"mild", "moderate", "severe"}


# ── Remote profile mirror ────────────────────────────────────────────────────


async def test_remote_profile_upsert_and_read(client):
    uid = str(uuid.uuid4())
    body = {"email": "a@example.com", "allergies": ["Soy"], "severityLevels": {"Soy": "mild"}, "dietTags": []}

    created = await client.put(f"/profiles/{uid}", json=body, headers=SERVICE_HEADERS)
    updated = await client.put(f"/profiles/{uid}", json={**body, "notes": "hi"}, headers=SERVICE_HEADERS)
    read = await client.get(f"/profiles/{uid}", headers=SERVICE_HEADERS)

    assert created.status_code == 201
    assert updated.status_code == 200
    assert read.json()["notes"] == "hi"
    assert read.json()["severityLevels"] == {"Soy": "mild"}


async def test_remote_profile_requires_token_and_existence(client):
    uid = str(uuid.uuid4())

    assert (await client.get(f"/profiles/{uid}", headers={"X-Service-Token": "bad"})).status_code == 401
    missing = await client.get(f"/profiles/{uid}", headers=SERVICE_HEADERS)
    assert missing.status_code == 404
    assert missing.headers["X-Error-Code"] == "USER_NOT_FOUND"


async def test_sync_then_pull_round_trip(client, profile_store):
    profile_store.add_allergy("Sesame", "severe")
    profile_store.add_diet_tag("Halal")

    synced = await client.post("/profile/sync", headers={**USER_HEADERS, "X-User-Email": "u@example.com"})
    assert synced.status_code == 200
    assert synced.json()["allergies"] == ["Sesame"]
    assert synced.json()["email"] == "u@example.com"

    profile_store.reset()
    pulled = await client.post("/profile/pull", headers=USER_HEADERS)

    assert pulled.json()["allergies"] == ["Sesame"]
    assert pulled.json()["severityLevels"] == {"Sesame": "severe"}
    assert profile_store.profile.diet_tags == ["Halal"]
