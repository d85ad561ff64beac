def _create(client, admin, **fields):
    r = client.post("/instructions", json=fields, headers=admin)
    assert r.status_code == 201, r.text
    return r.json()


def test_instructions_are_admin_only(client, curator):
    assert client.get("/instructions", headers=curator).status_code == 403
    assert client.post("/instructions", json={"url_pattern": "x"}, headers=curator).status_code == 403


def test_create_and_list_by_priority(client, admin):
    low = _create(client, admin, url_pattern=r"example\.org", priority=1)
    high = _create(client, admin, url_pattern=r"eventbrite\.com", priority=10, use_playwright=True,
                   instructions_text="Dates are in the sidebar")
    assert high["is_active"] is True
    assert high["use_playwright"] is True

    body = client.get("/instructions", headers=admin).json()
    assert [i["id"] for i in body["instructions"]] == [high["id"], low["id"]]


def test_blank_pattern_rejected(client, admin):
    r = client.post("/instructions", json={"url_pattern": "   "}, headers=admin)
    assert r.status_code == 400


def test_update_toggle_and_delete(client, admin):
    created = _create(client, admin, url_pattern=r"meetup\.com")

    r = client.patch(f"/instructions/{created['id']}", json={"priority": 5, "instructions_text": "Use the RSVP box"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["priority"] == 5
    assert r.json()["instructions_text"] == "Use the RSVP box"

    assert client.patch(f"/instructions/{created['id']}", json={"priority": None}, headers=admin).status_code == 400
    assert client.patch(f"/instructions/{created['id']}", json={"url_pattern": ""}, headers=admin).status_code == 400

    r = client.post(f"/instructions/{created['id']}/active", json={"is_active": False}, headers=admin)
    assert r.json()["is_active"] is False

    assert client.delete(f"/instructions/{created['id']}", headers=admin).status_code == 200
    assert client.delete(f"/instructions/{created['id']}", headers=admin).status_code == 404
    assert client.patch("/instructions/missing", json={"priority": 1}, headers=admin).status_code == 404


def test_pattern_test_endpoint(client, admin):
    r = client.post(
        "/instructions/test",
        json={"url_pattern": "*.eventbrite.com/*", "url": "https://www.eventbrite.com/e/123"},
        headers=admin,
    )
    assert r.status_code == 200
    assert r.json()["matches"] is True
    assert r.json()["pattern_type"] == "wildcard"

    created = _create(client, admin, url_pattern=r"meetup\.com/.+/events/\d+")
    r = client.post(
        "/instructions/test",
        json={"instruction_id": created["id"], "url": "https://www.meetup.com/group/events/99"},
        headers=admin,
    )
    assert r.json() == {
        "url": "https://www.meetup.com/group/events/99",
        "url_pattern": r"meetup\.com/.+/events/\d+",
        "pattern_type": "regex",
        "matches": True,
    }

    r = client.post("/instructions/test", json={"url_pattern": r"meetup\.com", "url": "https://example.org"}, headers=admin)
    assert r.json()["matches"] is False

    assert client.post("/instructions/test", json={"url": "https://example.org"}, headers=admin).status_code == 422
