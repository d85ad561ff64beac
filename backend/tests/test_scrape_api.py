import pytest
from sqlalchemy.exc import OperationalError

from app.models.custom_instruction import CustomInstruction
from app.models.scrape_log import ScrapeLog
from app.services.scraping.types import ExtractedEvent, PageContent

URL = "https://www.eventbrite.com/e/jazz-night-123"


@pytest.fixture
def fake_pipeline(monkeypatch):
    """Replace page fetch and model call; records what the scraper asked for."""
    calls = {}
    result = {"event": ExtractedEvent(
        title="Jazz Night",
        description="Live trio",
        start_datetime="2026-11-01T19:00:00-07:00",
        location="Blue Note, 1 Main St",
    )}

    async def fake_fetch(url, *, use_playwright=False):
        calls["url"] = url
        calls["use_playwright"] = use_playwright
        return PageContent(url=url, title="Jazz Night", text="Jazz Night at the Blue Note")

    async def fake_extract(page, guidance=None):
        calls["guidance"] = guidance
        outcome = result["event"]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr("app.services.scrape_service.fetch_page_content", fake_fetch)
    monkeypatch.setattr("app.services.scrape_service.extract_event", fake_extract)
    return calls, result


def test_scrape_requires_auth_and_role(client, basic, fake_pipeline):
    r = client.post("/scrape", json={"url": URL})
    assert r.status_code == 401
    assert r.json() == {"error": "Missing Authorization header"}

    r = client.post("/scrape", json={"url": URL}, headers=basic)
    assert r.status_code == 403
    assert r.json()["error"] == "Insufficient permissions"


def test_scrape_requires_url(client, submitter, fake_pipeline):
    for body in ({}, {"url": ""}, {"url": "   "}):
        r = client.post("/scrape", json=body, headers=submitter)
        assert r.status_code == 400
        assert r.json() == {"error": "URL is required"}
    assert client.post("/scrape", headers=submitter).status_code == 400
    assert client.post("/scrape", json={"url": "ftp://example.org/x"}, headers=submitter).status_code == 400


def test_successful_scrape_returns_data_and_logs_once(client, db, submitter, fake_pipeline):
    r = client.post("/scrape", json={"url": URL}, headers=submitter)
    assert r.status_code == 200
    body = r.json()
    assert body["data"] == {
        "title": "Jazz Night",
        "description": "Live trio",
        "start_datetime": "2026-11-01T19:00:00-07:00",
        "end_datetime": None,
        "location": "Blue Note, 1 Main St",
    }

    db.expire_all()
    logs = db.query(ScrapeLog).all()
    assert len(logs) == 1
    log = logs[0]
    assert log.id == body["scrape_log_id"]
    assert log.requested_by_user_id == "submitter-1"
    assert log.url_scraped == URL
    assert log.error_message is None
    assert log.parsed_event_data["title"] == "Jazz Night"
    assert log.raw_llm_response is not None
    assert log.custom_instruction_id_used is None
    assert log.playwright_flag_used is False
    assert log.is_reported_bad is False


def test_matched_instruction_drives_fetch_and_is_logged(client, db, submitter, fake_pipeline):
    calls, _ = fake_pipeline
    db.add_all([
        CustomInstruction(id="generic", url_pattern=r"eventbrite\.com", priority=1, instructions_text="generic"),
        CustomInstruction(id="specific", url_pattern="*eventbrite.com/e/*", priority=5,
                          instructions_text="Date is in the hero banner", use_playwright=True),
        CustomInstruction(id="disabled", url_pattern=r"eventbrite", priority=99, is_active=False),
    ])
    db.commit()

    r = client.post("/scrape", json={"url": URL}, headers=submitter)
    assert r.status_code == 200
    assert calls["use_playwright"] is True
    assert calls["guidance"] == "Date is in the hero banner"

    db.expire_all()
    log = db.get(ScrapeLog, r.json()["scrape_log_id"])
    assert log.custom_instruction_id_used == "specific"
    assert log.playwright_flag_used is True


def test_failed_scrape_returns_500_with_log_id(client, db, curator, fake_pipeline):
    _, result = fake_pipeline
    result["event"] = RuntimeError("429 RESOURCE_EXHAUSTED")

    r = client.post("/scrape", json={"url": URL}, headers=curator)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Failed to scrape event details"
    assert "quota" in body["details"].lower()

    db.expire_all()
    log = db.get(ScrapeLog, body["scrape_log_id"])
    assert log.parsed_event_data is None
    assert log.error_message == body["details"]
    assert db.query(ScrapeLog).count() == 1


def test_empty_extraction_is_a_failure(client, db, submitter, fake_pipeline):
    _, result = fake_pipeline
    result["event"] = ExtractedEvent(title="  ")

    r = client.post("/scrape", json={"url": URL}, headers=submitter)
    assert r.status_code == 500
    assert r.json()["details"] == "No event details found"

    db.expire_all()
    log = db.get(ScrapeLog, r.json()["scrape_log_id"])
    assert log.raw_llm_response == {
        "title": None, "description": None, "start_datetime": None, "end_datetime": None, "location": None,
    }


def test_every_attempt_writes_one_log(client, db, submitter, fake_pipeline):
    _, result = fake_pipeline
    client.post("/scrape", json={"url": URL}, headers=submitter)
    result["event"] = ValueError("boom")
    client.post("/scrape", json={"url": URL}, headers=submitter)
    client.post("/scrape", json={"url": ""}, headers=submitter)

    db.expire_all()
    assert db.query(ScrapeLog).count() == 2


def test_log_write_failure(client, submitter, fake_pipeline, monkeypatch):
    def broken_commit(self):
        raise OperationalError("INSERT INTO scrape_logs", {}, Exception("disk I/O error"))

    monkeypatch.setattr("sqlalchemy.orm.Session.commit", broken_commit)
    r = client.post("/scrape", json={"url": URL}, headers=submitter)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Failed to log scrape attempt"
    assert "disk I/O error" in body["details"]
    assert "scrape_log_id" not in body


def test_scrape_logs_review_and_report_bad(client, db, submitter, curator, make_user, fake_pipeline):
    log_id = client.post("/scrape", json={"url": URL}, headers=submitter).json()["scrape_log_id"]
    stranger = make_user("stranger-1", "submitter")

    assert client.get("/scrape-logs", headers=submitter).status_code == 403
    listing = client.get("/scrape-logs", headers=curator).json()
    assert listing["count"] == 1
    assert listing["logs"][0]["url_scraped"] == URL

    assert client.get(f"/scrape-logs/{log_id}", headers=submitter).status_code == 200
    assert client.get(f"/scrape-logs/{log_id}", headers=stranger).status_code == 404
    assert client.post(f"/scrape-logs/{log_id}/report-bad", headers=stranger).status_code == 404

    r = client.post(f"/scrape-logs/{log_id}/report-bad", headers=submitter)
    assert r.json() == {"ok": True, "id": log_id, "is_reported_bad": True}

    reported = client.get("/scrape-logs", params={"reported_bad": True}, headers=curator).json()
    assert [log["id"] for log in reported["logs"]] == [log_id]
    assert client.get("/scrape-logs", params={"reported_bad": False}, headers=curator).json()["count"] == 0


def test_non_string_url_is_a_400(client, db, submitter, fake_pipeline):
    for body in ({"url": 123}, {"url": ["https://example.org"]}):
        r = client.post("/scrape", json=body, headers=submitter)
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid URL", "details": "url must be a string"}
    db.expire_all()
    assert db.query(ScrapeLog).count() == 0
