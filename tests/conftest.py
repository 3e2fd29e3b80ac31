# tests/conftest.py
# Shared fixtures: a fresh SQLite database and app per test

import asyncio

import pytest
from fastapi.testclient import TestClient

from sales_tracker_api.app.core.config import settings
from sales_tracker_api.app.core.db import init_db
from sales_tracker_api.app.main import create_app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every test at its own database and static directory."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "sales_tracker_test.db"))
    monkeypatch.setattr(settings, "static_dir", str(tmp_path / "public"))
    monkeypatch.setattr(settings, "webhook_target", "form_submissions")
    # Minimum bcrypt cost keeps the suite fast
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)
    return settings


@pytest.fixture
def db():
    """Migrated database for service-level tests."""
    init_db()


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def other_client(app):
    """Second client with its own cookie jar, sharing the same app."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def run():
    """Run a service coroutine to completion."""
    return asyncio.run


def _register(client, email="rep@example.com", password="s3cret-pass", name="Rep One"):
    response = client.post("/api/register", json={"email": email, "password": password, "name": name})
    assert response.status_code == 200, response.text
    return response.json()["user"]


@pytest.fixture
def register_user():
    """Register (and thereby log in) a user on the given client."""
    return _register


@pytest.fixture
def user(client):
    """A registered and logged-in user on ``client``."""
    return _register(client)


@pytest.fixture
def other_user(other_client):
    """A second registered user, logged in on ``other_client``."""
    return _register(other_client, email="other@example.com", name="Rep Two")


@pytest.fixture
def human_form_payload():
    """Google Form payload keyed by question text."""
    return {
        "Timestamp": "10/1/2025 9:15:00",
        "What is your role?": "Closer",
        "Dials made?": "120",
        "Pick ups?": "30",
        "DQ's?": "4",
        "Appt's Pitched?": "10",
        "Appt's Set?": "6",
        "Hybrid Closer?": "No",
        "Calls Scheduled?": "5",
        "LIVE Calls?": "3",
        "Prospect Email": "lead@example.com",
        "Date Call Was Taken": "2025-10-01",
        "Offer Made": "Yes",
        "Call Outcome": "Closed",
        "Cash Collected\nThe amount of cash collected today (ex 4000, 2000, 1500)": "4000",
        "Revenue Generated\nThe total value of the contract (ex: 4000, 4500)": "4500.50",
        "Call Notes": "Strong fit",
        "Closer Name": "Jamie",
        "Setter Name": "Alex",
        "Fathom Link": "https://fathom.video/call/1",
    }


@pytest.fixture
def camel_form_payload():
    """The same answers as ``human_form_payload`` with camelCase keys."""
    return {
        "timestamp": "10/1/2025 9:15:00",
        "role": "Closer",
        "dials": "120",
        "pickUps": "30",
        "dqs": "4",
        "apptsPitched": "10",
        "apptsSet": "6",
        "hybridCloser": "No",
        "callsScheduled": "5",
        "liveCalls": "3",
        "prospectEmail": "lead@example.com",
        "callDate": "2025-10-01",
        "offerMade": "Yes",
        "callOutcome": "Closed",
        "cashCollected": "4000",
        "revenueGenerated": "4500.50",
        "callNotes": "Strong fit",
        "closerName": "Jamie",
        "setterName": "Alex",
        "fathomLink": "https://fathom.video/call/1",
    }
