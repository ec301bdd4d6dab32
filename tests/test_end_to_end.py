"""Controller -> RelayClient -> relay app -> in-memory calendar, with only Google faked."""

from unittest.mock import patch

import pytest
import requests
from fastapi import Depends
from fastapi.testclient import TestClient

from gcal_relay.api import app, get_bearer_token, get_gcal_client
from gcal_relay.calendar.gcal import utc_isoformat
from gcal_relay.client.controller import AppController
from gcal_relay.client.relay_client import RelayClient
from gcal_relay.client.state import SignedIn, SignedOut


class InMemoryCalendar:
    """Stores inserted events and lists them back in Google's resource shape."""

    def __init__(self):
        self.items = []
        self.tokens = []

    def list_upcoming(self):
        return sorted(self.items, key=lambda item: item["start"]["dateTime"])

    def create_event(self, summary, description, start, end):
        event = {
            "id": f"evt{len(self.items) + 1}",
            "summary": summary,
            "description": description,
            "start": {"dateTime": utc_isoformat(start), "timeZone": "UTC"},
            "end": {"dateTime": utc_isoformat(end), "timeZone": "UTC"},
        }
        self.items.append(event)
        return event


class ClientSessionAdapter:
    """Presents a TestClient through the slice of requests.Session RelayClient uses."""

    def __init__(self, client):
        self.client = client

    def request(self, method, url, headers=None, json=None, timeout=None):
        resp = self.client.request(method, url, headers=headers, json=json)
        adapted = requests.Response()
        adapted.status_code = resp.status_code
        adapted.reason = resp.reason_phrase
        adapted._content = resp.content
        adapted.encoding = "utf-8"
        return adapted


@pytest.fixture
def calendar():
    fake = InMemoryCalendar()

    def _override(token: str = Depends(get_bearer_token)):
        fake.tokens.append(token)
        return fake

    app.dependency_overrides[get_gcal_client] = _override
    return fake


@pytest.fixture
def e2e_controller(calendar, store, validator, notices):
    relay = RelayClient("http://testserver", session=ClientSessionAdapter(TestClient(app)))
    return AppController(
        relay=relay,
        store=store,
        validator=validator,
        authorize=lambda: "google-token",
        notify=lambda level, message: notices.append((level, message)),
    )


def test_login_create_and_list(e2e_controller, calendar, store, notices):
    with patch("gcal_relay.api.IdentityClient") as identity_cls:
        identity_cls.return_value.get_user.return_value = {"name": "Ada Lovelace", "email": "ada@example.com"}
        e2e_controller.initialize()
        e2e_controller.login()

    assert isinstance(e2e_controller.state, SignedIn)
    assert e2e_controller.state.events == ()

    e2e_controller.open_form()
    e2e_controller.edit_draft("name", "Standup")
    e2e_controller.edit_draft("date", "2024-01-10")
    e2e_controller.edit_draft("time", "09:00")
    state = e2e_controller.submit_event()

    assert [event.to_dict() for event in state.events] == [
        {"name": "Standup", "date": "2024-01-10", "time": "09:00"}
    ]
    assert calendar.items[0]["end"]["dateTime"] == "2024-01-10T10:00:00Z"
    assert set(calendar.tokens) == {"google-token"}
    assert notices[-1] == ("success", "Event created successfully!")

    e2e_controller.logout()
    assert isinstance(e2e_controller.state, SignedOut)
    assert store.load() is None


def test_relay_rejection_surfaces_as_notice(e2e_controller, calendar, notices):
    with patch("gcal_relay.api.IdentityClient") as identity_cls:
        identity_cls.return_value.get_user.return_value = None
        e2e_controller.initialize()
        e2e_controller.login()

    assert isinstance(e2e_controller.state, SignedOut)
    assert notices == [("error", "An error occurred during authentication.")]
