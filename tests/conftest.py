"""
Pytest configuration and shared fixtures.
"""

import pytest

from gcal_relay.api import app
from gcal_relay.auth.session import SessionStore, SessionValidator
from gcal_relay.calendar.models import CalendarEvent
from gcal_relay.client.controller import AppController


class FakeRelay:
    """In-memory stand-in for RelayClient that records every call."""

    def __init__(self, user=None, events=None):
        self.user = user or {"name": "Ada Lovelace", "email": "ada@example.com"}
        self.events = list(events or [])
        self.calls = []
        self.created = []
        self.failures = {}

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.failures:
            raise self.failures[name]

    def verify_identity(self, token):
        self._record("verify_identity", token)
        return dict(self.user)

    def list_events(self, token):
        self._record("list_events", token)
        return list(self.events)

    def create_event(self, token, summary, description, start, end):
        self._record("create_event", token, summary, description, start, end)
        self.created.append(
            {"summary": summary, "description": description, "start": start, "end": end}
        )
        self.events.append(
            CalendarEvent(name=summary, date=start.strftime("%Y-%m-%d"), time=start.strftime("%H:%M"))
        )
        return {"id": f"evt{len(self.created)}", "summary": summary}


class StaticValidator(SessionValidator):
    def __init__(self, valid=True):
        self.valid = valid
        self.checked = []

    def is_valid(self, token):
        self.checked.append(token)
        return self.valid


@pytest.fixture
def relay():
    return FakeRelay()


@pytest.fixture
def store(tmp_path):
    return SessionStore(tmp_path / "tokens" / "session.json")


@pytest.fixture
def validator():
    return StaticValidator(valid=True)


@pytest.fixture
def notices():
    return []


@pytest.fixture
def controller(relay, store, validator, notices):
    return AppController(
        relay=relay,
        store=store,
        validator=validator,
        authorize=lambda: "token-123",
        notify=lambda level, message: notices.append((level, message)),
    )


@pytest.fixture(autouse=True)
def _reset_dependency_overrides():
    yield
    app.dependency_overrides.clear()
