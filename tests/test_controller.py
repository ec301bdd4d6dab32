"""Tests for AppController session and event flows."""

from datetime import datetime, timezone

import pytest

from gcal_relay.auth.session import Session
from gcal_relay.calendar.models import CalendarEvent, EventDraft
from gcal_relay.client.controller import EVENT_DESCRIPTION, event_window
from gcal_relay.client.state import Loading, SignedIn, SignedOut
from gcal_relay.exceptions import RelayError


def _fill(controller, name="Standup", date="2024-01-10", time="09:00"):
    controller.open_form()
    controller.edit_draft("name", name)
    controller.edit_draft("date", date)
    controller.edit_draft("time", time)


class TestEventWindow:
    def test_end_is_exactly_one_hour_after_start(self):
        start, end = event_window(EventDraft(name="x", date="2024-01-10", time="09:00"))
        assert start == datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
        assert (end - start).total_seconds() == 3600

    def test_crosses_midnight(self):
        start, end = event_window(EventDraft(name="x", date="2024-12-31", time="23:30"))
        assert end == datetime(2025, 1, 1, 0, 30, tzinfo=timezone.utc)

    def test_rejects_bad_input(self):
        with pytest.raises(ValueError):
            event_window(EventDraft(name="x", date="10/01/2024", time="9am"))


class TestInitialize:
    def test_starts_loading(self, controller):
        assert isinstance(controller.state, Loading)

    def test_no_stored_session(self, controller, validator, notices):
        state = controller.initialize()
        assert isinstance(state, SignedOut)
        assert validator.checked == []
        assert notices == []

    def test_restores_valid_session_and_fetches_events(self, controller, store, relay):
        relay.events = [CalendarEvent("Standup", "2024-01-10", "09:00")]
        store.save(Session(access_token="saved", user={"name": "Ada"}))

        state = controller.initialize()

        assert isinstance(state, SignedIn)
        assert state.session.access_token == "saved"
        assert state.events == (CalendarEvent("Standup", "2024-01-10", "09:00"),)
        assert relay.calls == [("list_events", "saved")]

    def test_invalid_session_is_cleared_silently(self, controller, store, validator, notices):
        validator.valid = False
        store.save(Session(access_token="stale", user={"name": "Ada"}))

        state = controller.initialize()

        assert isinstance(state, SignedOut)
        assert validator.checked == ["stale"]
        assert store.load() is None
        assert notices == []

    def test_unwritable_store_still_signs_out(self, controller, store, validator, monkeypatch):
        validator.valid = False
        store.save(Session(access_token="stale", user={"name": "Ada"}))

        def _read_only():
            raise PermissionError("read-only file system")

        monkeypatch.setattr(store, "clear", _read_only)
        state = controller.initialize()

        assert isinstance(state, SignedOut)
        assert isinstance(controller.state, SignedOut)


class TestLogin:
    def test_successful_login(self, controller, store, relay, notices):
        controller.initialize()
        state = controller.login()

        assert isinstance(state, SignedIn)
        assert state.session.user["name"] == "Ada Lovelace"
        assert store.load() == Session(access_token="token-123", user=relay.user)
        assert [call[0] for call in relay.calls] == ["verify_identity", "list_events"]
        assert notices[-1] == ("success", "Successfully logged in!")

    def test_authorizer_failure(self, controller, store, notices):
        controller.initialize()

        def _fail():
            raise RuntimeError("user closed the consent screen")

        controller.authorize = _fail
        state = controller.login()

        assert isinstance(state, SignedOut)
        assert store.load() is None
        assert notices == [("error", "Login failed. Please try again.")]

    def test_relay_failure_leaves_state_unchanged(self, controller, store, relay, notices):
        controller.initialize()
        relay.failures["verify_identity"] = RelayError("Server error", status_code=500)

        state = controller.login()

        assert isinstance(state, SignedOut)
        assert store.load() is None
        assert notices == [("error", "An error occurred during authentication.")]

    def test_listeners_see_each_transition(self, controller):
        seen = []
        controller.subscribe(lambda state: seen.append(type(state).__name__))
        controller.initialize()
        controller.login()
        assert seen[:2] == ["SignedOut", "SignedIn"]


class TestLogout:
    def test_clears_state_and_storage(self, controller, store, notices):
        controller.initialize()
        controller.login()

        state = controller.logout()

        assert isinstance(state, SignedOut)
        assert store.load() is None
        assert notices[-1] == ("success", "Logged out successfully")

    def test_logout_is_unconditional(self, controller, store):
        controller.initialize()
        assert isinstance(controller.logout(), SignedOut)
        assert store.load() is None


class TestSubmitEvent:
    @pytest.fixture
    def signed_in(self, controller):
        controller.initialize()
        controller.login()
        return controller

    @pytest.mark.parametrize("missing", ["name", "date", "time"])
    def test_empty_field_sends_nothing(self, signed_in, relay, notices, missing):
        _fill(signed_in)
        signed_in.edit_draft(missing, "")
        calls_before = list(relay.calls)

        signed_in.submit_event()

        assert relay.calls == calls_before
        assert notices[-1] == ("error", "Please fill in all event details.")
        assert signed_in.state.modal_open is True

    def test_unparseable_time_sends_nothing(self, signed_in, relay, notices):
        _fill(signed_in, time="9 o'clock")
        signed_in.submit_event()
        assert relay.created == []
        assert notices[-1] == ("error", "Invalid date or time.")

    def test_creates_one_hour_event_and_resets_form(self, signed_in, relay, notices):
        _fill(signed_in)

        state = signed_in.submit_event()

        assert len(relay.created) == 1
        created = relay.created[0]
        assert created["summary"] == "Standup"
        assert created["description"] == EVENT_DESCRIPTION
        assert (created["end"] - created["start"]).total_seconds() == 3600
        assert relay.calls[-1][0] == "list_events"
        assert state.draft == EventDraft()
        assert state.modal_open is False
        assert CalendarEvent("Standup", "2024-01-10", "09:00") in state.events
        assert notices[-1] == ("success", "Event created successfully!")

    def test_relay_failure_keeps_draft(self, signed_in, relay, notices):
        relay.failures["create_event"] = RelayError("Failed to create event", status_code=500)
        _fill(signed_in)

        state = signed_in.submit_event()

        assert state.draft == EventDraft(name="Standup", date="2024-01-10", time="09:00")
        assert state.modal_open is True
        assert notices[-1] == ("error", "Failed to create event")

    def test_signed_out_submission(self, controller, relay, notices):
        controller.initialize()
        controller.submit_event()
        assert relay.calls == []
        assert notices == [("error", "No access token available. Please log in again.")]


class TestRefreshEvents:
    def test_failure_keeps_previous_events(self, controller, relay, notices):
        relay.events = [CalendarEvent("Standup", "2024-01-10", "09:00")]
        controller.initialize()
        controller.login()
        relay.failures["list_events"] = RelayError("Failed to fetch events", status_code=500)

        state = controller.refresh_events()

        assert state.events == (CalendarEvent("Standup", "2024-01-10", "09:00"),)
        assert notices[-1] == ("error", "Failed to fetch events: Failed to fetch events")

    def test_signed_out_is_noop(self, controller, relay):
        controller.initialize()
        controller.refresh_events()
        assert relay.calls == []
