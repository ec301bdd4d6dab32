"""Owns the client state and runs the network side of each user action."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Callable, List, Optional, Tuple

from gcal_relay.auth.session import Session, SessionStore, SessionValidator
from gcal_relay.calendar.models import EventDraft
from gcal_relay.client.relay_client import RelayClient
from gcal_relay.client.state import (
    Action,
    AppState,
    DraftEdited,
    EventsLoaded,
    EventSubmitted,
    Loading,
    LoggedOut,
    LoginSucceeded,
    ModalClosed,
    ModalOpened,
    SessionInvalid,
    SessionRestored,
    SignedIn,
    reduce,
)
from gcal_relay.exceptions import RelayError

logger = logging.getLogger(__name__)

EVENT_DURATION = timedelta(hours=1)
EVENT_DESCRIPTION = 'Event created via Calendar App'

Notifier = Callable[[str, str], None]
Listener = Callable[[AppState], None]


def _log_notifier(level: str, message: str) -> None:
    logger.log(logging.ERROR if level == 'error' else logging.INFO, message)


def event_window(draft: EventDraft) -> Tuple[datetime, datetime]:
    """Read the draft's date and time as UTC and return a one-hour window.

    Raises:
        ValueError: if the date or time does not parse
    """
    start = datetime.strptime(f'{draft.date}T{draft.time}', '%Y-%m-%dT%H:%M').replace(tzinfo=timezone.utc)
    return start, start + EVENT_DURATION


class AppController:
    def __init__(
        self,
        relay: RelayClient,
        store: SessionStore,
        validator: SessionValidator,
        authorize: Callable[[], str],
        notify: Optional[Notifier] = None,
    ) -> None:
        self.relay = relay
        self.store = store
        self.validator = validator
        self.authorize = authorize
        self.notify = notify or _log_notifier
        self._state: AppState = Loading()
        self._lock = Lock()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def dispatch(self, action: Action) -> AppState:
        with self._lock:
            self._state = reduce(self._state, action)
            state = self._state
        for listener in list(self._listeners):
            listener(state)
        return state

    def _token(self) -> Optional[str]:
        state = self._state
        if isinstance(state, SignedIn):
            return state.session.access_token
        return None

    # ---- session lifecycle -------------------------------------------------
    def initialize(self) -> AppState:
        """Restore a stored session if its token is still accepted."""
        session = self.store.load()
        if session is not None and self.validator.is_valid(session.access_token):
            logger.info('Restored stored session for %s', session.display_name)
            self.dispatch(SessionRestored(session))
            self.refresh_events()
        else:
            if session is not None:
                logger.info('Stored session rejected; clearing it')
            try:
                self.store.clear()
            except OSError as exc:
                logger.warning('Could not clear stored session: %s', exc)
            self.dispatch(SessionInvalid())
        return self._state

    def login(self) -> AppState:
        try:
            token = self.authorize()
        except Exception as exc:
            logger.warning('OAuth sign-in failed: %s', exc)
            self.notify('error', 'Login failed. Please try again.')
            return self._state
        if not token:
            self.notify('error', 'Login failed. Please try again.')
            return self._state

        try:
            user = self.relay.verify_identity(token)
        except RelayError as exc:
            logger.warning('Relay could not verify token: %s', exc)
            self.notify('error', 'An error occurred during authentication.')
            return self._state

        session = Session(access_token=token, user=user)
        self.store.save(session)
        self.dispatch(LoginSucceeded(session))
        self.refresh_events()
        self.notify('success', 'Successfully logged in!')
        return self._state

    def logout(self) -> AppState:
        self.dispatch(LoggedOut())
        self.store.clear()
        self.notify('success', 'Logged out successfully')
        return self._state

    # ---- events ------------------------------------------------------------
    def refresh_events(self) -> AppState:
        token = self._token()
        if not token:
            return self._state
        try:
            events = self.relay.list_events(token)
        except RelayError as exc:
            self.notify('error', f'Failed to fetch events: {exc.message}')
            return self._state
        return self.dispatch(EventsLoaded(tuple(events)))

    def edit_draft(self, field: str, value: str) -> AppState:
        return self.dispatch(DraftEdited(field, value))

    def open_form(self) -> AppState:
        return self.dispatch(ModalOpened())

    def close_form(self) -> AppState:
        return self.dispatch(ModalClosed())

    def submit_event(self) -> AppState:
        state = self._state
        if not isinstance(state, SignedIn):
            self.notify('error', 'No access token available. Please log in again.')
            return state

        draft = state.draft
        if not draft.is_complete():
            self.notify('error', 'Please fill in all event details.')
            return state
        try:
            start, end = event_window(draft)
        except ValueError:
            self.notify('error', 'Invalid date or time.')
            return state

        token = state.session.access_token
        try:
            self.relay.create_event(token, draft.name, EVENT_DESCRIPTION, start, end)
        except RelayError as exc:
            self.notify('error', exc.message or 'Failed to create event. Please try again.')
            return self._state

        self.refresh_events()
        self.dispatch(EventSubmitted())
        self.notify('success', 'Event created successfully!')
        return self._state
