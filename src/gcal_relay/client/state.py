"""Client application state and its transitions.

The state is one of three variants: ``Loading`` while a stored session is
being checked, ``SignedOut``, and ``SignedIn`` which carries everything the
signed-in view renders. ``reduce`` is the only way to move between them.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple, Union

from gcal_relay.auth.session import Session
from gcal_relay.calendar.models import CalendarEvent, EventDraft


@dataclass(frozen=True)
class Loading:
    status = 'loading'


@dataclass(frozen=True)
class SignedOut:
    status = 'signed_out'


@dataclass(frozen=True)
class SignedIn:
    session: Session
    events: Tuple[CalendarEvent, ...] = ()
    draft: EventDraft = field(default_factory=EventDraft)
    modal_open: bool = False

    status = 'signed_in'


AppState = Union[Loading, SignedOut, SignedIn]


@dataclass(frozen=True)
class SessionRestored:
    session: Session


@dataclass(frozen=True)
class SessionInvalid:
    pass


@dataclass(frozen=True)
class LoginSucceeded:
    session: Session


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class EventsLoaded:
    events: Tuple[CalendarEvent, ...]


@dataclass(frozen=True)
class DraftEdited:
    field: str
    value: str


@dataclass(frozen=True)
class ModalOpened:
    pass


@dataclass(frozen=True)
class ModalClosed:
    pass


@dataclass(frozen=True)
class EventSubmitted:
    pass


Action = Union[
    SessionRestored,
    SessionInvalid,
    LoginSucceeded,
    LoggedOut,
    EventsLoaded,
    DraftEdited,
    ModalOpened,
    ModalClosed,
    EventSubmitted,
]


def reduce(state: AppState, action: Action) -> AppState:
    """Return the state that follows ``action``.

    Actions that do not apply to the current variant leave it unchanged.
    """
    if isinstance(state, Loading):
        if isinstance(action, SessionRestored):
            return SignedIn(session=action.session)
        if isinstance(action, SessionInvalid):
            return SignedOut()
        return state

    if isinstance(state, SignedOut):
        if isinstance(action, LoginSucceeded):
            return SignedIn(session=action.session)
        return state

    if isinstance(action, (LoggedOut, SessionInvalid)):
        return SignedOut()
    if isinstance(action, EventsLoaded):
        return replace(state, events=tuple(action.events))
    if isinstance(action, DraftEdited):
        if action.field not in EventDraft.FIELDS:
            raise ValueError(f'Unknown draft field: {action.field!r}')
        return replace(state, draft=replace(state.draft, **{action.field: action.value}))
    if isinstance(action, ModalOpened):
        return replace(state, modal_open=True)
    if isinstance(action, ModalClosed):
        return replace(state, modal_open=False)
    if isinstance(action, EventSubmitted):
        return replace(state, draft=EventDraft(), modal_open=False)
    return state


def state_to_dict(state: AppState) -> Dict[str, Any]:
    if isinstance(state, SignedIn):
        return {
            'status': state.status,
            'session': state.session.to_dict(),
            'events': [event.to_dict() for event in state.events],
            'draft': state.draft.to_dict(),
            'modal_open': state.modal_open,
        }
    return {'status': state.status}
