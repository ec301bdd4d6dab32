"""Client-side session persistence and token validity checks."""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

import requests

from gcal_relay.exceptions import RelayError

logger = logging.getLogger(__name__)

SESSION_KEY = 'googleAuth'
TOKENINFO_URL = 'https://www.googleapis.com/oauth2/v3/tokeninfo'


@dataclass(frozen=True)
class Session:
    access_token: str
    user: Dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def display_name(self) -> str:
        return self.user.get('name') or self.user.get('email') or ''

    def to_dict(self) -> Dict[str, Any]:
        return {'accessToken': self.access_token, 'user': dict(self.user)}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> Optional["Session"]:
        token = payload.get('accessToken') if isinstance(payload, dict) else None
        if not token:
            return None
        return cls(access_token=token, user=dict(payload.get('user') or {}))


class SessionStore:
    """JSON file holding the session blob under a fixed key."""

    def __init__(self, storage_path: Path, key: str = SESSION_KEY) -> None:
        self.storage_path = Path(storage_path)
        self.key = key
        self._lock = Lock()

    def _read(self) -> Dict[str, Any]:
        if not self.storage_path.exists():
            return {}
        try:
            payload = json.loads(self.storage_path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as exc:
            logger.warning('Ignoring unreadable session file %s: %s', self.storage_path, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write(self, payload: Dict[str, Any]) -> None:
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with self.storage_path.open('w', encoding='utf-8') as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)

    def load(self) -> Optional[Session]:
        with self._lock:
            blob = self._read().get(self.key)
        if blob is None:
            return None
        return Session.from_dict(blob)

    def save(self, session: Session) -> None:
        with self._lock:
            payload = self._read()
            payload[self.key] = session.to_dict()
            self._write(payload)

    def clear(self) -> None:
        with self._lock:
            payload = self._read()
            if self.key not in payload:
                return
            del payload[self.key]
            self._write(payload)


class SessionValidator(ABC):
    """Answers whether a stored access token can still be used."""

    @abstractmethod
    def is_valid(self, token: str) -> bool:
        ...


class TokenInfoValidator(SessionValidator):
    """Asks Google's tokeninfo endpoint directly."""

    def __init__(self, url: str = TOKENINFO_URL, timeout: Optional[float] = None) -> None:
        self.url = url
        self.timeout = timeout

    def is_valid(self, token: str) -> bool:
        if not token:
            return False
        try:
            r = requests.get(self.url, params={'access_token': token}, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning('Token check failed: %s', exc)
            return False
        return r.status_code == 200


class RelayValidator(SessionValidator):
    """Validates through the relay's verify-identity endpoint."""

    def __init__(self, relay: Any) -> None:
        self.relay = relay

    def is_valid(self, token: str) -> bool:
        if not token:
            return False
        try:
            self.relay.verify_identity(token)
        except RelayError as exc:
            logger.info('Relay rejected stored token: %s', exc)
            return False
        return True


def make_validator(settings: Any, relay: Any = None) -> SessionValidator:
    kind = (getattr(settings, 'SESSION_VALIDATOR', None) or 'tokeninfo').lower()
    if kind == 'relay':
        if relay is None:
            raise ValueError('SESSION_VALIDATOR=relay requires a relay client')
        return RelayValidator(relay)
    if kind == 'tokeninfo':
        return TokenInfoValidator(timeout=getattr(settings, 'REQUEST_TIMEOUT_SECONDS', None))
    raise ValueError(f'Unknown SESSION_VALIDATOR: {kind!r}')
