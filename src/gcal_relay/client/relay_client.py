"""HTTP client for the relay service."""
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

import requests

from gcal_relay.calendar.gcal import utc_isoformat
from gcal_relay.calendar.models import CalendarEvent
from gcal_relay.exceptions import RelayError

logger = logging.getLogger(__name__)


class RelayClient:
    def __init__(self, base_url: str, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = session or requests.Session()

    def _request(self, method: str, path: str, token: Optional[str] = None, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        headers = {'Content-Type': 'application/json'}
        if token:
            headers['Authorization'] = f'Bearer {token}'
        url = self.base_url + path
        try:
            r = self.http.request(method, url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning('%s %s failed: %s', method, path, exc)
            raise RelayError(f'Could not reach relay: {exc}') from exc

        try:
            body = r.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not r.ok or body.get('success') is False:
            message = body.get('message') or r.reason or 'Relay request failed'
            logger.warning('%s %s returned %s: %s', method, path, r.status_code, message)
            raise RelayError(message, status_code=r.status_code)
        return body

    def verify_identity(self, token: str) -> Dict[str, Any]:
        """Register the token with the relay and return the user's profile."""
        body = self._request('POST', '/auth/google', payload={'token': token})
        return body.get('user') or {}

    def list_events(self, token: str) -> List[CalendarEvent]:
        body = self._request('GET', '/auth/calendar/events', token=token)
        return [CalendarEvent.from_dict(item) for item in body.get('events') or []]

    def create_event(self, token: str, summary: str, description: str, start: datetime, end: datetime) -> Dict[str, Any]:
        body = self._request(
            'POST',
            '/auth/calendar/create',
            token=token,
            payload={
                'summary': summary,
                'description': description,
                'startDateTime': utc_isoformat(start),
                'endDateTime': utc_isoformat(end),
            },
        )
        return body.get('event') or {}
