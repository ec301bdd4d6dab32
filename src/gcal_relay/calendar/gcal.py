"""Google Calendar client implementation.

Lists and creates events on the user's primary calendar using the Google Calendar API.
Errors from the API are logged and re-raised so the caller decides how to report them.
"""
from datetime import datetime, timezone
from typing import Dict, Any, Optional, List
import logging

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

PRIMARY_CALENDAR = 'primary'
UPCOMING_LIMIT = 10
EVENT_TIMEZONE = 'UTC'


def utc_isoformat(value: datetime) -> str:
    """Format a datetime as UTC with a trailing ``Z`` and whole seconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0).strftime('%Y-%m-%dT%H:%M:%SZ')


class GCalClient:
    def __init__(self, creds: object = None, service: Any = None):
        self.creds = creds
        self.service = service
        if self.service is None:
            self.service = build('calendar', 'v3', credentials=self.creds, cache_discovery=False)

    def list_upcoming(self, max_results: int = UPCOMING_LIMIT, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Get upcoming events from the primary calendar.

        Args:
            max_results: The maximum number of events to return
            now: Lower bound for event start times, defaults to the current UTC time

        Returns:
            The raw event resources ordered by start time
        """
        time_min = utc_isoformat(now or datetime.now(timezone.utc))
        try:
            events_result = self.service.events().list(
                calendarId=PRIMARY_CALENDAR,
                timeMin=time_min,
                maxResults=max_results,
                singleEvents=True,
                orderBy='startTime',
            ).execute()
        except HttpError as e:
            logger.exception('Failed to list calendar events: %s', e)
            raise
        events = events_result.get('items', [])
        logger.info('Retrieved %d calendar events', len(events))
        return events

    def create_event(self, summary: str, description: str, start: datetime, end: datetime) -> Dict[str, Any]:
        """Insert an event on the primary calendar and return the created resource.

        Both ends are sent as UTC.
        """
        body: Dict[str, Any] = {
            'summary': summary,
            'description': description or '',
            'start': {'dateTime': utc_isoformat(start), 'timeZone': EVENT_TIMEZONE},
            'end': {'dateTime': utc_isoformat(end), 'timeZone': EVENT_TIMEZONE},
        }
        try:
            event = self.service.events().insert(calendarId=PRIMARY_CALENDAR, body=body).execute()
        except HttpError as e:
            logger.exception('Failed to create calendar event: %s', e)
            raise
        logger.info('Created calendar event id=%s', event.get('id'))
        return event
