"""Google Calendar access and the event shapes shown to users."""
from gcal_relay.calendar.gcal import GCalClient
from gcal_relay.calendar.models import CalendarEvent, EventDraft, project_event

__all__ = ['GCalClient', 'CalendarEvent', 'EventDraft', 'project_event']
