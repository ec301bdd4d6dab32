"""Display-side calendar shapes and the projection from Google event resources."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class CalendarEvent:
    name: str
    date: str
    time: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CalendarEvent":
        return cls(
            name=payload.get('name') or '',
            date=payload.get('date') or '',
            time=payload.get('time') or '',
        )


@dataclass(frozen=True)
class EventDraft:
    name: str = ''
    date: str = ''
    time: str = ''

    FIELDS = ('name', 'date', 'time')

    def is_complete(self) -> bool:
        return all(getattr(self, field) for field in self.FIELDS)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def project_event(event: Dict[str, Any]) -> CalendarEvent:
    """Reduce a Google event resource to its name, date and time.

    The start ``dateTime`` is split on ``T`` and the first five characters of
    the time part are kept, so no timezone conversion happens. All-day events
    only carry ``start.date`` and get an empty time.
    """
    start = event.get('start') or {}
    date_time = start.get('dateTime')
    if date_time and 'T' in date_time:
        date_part, time_part = date_time.split('T', 1)
        time_part = time_part[:5]
    else:
        date_part = start.get('date') or date_time or ''
        time_part = ''
    return CalendarEvent(name=event.get('summary') or '', date=date_part, time=time_part)
