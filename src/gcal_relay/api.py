import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from fastapi import FastAPI, Depends, Header
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from starlette.requests import Request
from starlette.responses import JSONResponse

from gcal_relay.auth.google_oauth import credentials_from_token
from gcal_relay.auth.identity import IdentityClient
from gcal_relay.calendar.gcal import GCalClient
from gcal_relay.calendar.models import project_event
from gcal_relay.config import settings

logger = logging.getLogger(__name__)


class RelayApiError(Exception):
    """Raised inside a route to answer with the ``{success: false, ...}`` envelope."""

    def __init__(self, status_code: int, message: str, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'success': False, 'message': self.message}
        if self.error is not None:
            payload['error'] = self.error
        return payload


class TokenPayload(BaseModel):
    token: str


class CreateEventPayload(BaseModel):
    summary: str
    description: str = ''
    startDateTime: str
    endDateTime: str


def _coerce_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware datetime; naive values are read as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _upstream_message(exc: Exception) -> str:
    reason = getattr(exc, 'reason', None)
    return str(reason or exc)


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    if not authorization:
        raise RelayApiError(401, 'No authorization header')
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise RelayApiError(401, 'Invalid authorization header')
    return parts[1]


def get_gcal_client(token: str = Depends(get_bearer_token)) -> GCalClient:
    return GCalClient(creds=credentials_from_token(token))


app = FastAPI(title='Google Calendar Relay')

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=['GET', 'POST', 'PUT', 'DELETE'],
    allow_headers=['Content-Type', 'Authorization'],
)


@app.exception_handler(RelayApiError)
async def _relay_error_handler(request: Request, exc: RelayApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info('Rejected request to %s: %s', request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={'success': False, 'message': 'Invalid request body'})


@app.exception_handler(Exception)
async def _unexpected_error_handler(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s: %s', request.url.path, exc)
    return JSONResponse(status_code=500, content={'success': False, 'message': 'Server error'})


@app.post('/auth/google', response_model=Dict[str, Any])
def verify_google_token(payload: TokenPayload):
    try:
        user = IdentityClient(creds=credentials_from_token(payload.token)).get_user()
    except Exception as exc:
        logger.exception('Error verifying token: %s', exc)
        raise RelayApiError(500, 'Server error', _upstream_message(exc)) from exc

    if not user:
        raise RelayApiError(400, 'Invalid token')
    return {'success': True, 'user': user}


@app.get('/auth/calendar/events', response_model=Dict[str, Any])
def list_calendar_events(gcal_client: GCalClient = Depends(get_gcal_client)):
    try:
        items = gcal_client.list_upcoming()
        events = [project_event(item).to_dict() for item in items]
    except Exception as exc:
        logger.exception('Error fetching events: %s', exc)
        raise RelayApiError(500, 'Failed to fetch events', _upstream_message(exc)) from exc
    return {'success': True, 'events': events}


@app.post('/auth/calendar/create', response_model=Dict[str, Any])
def create_calendar_event(payload: CreateEventPayload, gcal_client: GCalClient = Depends(get_gcal_client)):
    start = _coerce_datetime(payload.startDateTime)
    if start is None:
        raise RelayApiError(400, 'Invalid startDateTime')
    end = _coerce_datetime(payload.endDateTime)
    if end is None:
        raise RelayApiError(400, 'Invalid endDateTime')

    try:
        event = gcal_client.create_event(
            summary=payload.summary,
            description=payload.description,
            start=start,
            end=end,
        )
    except Exception as exc:
        logger.exception('Error creating event: %s', exc)
        raise RelayApiError(500, 'Failed to create event', _upstream_message(exc)) from exc
    return {'success': True, 'event': event}
