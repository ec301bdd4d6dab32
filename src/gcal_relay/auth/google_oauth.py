"""Google OAuth helpers.

The desktop client obtains an access token directly from Google with the
installed-app flow; the relay only ever sees that bare token and wraps it in
credentials for the Google API client.
"""
from typing import Any, List, Optional
import logging

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from gcal_relay.config import settings

logger = logging.getLogger(__name__)

# Profile scopes let the relay resolve the user; calendar.events covers list/insert.
DEFAULT_SCOPES = [
    "openid",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/calendar.events",
]


def credentials_from_token(token: str) -> Credentials:
    """Wrap a bare access token. No refresh token, so expiry is final."""
    return Credentials(token=token)


def get_installed_flow(scopes: Optional[List[str]] = None) -> Any:
    """Create a Google OAuth Flow for the desktop client."""
    client_id = settings.GOOGLE_CLIENT_ID
    client_secret = settings.GOOGLE_CLIENT_SECRET

    if not client_id or not client_secret:
        raise RuntimeError("GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be set in environment to run OAuth flow")

    client_config = {
        "installed": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }

    if scopes is None:
        scopes = DEFAULT_SCOPES

    return InstalledAppFlow.from_client_config(client_config, scopes=scopes)


def run_local_oauth_flow(scopes: Optional[List[str]] = None) -> str:
    """Open the browser consent screen and return the granted access token."""
    flow = get_installed_flow(scopes)
    creds = flow.run_local_server(port=0)
    logger.info('Obtained Google access token via local OAuth flow')
    return creds.token
