"""Resolve the Google user behind an access token."""
from typing import Any, Dict, Optional
import logging

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('id', 'name', 'email', 'picture', 'given_name', 'family_name')


def normalize_profile(info: Dict[str, Any]) -> Dict[str, Any]:
    user = {field: info.get(field) for field in PROFILE_FIELDS}
    if not user.get('name'):
        user['name'] = info.get('email') or ''
    return user


class IdentityClient:
    def __init__(self, creds: object = None, service: Any = None):
        self.creds = creds
        self.service = service
        if self.service is None:
            self.service = build('oauth2', 'v2', credentials=self.creds, cache_discovery=False)

    def get_user(self) -> Optional[Dict[str, Any]]:
        """Return the normalized profile, or None when Google sends back nothing."""
        try:
            info = self.service.userinfo().get().execute()
        except HttpError as e:
            logger.warning('Userinfo lookup failed: %s', e)
            raise
        if not info:
            return None
        return normalize_profile(info)
