from dataclasses import dataclass
from threading import Lock
from typing import Any, Dict, Optional
import logging

from google.oauth2.credentials import Credentials
from starlette.requests import Request
from starlette.responses import RedirectResponse

from calendar_oauth_app.auth.google_oauth import (
    build_authorization_url,
    exchange_code,
    fetch_user_profile,
    get_web_flow,
)

logger = logging.getLogger(__name__)

SESSION_KEY = 'default'
_ANY = object()


@dataclass
class UserSession:
    name: Optional[str]
    email: Optional[str]
    picture: Optional[str]
    credentials: Credentials

    @classmethod
    def from_profile(cls, profile: Dict[str, Any], credentials: Credentials) -> "UserSession":
        return cls(
            name=profile.get('name'),
            email=profile.get('email'),
            picture=profile.get('picture'),
            credentials=credentials,
        )

    def public_view(self) -> Dict[str, Any]:
        return {'name': self.name, 'email': self.email, 'picture': self.picture}


class SessionStore:
    """Holds the signed-in user. Single-user: every client shares one entry."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: Dict[str, UserSession] = {}

    def get(self) -> Optional[UserSession]:
        with self._lock:
            return self._sessions.get(SESSION_KEY)

    def set(self, session: UserSession) -> None:
        with self._lock:
            self._sessions[SESSION_KEY] = session

    def clear(self, expected: Any = _ANY) -> bool:
        """Drop the current session.

        With ``expected``, only drop it if it is still that exact object, so a
        login that landed in the meantime survives. Returns whether it cleared.
        """
        with self._lock:
            if expected is not _ANY and self._sessions.get(SESSION_KEY) is not expected:
                return False
            self._sessions.pop(SESSION_KEY, None)
            return True


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


async def login(request: Request):
    flow = get_web_flow()
    return RedirectResponse(build_authorization_url(flow))


def auth_callback(request: Request):
    code = request.query_params.get('code')
    try:
        credentials = exchange_code(code)
        profile = fetch_user_profile(credentials)
    except Exception:
        # Any earlier session is kept as-is.
        logger.exception('Error getting tokens')
        return RedirectResponse(url='/?auth=failed')

    logger.info('User Info: %s', profile)
    get_session_store(request).set(UserSession.from_profile(profile, credentials))
    return RedirectResponse(url='/?auth=success')
