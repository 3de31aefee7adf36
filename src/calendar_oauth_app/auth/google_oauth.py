"""Google OAuth helpers.

Builds the web-application flow, exchanges authorization codes, reads the
signed-in user's profile and revokes tokens on logout.
Uses `google-auth-oauthlib` for the flow and `googleapiclient` for userinfo.
"""
from typing import Any, Dict, List, Optional
import logging

import requests
from google_auth_oauthlib.flow import Flow
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from calendar_oauth_app.config import settings

logger = logging.getLogger(__name__)

AUTH_URI = 'https://accounts.google.com/o/oauth2/auth'
TOKEN_URI = 'https://oauth2.googleapis.com/token'
REVOKE_URI = 'https://oauth2.googleapis.com/revoke'

# Calendar read/write plus the profile fields shown in the UI.
DEFAULT_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/userinfo.email",
]


class RevocationError(RuntimeError):
    """Google refused or failed to revoke a token."""


def get_web_flow(scopes: Optional[List[str]] = None) -> Flow:
    """Create a Google OAuth Flow for a web application."""
    client_id = settings.GOOGLE_CLIENT_ID
    client_secret = settings.GOOGLE_CLIENT_SECRET
    redirect_uri = settings.GOOGLE_OAUTH_REDIRECT_URI

    if not client_id or not client_secret:
        raise RuntimeError("GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be set in environment to run OAuth flow")

    client_config = {
        "web": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": AUTH_URI,
            "token_uri": TOKEN_URI,
            "redirect_uris": [redirect_uri],
        }
    }

    if scopes is None:
        scopes = DEFAULT_SCOPES

    # The callback builds a fresh Flow, so there is no verifier to carry over.
    return Flow.from_client_config(
        client_config,
        scopes=scopes,
        redirect_uri=redirect_uri,
        autogenerate_code_verifier=False,
    )


def build_authorization_url(flow: Flow) -> str:
    authorization_url, _state = flow.authorization_url(access_type="offline")
    return authorization_url


def exchange_code(code: str) -> Credentials:
    """Trade an authorization code for an access/refresh credential bundle."""
    if not code:
        raise ValueError("Authorization code is missing")
    flow = get_web_flow()
    flow.fetch_token(code=code)
    return flow.credentials


def fetch_user_profile(credentials: Credentials) -> Dict[str, Any]:
    service = build('oauth2', 'v2', credentials=credentials, cache_discovery=False)
    return service.userinfo().get().execute()


def revoke_credentials(credentials: Optional[Credentials]) -> None:
    """Revoke the refresh token (or access token) held by ``credentials``.

    Called even when nobody is signed in; Google then rejects the empty
    token and the rejection is raised like any other failure.
    """
    token = None
    if credentials is not None:
        token = credentials.refresh_token or credentials.token

    try:
        r = requests.post(
            REVOKE_URI,
            params={'token': token},
            headers={'content-type': 'application/x-www-form-urlencoded'},
            timeout=30,
        )
    except requests.RequestException as exc:
        raise RevocationError(f"Token revocation request failed: {exc}") from exc

    if r.status_code != 200:
        raise RevocationError(f"Token revocation rejected with HTTP {r.status_code}: {r.text}")
    logger.info('Revoked Google credentials')
