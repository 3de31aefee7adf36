import os
os.environ.setdefault('OAUTHLIB_INSECURE_TRANSPORT', '1')
# Google may grant scopes in a different form (e.g. adding openid).
os.environ.setdefault('OAUTHLIB_RELAX_TOKEN_SCOPE', '1')

import logging
from typing import Any, Dict

from fastapi import FastAPI, Depends, HTTPException
from fastapi.staticfiles import StaticFiles
from starlette.requests import Request
from starlette.responses import FileResponse, JSONResponse

from calendar_oauth_app.auth.google_oauth import revoke_credentials
from calendar_oauth_app.auth.session import SessionStore, get_session_store, login, auth_callback
from calendar_oauth_app.calendar.gcal import EventContent, EventCreationError, GCalClient, create_and_confirm
from calendar_oauth_app.config import settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title='calendar-oauth-app')
    app.state.session_store = SessionStore()

    static_dir = settings.STATIC_DIR
    index_html = static_dir / 'index.html'
    if static_dir.exists():
        app.mount('/static', StaticFiles(directory=str(static_dir)), name='static')

    app.add_route('/auth', route=login, methods=['GET'])
    app.add_route('/oauth2callback', route=auth_callback, methods=['GET'])

    @app.get('/')
    def read_root():
        if index_html.exists():
            return FileResponse(str(index_html))
        raise HTTPException(status_code=404, detail='index.html not found')

    @app.get('/auth-status', response_model=Dict[str, Any])
    def auth_status(store: SessionStore = Depends(get_session_store)):
        session = store.get()
        if session is None:
            return {'authenticated': False}
        return {'authenticated': True, **session.public_view()}

    @app.post('/logout')
    def logout(store: SessionStore = Depends(get_session_store)):
        session = store.get()
        try:
            revoke_credentials(session.credentials if session else None)
        except Exception:
            logger.exception('Error revoking credentials')
            return JSONResponse({'success': False, 'error': 'Failed to logout'}, status_code=500)
        # A login that finished during revocation replaces the revoked session; keep it.
        if not store.clear(expected=session):
            logger.info('Session replaced during logout; keeping the newer login')
        return {'success': True, 'message': 'Logged out successfully'}

    @app.get('/add-event')
    def add_event(store: SessionStore = Depends(get_session_store)):
        # Work from a snapshot so a concurrent logout cannot swap credentials mid-sequence.
        session = store.get()
        if session is None:
            return JSONResponse({'success': False, 'error': 'Not authenticated'}, status_code=401)

        try:
            gcal_client = GCalClient(creds=session.credentials)
            confirmed = create_and_confirm(gcal_client, EventContent())
        except EventCreationError as exc:
            logger.exception('Error creating event (stage=%s)', exc.stage)
            return JSONResponse(
                {'success': False, 'error': exc.message, 'stage': exc.stage},
                status_code=500,
            )
        except Exception as exc:
            logger.exception('Error creating event')
            return JSONResponse({'success': False, 'error': str(exc)}, status_code=500)

        return {'success': True, **confirmed}

    return app


app = create_app()
