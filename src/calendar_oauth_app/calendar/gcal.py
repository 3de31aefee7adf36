"""Google Calendar client implementation.

Reads the user's calendar timezone, inserts events into a calendar and
fetches them back using the Google Calendar API via `googleapiclient`.
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List
import logging

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from calendar_oauth_app.config import settings

logger = logging.getLogger(__name__)

STAGE_TIMEZONE = 'timezone'
STAGE_INSERT = 'insert'
STAGE_CONFIRM = 'confirm'


@dataclass
class ReminderOverride:
    method: str
    minutes: int


def default_reminders() -> List[ReminderOverride]:
    return [
        ReminderOverride('email', 60 * 24),  # 1 day before
        ReminderOverride('email', 60 * 2),   # 2 hours before
        ReminderOverride('popup', 30),
        ReminderOverride('popup', 60 * 6 - 5),
    ]


@dataclass
class EventContent:
    summary: str = field(default_factory=lambda: settings.EVENT_SUMMARY)
    description: str = field(default_factory=lambda: settings.EVENT_DESCRIPTION)
    start: str = field(default_factory=lambda: settings.EVENT_START)
    end: str = field(default_factory=lambda: settings.EVENT_END)
    reminders: List[ReminderOverride] = field(default_factory=default_reminders)


class EventCreationError(RuntimeError):
    """One step of the create-and-confirm sequence failed.

    ``stage`` is ``timezone``, ``insert`` or ``confirm``. After a ``confirm``
    failure the event already exists in the calendar.
    """

    def __init__(self, stage: str, message: str):
        super().__init__(message)
        self.stage = stage
        self.message = message


def build_event(timezone: str, content: EventContent) -> Dict[str, Any]:
    """Request body for events.insert, with start/end read in ``timezone``."""
    return {
        'summary': content.summary,
        'description': content.description,
        'start': {'dateTime': content.start, 'timeZone': timezone},
        'end': {'dateTime': content.end, 'timeZone': timezone},
        'reminders': {
            'useDefault': False,
            'overrides': [asdict(r) for r in content.reminders],
        },
    }


def _error_message(exc: Exception) -> str:
    if isinstance(exc, HttpError):
        return getattr(exc, 'reason', None) or str(exc)
    return str(exc)


class GCalClient:
    def __init__(self, creds: object, calendar_id: str = None):
        self.creds = creds
        self.calendar_id = calendar_id or settings.CALENDAR_ID
        self.service = build('calendar', 'v3', credentials=self.creds, cache_discovery=False)

    def get_timezone(self) -> str:
        result = self.service.settings().get(setting='timezone').execute()
        return result.get('value')

    def insert_event(self, body: Dict[str, Any]) -> Dict[str, Any]:
        event = self.service.events().insert(
            calendarId=self.calendar_id,
            body=body,
            sendNotifications=True,
            sendUpdates='all',
        ).execute()
        logger.info('Created calendar event id=%s', event.get('id'))
        return event

    def get_event(self, event_id: str) -> Dict[str, Any]:
        return self.service.events().get(calendarId=self.calendar_id, eventId=event_id).execute()


def create_and_confirm(client: GCalClient, content: EventContent) -> Dict[str, Any]:
    """Create the event in the user's timezone and read back what was stored.

    Returns ``{'eventId', 'eventTimeZone', 'reminders'}`` from the confirmed
    event. Raises EventCreationError naming the step that failed.
    """
    try:
        timezone = client.get_timezone()
    except Exception as exc:
        raise EventCreationError(STAGE_TIMEZONE, _error_message(exc)) from exc
    logger.info('User time zone: %s', timezone)

    body = build_event(timezone, content)
    try:
        created = client.insert_event(body)
    except Exception as exc:
        raise EventCreationError(STAGE_INSERT, _error_message(exc)) from exc

    event_id = created.get('id')
    try:
        confirmed = client.get_event(event_id)
    except Exception as exc:
        raise EventCreationError(STAGE_CONFIRM, _error_message(exc)) from exc

    confirmed_tz = (confirmed.get('start') or {}).get('timeZone')
    logger.info('Event time zone: %s', confirmed_tz)
    logger.info('Event reminders: %s', confirmed.get('reminders'))
    if confirmed_tz != timezone:
        logger.warning('Calendar stored time zone %s, expected %s', confirmed_tz, timezone)

    return {
        'eventId': event_id,
        'eventTimeZone': confirmed_tz,
        'reminders': confirmed.get('reminders'),
    }
