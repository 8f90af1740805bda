import json
import logging
import uuid
from datetime import datetime, timezone as dt_timezone
from django.utils import timezone
from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)

SENDER_USER = 'user'
SENDER_ADMIN = 'admin'
SENDER_BOT = 'bot'

_EPOCH = datetime.min.replace(tzinfo=dt_timezone.utc)


def make_message(text, sender, created_at=None):
    return {
        'id': uuid.uuid4().hex,
        'text': text,
        'sender': sender,
        'created_at': (created_at or timezone.now()).isoformat(),
    }


def parse_messages(raw):
    """Return the stored message list, accepting a JSON string or a native list.

    Anything unreadable reads as an empty conversation.
    """
    if raw is None or raw == '':
        return []

    if isinstance(raw, (bytes, str)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning('Discarding unparseable ticket messages payload')
            return []

    if not isinstance(raw, list):
        logger.warning('Discarding ticket messages payload of type %s', type(raw).__name__)
        return []

    return [m for m in raw if isinstance(m, dict)]


def normalize_message(message):
    created_at = message.get('created_at') or message.get('createdAt') or message.get('timestamp')
    if isinstance(created_at, (int, float)):
        try:
            created_at = datetime.fromtimestamp(created_at / 1000, tz=dt_timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            logger.warning('Ignoring out-of-range message timestamp %r', created_at)
            created_at = ''

    return {
        'id': str(message.get('id') or uuid.uuid4().hex),
        'text': message.get('text') if message.get('text') is not None else message.get('content', ''),
        'sender': message.get('sender') or message.get('role') or SENDER_USER,
        'created_at': created_at or '',
    }


def _sort_key(message):
    try:
        parsed = parse_datetime(str(message['created_at']))
    except ValueError:
        parsed = None
    if parsed is None:
        return _EPOCH
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def sorted_messages(raw):
    messages = [normalize_message(m) for m in parse_messages(raw)]
    return sorted(messages, key=_sort_key)
