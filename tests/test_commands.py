import json
from io import StringIO
import pytest
from django.core.management import call_command
from users.models import Ticket

pytestmark = pytest.mark.django_db

LEGACY = json.dumps([
    {'content': 'second', 'role': 'admin', 'timestamp': '2024-01-02T00:00:00+00:00'},
    {'text': 'first', 'sender': 'user', 'createdAt': '2024-01-01T00:00:00+00:00'},
])


@pytest.fixture
def legacy_ticket(user):
    return Ticket.objects.create(number='123456', user=user, subject='Old chat', messages=LEGACY)


def test_dry_run_changes_nothing(legacy_ticket):
    out = StringIO()
    call_command('normalize_ticket_messages', '--dry-run', stdout=out)

    legacy_ticket.refresh_from_db()
    assert legacy_ticket.messages == LEGACY
    assert 'Would rewrite 1 ticket(s)' in out.getvalue()


def test_messages_are_rewritten_oldest_first(legacy_ticket):
    call_command('normalize_ticket_messages', stdout=StringIO())

    legacy_ticket.refresh_from_db()
    assert [m['text'] for m in legacy_ticket.messages] == ['first', 'second']
    assert [m['sender'] for m in legacy_ticket.messages] == ['user', 'admin']
    assert all(set(m) == {'id', 'text', 'sender', 'created_at'} for m in legacy_ticket.messages)

    out = StringIO()
    call_command('normalize_ticket_messages', stdout=out)
    assert 'Rewrote 0 ticket(s)' in out.getvalue()
