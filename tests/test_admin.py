import json
from unittest import mock
import pytest
from users.helpers.errors import NotFound
from users.models import BotResponse, Ticket, User
from users.services.storage_service import ObjectStorage
from users.services.ticket_service import TicketService
from tests.conftest import bearer

pytestmark = pytest.mark.django_db


def send(api, method, path, token, body=None):
    return getattr(api, method)(path, data=json.dumps(body or {}), content_type='application/json', **bearer(token))


@pytest.fixture
def bot_response(db):
    return BotResponse.objects.create(trigger='hours', response='We are open 8-5.')


def test_non_admin_cannot_edit_bot_response(api, bot_response, user_token):
    response = send(api, 'put', f'/api/admin/bot-responses/{bot_response.id}', user_token, {'response': 'Hacked'})

    assert response.status_code == 403
    bot_response.refresh_from_db()
    assert bot_response.response == 'We are open 8-5.'


def test_anonymous_cannot_edit_bot_response(api, bot_response):
    response = api.put(f'/api/admin/bot-responses/{bot_response.id}', data='{"response": "x"}',
                       content_type='application/json')

    assert response.status_code == 401
    bot_response.refresh_from_db()
    assert bot_response.response == 'We are open 8-5.'


def test_bot_response_crud(api, admin_token):
    response = send(api, 'post', '/api/admin/bot-responses', admin_token, {'trigger': 'vat', 'response': 'VAT help'})
    assert response.status_code == 201
    bot_id = response.json()['data']['id']

    response = send(api, 'put', f'/api/admin/bot-responses/{bot_id}', admin_token, {'response': 'Updated'})
    assert response.json()['data']['response'] == 'Updated'
    assert response.json()['data']['trigger'] == 'vat'

    response = api.get('/api/admin/bot-responses', **bearer(admin_token))
    assert [b['id'] for b in response.json()['data']] == [bot_id]

    response = api.delete(f'/api/admin/bot-responses/{bot_id}', **bearer(admin_token))
    assert response.status_code == 200
    assert not BotResponse.objects.exists()

    assert api.delete(f'/api/admin/bot-responses/{bot_id}', **bearer(admin_token)).status_code == 404


def test_bot_response_requires_both_fields(api, admin_token):
    response = send(api, 'post', '/api/admin/bot-responses', admin_token, {'trigger': 'vat'})
    assert response.status_code == 400
    assert 'response' in response.json()['errors']


def test_admin_reply_and_status(api, user, admin_token):
    ticket = TicketService.create_ticket(user, 'Help', 'Hello')

    response = send(api, 'post', '/api/admin/reply', admin_token, {'ticket_id': ticket.id, 'text': 'Hi there'})
    assert response.status_code == 200
    ticket.refresh_from_db()
    assert ticket.status == Ticket.TicketStatus.IN_PROGRESS
    assert ticket.messages[-1]['sender'] == 'admin'

    response = send(api, 'post', '/api/admin/update-ticket-status', admin_token, {'ticketId': ticket.id, 'status': 'Closed'})
    assert response.status_code == 200
    ticket.refresh_from_db()
    assert ticket.status == Ticket.TicketStatus.CLOSED


def test_admin_reply_validates_input(api, admin_token):
    response = send(api, 'post', '/api/admin/reply', admin_token, {'ticket_id': 'abc', 'text': ''})
    assert response.status_code == 400


def test_chat_logs(api, user, admin_token):
    TicketService.create_ticket(user, 'Help', 'Hello')

    response = api.get('/api/admin/chatlogs', **bearer(admin_token))

    assert response.status_code == 200
    assert response.json()['data'][0]['user']['email'] == user.email


def test_admin_user_update(api, user, admin_token):
    response = send(api, 'put', f'/api/admin/users/{user.id}', admin_token, {'role': 'admin', 'email_verified': True})
    assert response.status_code == 200
    user.refresh_from_db()
    assert user.role == User.RoleChoices.ADMIN
    assert user.email_verified is True

    response = send(api, 'put', f'/api/admin/users/{user.id}', admin_token, {'password': 'x'})
    assert response.status_code == 400


def test_admin_user_listing(api, user, admin_token):
    response = api.get('/api/admin/users?search=jane&per_page=abc', **bearer(admin_token))

    data = response.json()['data']
    assert [u['email'] for u in data['users']] == [user.email]
    assert data['pagination']['per_page'] == 20


def test_admin_pf_data(api, user, admin_token):
    response = send(api, 'put', f'/api/admin/users/{user.id}/pf-data', admin_token,
                    {'pfData': {'item_name': [{'name': '1', 'timestamp': '2024-01-01T00:00:00+00:00'}]}})

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.pf_data['item_name'][0]['name'] == '1'
    assert user.pf_data['adminChanges'][0].startswith('PF Data updated by admin: Ada Admin')


def test_admin_submissions_require_known_form(api, admin_token):
    assert api.get('/api/admin/submissions', **bearer(admin_token)).status_code == 400
    assert api.get('/api/admin/submissions?formType=nope', **bearer(admin_token)).status_code == 400
    response = api.get('/api/admin/submissions?formType=vat-registration', **bearer(admin_token))
    assert response.json()['data'] == []


def test_admin_forms_lists_counts(api, admin_token):
    response = api.get('/api/admin/forms', **bearer(admin_token))
    forms = {f['formType']: f['submissions'] for f in response.json()['data']}
    assert forms['vat-registration'] == 0


def test_s3_endpoints_are_admin_only(api, user_token):
    with mock.patch.object(ObjectStorage, 'list_files') as list_files:
        response = api.get('/api/admin/s3/files', **bearer(user_token))

    assert response.status_code == 403
    list_files.assert_not_called()


def test_s3_fetch(api, admin_token):
    with mock.patch.object(ObjectStorage, 'fetch', return_value=(b'%PDF', 'application/pdf')):
        response = api.get('/api/admin/s3/file?key=vat-registration/1-a.pdf', **bearer(admin_token))

    assert response.status_code == 200
    assert response['Content-Type'] == 'application/pdf'
    assert response.content == b'%PDF'


def test_s3_fetch_missing_file(api, admin_token):
    with mock.patch.object(ObjectStorage, 'fetch', side_effect=NotFound('File not found')):
        response = api.get('/api/admin/s3/file?key=nope', **bearer(admin_token))

    assert response.status_code == 404
