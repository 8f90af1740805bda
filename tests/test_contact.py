import json
from unittest import mock
import pytest
from django.core import mail
from users.models import ContactSubmission, NewsletterSubscriber
from users.services.mail_service import MailService

pytestmark = pytest.mark.django_db

CONTACT = {
    'firstName': 'Jane',
    'lastName': 'Doe',
    'company': 'Doe Trading',
    'email': 'jane@example.com',
    'phone': '+27 82 123 4567',
    'country': 'RSA',
    'message': 'Please help me register for VAT.',
}


def post(api, path, body):
    return api.post(path, data=json.dumps(body), content_type='application/json')


def test_contact_is_stored(api):
    response = post(api, '/api/contact', CONTACT)

    assert response.status_code == 201
    submission = ContactSubmission.objects.get()
    assert submission.first_name == 'Jane'
    assert submission.country == 'RSA'


def test_contact_validation(api):
    response = post(api, '/api/contact', {**CONTACT, 'phone': '12', 'message': 'hi', 'country': 'Mars'})

    assert response.status_code == 400
    assert set(response.json()['errors']) == {'phone', 'message', 'country'}
    assert not ContactSubmission.objects.exists()


def test_newsletter_subscribe_is_idempotent(api):
    first = post(api, '/api/newsletter', {'email': 'Reader@Example.com'})
    second = post(api, '/api/newsletter', {'email': 'reader@example.com'})

    assert first.json()['data']['new'] is True
    assert second.json()['data']['new'] is False
    assert NewsletterSubscriber.objects.count() == 1
    assert len(mail.outbox) == 2


def test_newsletter_rejects_bad_email(api):
    assert post(api, '/api/newsletter', {'email': 'nope'}).status_code == 400


def test_newsletter_mail_failure_is_reported(api):
    with mock.patch.object(MailService, 'send', return_value=False):
        response = post(api, '/api/newsletter', {'email': 'reader@example.com'})

    assert response.status_code == 500
    assert response.json()['success'] is False


def test_invalid_json_body(api):
    response = api.post('/api/contact', data='{broken', content_type='application/json')
    assert response.status_code == 400
