import json
from unittest import mock
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from users.filings.definitions import get_definition
from users.helpers.errors import NotFound, ValidationFailed
from users.models import Ticket
from users.services.document_store import get_document_store
from users.services.form_service import FormSubmissionService, decode_payload
from users.services.storage_service import ObjectStorage
from tests.conftest import bearer, make_user

pytestmark = pytest.mark.django_db

CIPC = 'cipc-annual-return-filing'
PERSONAL = {'fullName': 'Jane Doe', 'email': 'jane@example.com', 'contactNumber': '0821234567'}
BUSINESS = {'priorAnnualReturn': 'yes', 'annualTurnover': '1000000', 'fileMoreReturns': 'no'}


@pytest.fixture
def no_s3():
    with mock.patch.object(ObjectStorage, 'upload', side_effect=lambda fileobj, key, content_type=None: key) as upload:
        yield upload


@pytest.fixture
def buyer(db):
    return make_user(email='buyer@example.com', pf_data={'item_name': [
        {'name': '1', 'timestamp': '2024-01-01T00:00:00+00:00'},
    ]})


def test_decode_payload_collects_arrays_and_json():
    values = decode_payload({
        'directors[0]': 'Ann',
        'directors[1]': 'Ben',
        'tags[]': 'a',
        'meta': '{"x": 1}',
        'plain': 'text',
    })

    assert values == {'directors': ['Ann', 'Ben'], 'tags': ['a'], 'meta': {'x': 1}, 'plain': 'text'}


def test_submit_stores_document_consumes_item_and_opens_ticket(buyer, no_s3):
    definition = get_definition(CIPC)
    upload = SimpleUploadedFile('return.pdf', b'%PDF-1.4', content_type='application/pdf')

    result = FormSubmissionService.submit(
        buyer, definition, {**PERSONAL, **BUSINESS, '$where': 'x'}, files={'file': upload}
    )

    assert result['warnings'] == []
    document = get_document_store().collection(CIPC).find_one({'userId': buyer.id})
    assert document['fullName'] == 'Jane Doe'
    assert document['formId'] == '1'
    assert document['status'] == 'open'
    assert '$where' not in document
    assert document['fileKeys']['file'].startswith(f'{CIPC}/{buyer.id}/')
    no_s3.assert_called_once()

    buyer.refresh_from_db()
    assert buyer.pf_data['item_name'] == []
    ticket = Ticket.objects.get(user=buyer)
    assert ticket.messages[0]['text'] == f'New form submission for {CIPC}'


def test_submit_without_purchase_still_succeeds_with_warning(user, no_s3):
    result = FormSubmissionService.submit(user, get_definition(CIPC), {**PERSONAL, **BUSINESS})

    assert len(result['warnings']) == 1
    assert get_document_store().collection(CIPC).count_documents({}) == 1


def test_foreign_upload_key_is_rejected(user, no_s3):
    with pytest.raises(ValidationFailed):
        FormSubmissionService.submit(
            user, get_definition(CIPC), PERSONAL, uploaded_keys={'file': f'vat-registration/{user.id}/1-x.pdf'}
        )
    assert get_document_store().collection(CIPC).count_documents({}) == 0


def test_own_presigned_key_is_accepted(user, no_s3):
    key = f'{CIPC}/{user.id}/1700000000000-return.pdf'
    FormSubmissionService.submit(user, get_definition(CIPC), {**PERSONAL, **BUSINESS}, uploaded_keys={'file': key})

    document = get_document_store().collection(CIPC).find_one({'userId': user.id})
    assert document['fileKeys'] == {'file': key}
    no_s3.assert_not_called()


def test_another_users_upload_key_is_rejected(api, user, other_user, no_s3):
    from tests.conftest import issue_token
    headers = bearer(issue_token(other_user))
    for step in (PERSONAL, BUSINESS):
        api.post(f'/api/forms/{CIPC}/advance', data=json.dumps(step), content_type='application/json', **headers)

    response = api.post(
        f'/api/forms/{CIPC}/submit',
        data={'file': f'{CIPC}/{user.id}/1700000000000-janes-return.pdf'},
        **headers
    )

    assert response.status_code == 400
    assert 'file' in response.json()['errors']
    assert get_document_store().collection(CIPC).count_documents({}) == 0


def test_admin_status_update_and_listing(user, no_s3):
    result = FormSubmissionService.submit(user, get_definition(CIPC), {**PERSONAL, **BUSINESS})

    FormSubmissionService.set_status(CIPC, result['id'], 'completed')

    listed = FormSubmissionService.list_submissions(CIPC, status='completed')
    assert [s['id'] for s in listed] == [result['id']]
    assert FormSubmissionService.count_submissions()[CIPC] == 1

    with pytest.raises(NotFound):
        FormSubmissionService.set_status(CIPC, 'not-an-object-id', 'completed')
    with pytest.raises(ValidationFailed):
        FormSubmissionService.set_status(CIPC, result['id'], 'archived')
    with pytest.raises(ValidationFailed):
        FormSubmissionService.list_submissions('unknown-form')


def test_wizard_endpoints_end_to_end(api, buyer, no_s3):
    from tests.conftest import issue_token
    headers = bearer(issue_token(buyer))

    response = api.post(f'/api/forms/{CIPC}/advance', data=json.dumps(PERSONAL), content_type='application/json', **headers)
    assert response.status_code == 200
    assert response.json()['data']['currentStep'] == 1

    response = api.post(f'/api/forms/{CIPC}/advance', data=json.dumps({'annualTurnover': ''}), content_type='application/json', **headers)
    assert response.status_code == 400

    response = api.get(f'/api/forms/{CIPC}', **headers)
    assert response.json()['data']['state']['currentStep'] == 1

    response = api.post(f'/api/forms/{CIPC}/advance', data=json.dumps(BUSINESS), content_type='application/json', **headers)
    assert response.json()['data']['isLastStep'] is True

    upload = SimpleUploadedFile('return.pdf', b'%PDF-1.4', content_type='application/pdf')
    response = api.post(f'/api/forms/{CIPC}/submit', data={'file': upload}, **headers)
    assert response.status_code == 201

    stored = get_document_store().collection(CIPC).find_one({'userId': buyer.id})
    assert stored['annualTurnover'] == '1000000'
    assert stored['submittedBy'] == buyer.email
    assert get_document_store().collection('form_drafts').count_documents({'userId': buyer.id}) == 0


def test_direct_submit_requires_matching_form_id(api, user_token, no_s3):
    response = api.post(
        '/api/forms/submit',
        data={'formId': '20', 'collectionName': CIPC, 'fullName': 'Jane'},
        **bearer(user_token)
    )
    assert response.status_code == 400


def test_direct_submit_stores_fields(api, user, user_token, no_s3):
    response = api.post(
        '/api/forms/submit',
        data={'formId': '1', 'collectionName': CIPC, 'directors[0]': 'Ann', 'directors[1]': 'Ben'},
        **bearer(user_token)
    )

    assert response.status_code == 201
    stored = get_document_store().collection(CIPC).find_one({'userId': user.id})
    assert stored['directors'] == ['Ann', 'Ben']
    assert stored['submittedBy'] == user.email


def test_company_tax_return_submission_consumes_its_purchase(db, no_s3):
    slug = 'sars-company-cc-trust-tax-returns'
    company = make_user(email='acme@example.com', pf_data={'item_name': [
        {'name': '15', 'timestamp': '2024-01-01T00:00:00+00:00'},
        {'name': '1', 'timestamp': '2024-01-02T00:00:00+00:00'},
    ]})
    statements = SimpleUploadedFile('afs.pdf', b'%PDF-1.4', content_type='application/pdf')

    result = FormSubmissionService.submit(
        company, get_definition(slug),
        {'contactInfo': 'Acme', 'financialYear': '2024', 'bookingPreference': 'upload'},
        files={'financialStatements': statements}
    )

    assert result['warnings'] == []
    document = get_document_store().collection(slug).find_one({'userId': company.id})
    assert document['formId'] == '15'
    assert document['fileKeys']['financialStatements'].startswith(f'{slug}/{company.id}/')

    company.refresh_from_db()
    assert [item['name'] for item in company.pf_data['item_name']] == ['1']
