import json
import pytest
from users.helpers.errors import NotFound
from users.models import User
from users.services.profile_service import ProfileService
from tests.conftest import bearer, make_user

pytestmark = pytest.mark.django_db


def items(*entries):
    return {'item_name': [{'name': name, 'timestamp': ts} for name, ts in entries]}


@pytest.fixture
def buyer(db):
    return make_user(email='buyer@example.com', pf_data=items(
        ('2', '2024-03-01T10:00:00+00:00'),
        ('5', '2024-01-01T10:00:00+00:00'),
        ('2', '2024-01-15T10:00:00+00:00'),
        ('2', '2024-02-01T10:00:00+00:00'),
    ))


def test_remove_item_takes_the_oldest_match(buyer):
    user, removed = ProfileService.remove_item(buyer.id, '2')

    assert removed['timestamp'] == '2024-01-15T10:00:00+00:00'
    remaining = User.objects.get(id=buyer.id).pf_data['item_name']
    assert [(i['name'], i['timestamp']) for i in remaining] == [
        ('2', '2024-03-01T10:00:00+00:00'),
        ('5', '2024-01-01T10:00:00+00:00'),
        ('2', '2024-02-01T10:00:00+00:00'),
    ]


def test_remove_all_drops_every_entry_sharing_the_oldest_timestamp(db):
    user = make_user(email='bulk@example.com', pf_data=items(
        ('2', '2024-01-01T00:00:00+00:00'),
        ('2', '2024-01-01T00:00:00+00:00'),
        ('2', '2024-02-01T00:00:00+00:00'),
    ))
    ProfileService.remove_item(user.id, '2', remove_only_one=False)

    remaining = User.objects.get(id=user.id).pf_data['item_name']
    assert remaining == [{'name': '2', 'timestamp': '2024-02-01T00:00:00+00:00'}]


def test_remove_item_not_found_cases(db, buyer):
    with pytest.raises(NotFound):
        ProfileService.remove_item(999999, '2')

    with pytest.raises(NotFound):
        ProfileService.remove_item(buyer.id, '42')

    empty = make_user(email='empty@example.com', pf_data={})
    with pytest.raises(NotFound):
        ProfileService.remove_item(empty.id, '2')


def test_append_items_keeps_duplicates(user):
    ProfileService.append_items(user.id, ['1', '1', '3'])

    user.refresh_from_db()
    assert [i['name'] for i in user.pf_data['item_name']] == ['1', '1', '3']
    assert ProfileService.count_items(user, '1') == 2


def test_matching_products(buyer):
    result = ProfileService.matching_products(buyer)

    assert result['numberOfEntries'] == 4
    assert {p['id'] for p in result['products']} == {'2', '5'}


def test_admin_pf_data_change_is_recorded(user, admin_user):
    updated = ProfileService.admin_set_pf_data(user.id, {'item_name': []}, admin_user)

    assert updated.pf_data['item_name'] == []
    assert len(updated.pf_data['adminChanges']) == 1
    assert updated.pf_data['adminChanges'][0].startswith('PF Data updated by admin: Ada Admin at ')


def test_remove_endpoint(api, buyer):
    from tests.conftest import issue_token
    response = api.post(
        '/api/profile/pf-data/remove',
        data=json.dumps({'itemName': '5'}),
        content_type='application/json',
        **bearer(issue_token(buyer))
    )

    assert response.status_code == 200
    assert response.json()['data']['removedItem']['name'] == '5'


def test_remove_endpoint_missing_item_is_404(api, user, user_token):
    response = api.post(
        '/api/profile/pf-data/remove',
        data=json.dumps({'itemName': '5'}),
        content_type='application/json',
        **bearer(user_token)
    )
    assert response.status_code == 404


def test_user_cannot_remove_from_someone_else(api, buyer, user_token):
    response = api.post(
        '/api/profile/pf-data/remove',
        data=json.dumps({'itemName': '2', 'userId': buyer.id}),
        content_type='application/json',
        **bearer(user_token)
    )

    assert response.status_code == 403
    assert len(User.objects.get(id=buyer.id).pf_data['item_name']) == 4


def test_profile_update_requires_current_password(api, user, user_token):
    response = api.put(
        '/api/profile/update',
        data=json.dumps({'newPassword': 'another-password', 'currentPassword': 'wrong'}),
        content_type='application/json',
        **bearer(user_token)
    )
    assert response.status_code == 400


def test_naive_timestamps_are_read_as_utc(db):
    user = make_user(email='mixed@example.com', pf_data=items(
        ('2', '2024-01-01T09:00:00'),
        ('2', '2024-01-01T08:00:00+00:00'),
    ))

    _, removed = ProfileService.remove_item(user.id, '2')

    assert removed['timestamp'] == '2024-01-01T08:00:00+00:00'
    remaining = User.objects.get(id=user.id).pf_data['item_name']
    assert [i['timestamp'] for i in remaining] == ['2024-01-01T09:00:00']
