import hashlib
from users.services.payment_service import build_param_string, encode_value, generate_signature


FIELDS = {
    'merchant_id': '10000100',
    'merchant_key': '46f0cd694581a',
    'return_url': 'https://example.test/dashboard',
    'name_first': 'Jane',
    'email_address': 'jane@example.com',
    'amount': '1200.00',
    'item_name': '1, 1, 2',
}


def test_encode_value_uses_plus_for_spaces_and_uppercase_escapes():
    assert encode_value('Jane Doe') == 'Jane+Doe'
    assert encode_value('https://a.test/x?y=1') == 'https%3A%2F%2Fa.test%2Fx%3Fy%3D1'
    assert encode_value("keep-_.!~*'()") == "keep-_.!~*'()"


def test_encode_value_trims_whitespace():
    assert encode_value('  1200.00 ') == '1200.00'


def test_param_string_keeps_field_order_and_skips_signature():
    data = {'b': '2', 'a': '1', 'signature': 'abc'}
    assert build_param_string(data) == 'b=2&a=1'


def test_param_string_skips_blank_values_only_when_asked():
    data = {'a': '1', 'b': '', 'c': '3'}
    assert build_param_string(data) == 'a=1&c=3'
    assert build_param_string(data, skip_empty=False) == 'a=1&b=&c=3'


def test_signature_is_md5_of_param_string():
    expected = hashlib.md5(build_param_string(FIELDS).encode('utf-8')).hexdigest()
    assert generate_signature(FIELDS) == expected
    assert generate_signature(FIELDS) == generate_signature(dict(FIELDS))


def test_signature_changes_when_any_field_changes():
    baseline = generate_signature(FIELDS)
    for key in FIELDS:
        changed = {**FIELDS, key: FIELDS[key] + 'x'}
        assert generate_signature(changed) != baseline, key


def test_signature_ignores_empty_fields():
    assert generate_signature({**FIELDS, 'name_last': ''}) == generate_signature(FIELDS)


def test_passphrase_is_appended():
    param_string = build_param_string(FIELDS) + '&passphrase=jt7NOE43FZPn'
    expected = hashlib.md5(param_string.encode('utf-8')).hexdigest()
    assert generate_signature(FIELDS, passphrase='jt7NOE43FZPn') == expected
    assert generate_signature(FIELDS, passphrase='jt7NOE43FZPn') != generate_signature(FIELDS)
