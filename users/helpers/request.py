import json
from urllib.parse import parse_qsl
from .response import APIResponse


def get_client_ip(request):
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    return x_forwarded_for.split(',')[0].strip() if x_forwarded_for else request.META.get('REMOTE_ADDR', '')


def get_user_agent(request):
    return request.META.get('HTTP_USER_AGENT', 'Unknown')[:30]


def get_token_from_request(request):
    auth_header = request.META.get('HTTP_AUTHORIZATION', '')
    return auth_header[7:] if auth_header.startswith('Bearer ') else None


def get_int_param(request, name, default, minimum=1, maximum=100):
    try:
        value = int(request.GET.get(name, default))
    except (TypeError, ValueError):
        return default
    return max(minimum, min(value, maximum))


def parse_json_body(request):
    try:
        data = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None, APIResponse.error(message='Invalid JSON', status_code=400)

    if not isinstance(data, dict):
        return None, APIResponse.error(message='JSON body must be an object', status_code=400)
    return data, None


def parse_form_or_json(request):
    """Read a JSON or form-urlencoded body as an ordered dict of strings.

    Field order is kept as received; gateway signatures are computed over it.
    """
    content_type = request.META.get('CONTENT_TYPE', '').split(';')[0].strip().lower()

    if content_type == 'application/json':
        data, error = parse_json_body(request)
        if error:
            return None, error
        return {key: '' if value is None else str(value) for key, value in data.items()}, None

    if content_type == 'application/x-www-form-urlencoded':
        try:
            pairs = parse_qsl(request.body.decode('utf-8'), keep_blank_values=True)
        except UnicodeDecodeError:
            return None, APIResponse.error(message='Invalid form body', status_code=400)
        return dict(pairs), None

    return None, APIResponse.error(message='Unsupported content type', status_code=400)
