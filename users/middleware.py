import json
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from users.helpers.errors import ServiceError
from users.helpers.response import APIResponse

logger = logging.getLogger(__name__)


class JSONErrorMiddleware(MiddlewareMixin):
    """Keeps every API error in the {"success": false, "message": ...} envelope."""

    def process_response(self, request, response):
        if isinstance(response, JsonResponse):
            return response

        status_code = response.status_code
        if status_code < 400 or not request.path.startswith('/api/'):
            return response

        if self._is_json(response):
            return response

        return JsonResponse({
            "success": False,
            "message": self._get_status_message(status_code),
            "meta": {
                "path": request.path,
                "method": request.method,
                "timestamp": self._get_timestamp()
            }
        }, status=status_code)

    def process_exception(self, request, exception):
        if isinstance(exception, ServiceError):
            if exception.status_code >= 500:
                logger.error('%s %s failed: %s', request.method, request.path, exception.message)
            return APIResponse.from_exception(exception)

        logger.exception('Unhandled error on %s %s', request.method, request.path)
        return APIResponse.server_error()

    def _is_json(self, response):
        if 'json' not in response.get('Content-Type', ''):
            return False
        try:
            json.loads(response.content)
        except (ValueError, AttributeError):
            return False
        return True

    def _get_status_message(self, status_code):
        try:
            return HTTPStatus(status_code).phrase
        except ValueError:
            return 'Client error' if status_code < 500 else 'Server error'

    def _get_timestamp(self):
        return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
