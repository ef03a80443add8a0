import logging

from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def raw_error(exc: Exception) -> dict:
    """JSON form of an exception, passed through to the client as-is."""
    return {'name': type(exc).__name__, 'message': str(exc)}


def error_payload(message, error=None) -> dict:
    return {'success': False, 'message': message, 'error': error}


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("Unhandled API error: %s", exc)
        return Response(error_payload('Internal server error', raw_error(exc)), status=500)
    # normalize response
    data = resp.data
    if isinstance(data, dict) and 'detail' in data:
        message = str(data['detail'])
        error = {k: v for k, v in data.items() if k != 'detail'} or None
    elif isinstance(data, list) and data:
        message = str(data[0])
        error = None
    elif isinstance(data, dict):
        message = 'Invalid request data'
        error = data
    else:
        message = str(data)
        error = None
    return Response(error_payload(message, error), status=resp.status_code, headers=_auth_headers(resp))


def _auth_headers(resp) -> dict:
    # keep WWW-Authenticate so 401s stay 401s
    value = resp.headers.get("WWW-Authenticate")
    return {'WWW-Authenticate': value} if value else {}
