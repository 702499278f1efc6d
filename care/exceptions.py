import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

FORM_ERROR_MESSAGE = 'Please fix the errors in the form'


class ConflictError(APIException):
    """The request is valid but clashes with the record's current state."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflicting record state.'
    default_code = 'conflict'


def field_errors(data) -> dict:
    """Flatten DRF validation output to ``{field: [message, ...]}``."""
    if isinstance(data, dict):
        out = {}
        for key, value in data.items():
            if isinstance(value, (list, tuple)):
                out[key] = [str(v) if not isinstance(v, dict) else v for v in value]
            elif isinstance(value, dict):
                out[key] = field_errors(value)
            else:
                out[key] = [str(value)]
        return out
    if isinstance(data, (list, tuple)):
        return {'non_field_errors': [str(v) for v in data]}
    return {'non_field_errors': [str(data)]}


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception("Unhandled error in %s", getattr(view, '__name__', None) or type(view).__name__)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    if isinstance(exc, ValidationError):
        return Response(
            {'ok': False, 'error': {
                'code': 'validation_error',
                'message': FORM_ERROR_MESSAGE,
                'fields': field_errors(resp.data),
            }},
            status=resp.status_code,
        )
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    code = getattr(exc, 'default_code', None) or 'api_error'
    return Response({'ok': False, 'error': {'code': code, 'message': detail}},
                    status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp) -> dict:
    # keep WWW-Authenticate / Retry-After set by DRF
    return {k: v for k, v in resp.items() if k in ('WWW-Authenticate', 'Retry-After')}
