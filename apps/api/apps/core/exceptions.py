"""
Domain error taxonomy and DRF exception handler.

Every service raises one of the OmniError subclasses below; the handler
translates them into `{"error": message}` JSON responses at the API
boundary. Anything unexpected becomes a generic 500 and the detail stays in
the server log.
"""

import math

from rest_framework import status
from rest_framework.exceptions import Throttled
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.core.observability.logging import get_sanitized_logger

logger = get_sanitized_logger(__name__)

GENERIC_ERROR_MESSAGE = 'Erro interno do servidor'


class OmniError(Exception):
    """Base class for errors that map to an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = GENERIC_ERROR_MESSAGE
    code = 'error'

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(OmniError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Dados inválidos'
    code = 'validation_error'


class OverlapError(ValidationError):
    """Two events for the same professional and date intersect."""
    default_message = 'Já existe um evento para este profissional neste horário (sobreposição).'
    code = 'overlap'


class AuthenticationError(OmniError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = 'Não autenticado'
    code = 'not_authenticated'


class AuthorizationError(OmniError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'Acesso negado'
    code = 'permission_denied'


class NotFoundError(OmniError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Recurso não encontrado'
    code = 'not_found'


class ConflictError(OmniError):
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Conflito'
    code = 'conflict'


class GoneError(OmniError):
    status_code = status.HTTP_410_GONE
    default_message = 'Recurso não está mais disponível'
    code = 'gone'


class PayloadTooLargeError(OmniError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_message = 'Arquivo muito grande'
    code = 'payload_too_large'


class RateLimitError(OmniError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = 'Limite de requisições excedido. Tente novamente mais tarde.'
    code = 'rate_limited'

    def __init__(self, retry_after, message=None):
        self.retry_after = int(retry_after)
        super().__init__(message, retryAfter=self.retry_after)


def _first_message(detail):
    """Flatten a DRF error detail (str, list or dict) into one message."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if key in ('detail', 'non_field_errors'):
                return message
            return f'{key}: {message}'
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def omni_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER.

    - Throttled -> RateLimitError (429 + Retry-After)
    - OmniError -> its status code with `{"error": message, ...details}`
    - DRF exceptions -> default handling, body normalised to carry `error`
    - anything else -> 500 with a generic message, logged with traceback
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view else None

    if isinstance(exc, Throttled):
        exc = RateLimitError(math.ceil(exc.wait) if exc.wait is not None else 0)

    if isinstance(exc, OmniError):
        body = {'error': exc.message}
        body.update(exc.details)
        response = Response(body, status=exc.status_code)
        if isinstance(exc, RateLimitError):
            response['Retry-After'] = str(exc.retry_after)

        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            'Request rejected',
            extra={
                'event': 'api_error',
                'error_code': exc.code,
                'status_code': exc.status_code,
                'view': view_name,
            }
        )
        return response

    response = exception_handler(exc, context)
    if response is not None:
        data = response.data
        if isinstance(data, dict) and 'error' not in data:
            message = _first_message(data)
            fields = {k: v for k, v in data.items() if k != 'detail'}
            response.data = {'error': message}
            if fields:
                response.data['fields'] = fields
        elif isinstance(data, list):
            response.data = {'error': _first_message(data)}
        return response

    logger.error(
        f'Unhandled exception: {exc.__class__.__name__}',
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={
            'event': 'api_unhandled_exception',
            'exception_type': exc.__class__.__name__,
            'view': view_name,
        }
    )
    return Response(
        {'error': GENERIC_ERROR_MESSAGE},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
