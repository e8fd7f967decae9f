# apps/core/middleware.py

import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404, JsonResponse

from .exceptions import MiniTrelloError

logger = logging.getLogger(__name__)


class ApiErrorMiddleware:
    """
    Turns exceptions raised by API views into JSON error bodies

    Only paths under /api/ are handled; the admin and everything else keep
    Django's default error pages. Body format:
    {"error": "<short label>", "message": "<detail>", "details": [...]}
    """

    API_PREFIX = '/api/'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not request.path.startswith(self.API_PREFIX):
            return None

        if isinstance(exception, MiniTrelloError):
            if exception.status_code >= 500:
                logger.error(f"{exception.error} on {request.path}: {exception.message}")
            return JsonResponse(exception.as_dict(), status=exception.status_code)

        if isinstance(exception, Http404):
            return JsonResponse(
                {'error': 'Not found', 'message': str(exception) or 'Resource not found'},
                status=404
            )

        if isinstance(exception, PermissionDenied):
            return JsonResponse(
                {'error': 'Forbidden', 'message': str(exception) or 'Access denied'},
                status=403
            )

        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return JsonResponse(
            {'error': 'Server error', 'message': 'Internal server error'},
            status=500
        )
