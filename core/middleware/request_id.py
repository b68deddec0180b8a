import uuid
import logging
from django.utils.deprecation import MiddlewareMixin
from threading import local

# Thread-local storage for request ID
_thread_locals = local()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(MiddlewareMixin):
    """
    Tag each request with an id, reuse the caller's X-Request-ID when given,
    and expose it to logging and to outgoing calls to the orders service.
    """

    def process_request(self, request):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.request_id = request_id
        _thread_locals.request_id = request_id
        return None

    def process_response(self, request, response):
        if hasattr(request, 'request_id'):
            response[REQUEST_ID_HEADER] = request.request_id
        _clear()
        return response

    def process_exception(self, request, exception):
        _clear()
        return None


def _clear():
    if hasattr(_thread_locals, 'request_id'):
        delattr(_thread_locals, 'request_id')


def get_request_id():
    """
    Current request ID from thread-local storage, or None outside a request.
    """
    return getattr(_thread_locals, 'request_id', None)


class RequestIDFilter(logging.Filter):
    """
    Logging filter that adds request ID to log records.
    """

    def filter(self, record):
        record.request_id = get_request_id() or 'no-request-id'
        return True
