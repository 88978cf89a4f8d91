import logging

from directory.exceptions import SessionExpired
from directory.session import SessionContext

logger = logging.getLogger(__name__)


class AppSessionMiddleware:
    """Attach the app session to each request and handle 401s globally.

    Any view that lets ``SessionExpired`` escape (it is never an
    ``ApiError``) ends here: the stored token and user are dropped and the
    visitor lands on ``/login``, whatever page made the call.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.app_session = SessionContext(request.session)
        try:
            request.app_session.rehydrate()
        except SessionExpired:
            return request.app_session.expire()
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, SessionExpired):
            logger.info('session expired on %s', request.path)
            return request.app_session.expire()
        return None
