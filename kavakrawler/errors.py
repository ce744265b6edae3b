"""
Error taxonomy for the JSON API.

Services raise these; the handlers registered in create_app() turn them into
`{"message": ...}` responses. Anything else becomes a generic 500.
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException

STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500
STATUS_BAD_GATEWAY = 502
STATUS_SERVICE_UNAVAILABLE = 503

MSG_UNAUTHORIZED = 'Unauthorized'
MSG_INVALID_CREDENTIALS = 'Invalid credentials'
MSG_INTERNAL_ERROR = 'Internal server error'


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code = STATUS_INTERNAL_ERROR
    default_message = MSG_INTERNAL_ERROR

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = STATUS_BAD_REQUEST
    default_message = 'Invalid request data'


class AuthenticationError(ApiError):
    status_code = STATUS_UNAUTHORIZED
    default_message = MSG_UNAUTHORIZED


class NotFoundError(ApiError):
    status_code = STATUS_NOT_FOUND
    default_message = 'Not found'


class ConflictError(ApiError):
    status_code = STATUS_CONFLICT
    default_message = 'Conflict'


class UpstreamError(ApiError):
    """External provider failure, such as a storage upload that was rejected."""
    status_code = STATUS_BAD_GATEWAY
    default_message = 'Upstream service unavailable'


class ServiceUnavailableError(ApiError):
    """A feature whose backing service isn't configured on this deployment."""
    status_code = STATUS_SERVICE_UNAVAILABLE
    default_message = 'Service unavailable'


def register_error_handlers(app):
    """Attach JSON error handlers to the app."""
    from kavakrawler import db

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify({'message': error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        # Routing errors (unknown URL, wrong method, bad body) keep their status
        return jsonify({'message': error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {error}")
        return jsonify({'message': MSG_INTERNAL_ERROR}), STATUS_INTERNAL_ERROR
