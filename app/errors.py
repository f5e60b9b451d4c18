"""Translate exceptions into the JSON error envelope."""
from flask import jsonify
from werkzeug.exceptions import HTTPException

from .exceptions import RentalAppError


def error_response(message, status: int):
    return jsonify({"success": False, "message": message}), status


def register_error_handlers(app):
    @app.errorhandler(RentalAppError)
    def handle_app_error(err: RentalAppError):
        # Covers NotFound/InvalidInput/Unauthorized/InvalidState and the
        # persistence errors (duplicate key, schema validation, malformed id).
        return error_response(err.message, err.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return error_response(err.description or err.name, err.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled error: %s", err)
        return error_response("Server error", 500)
