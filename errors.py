import logging

from flask import jsonify

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base error for the finance and lifecycle engine."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {"code": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(ServiceError):
    status_code = 400
    code = "validation_error"


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"


class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"


class InternalError(ServiceError):
    status_code = 500
    code = "internal_error"


def handle_service_error(error):
    if error.status_code >= 500:
        logger.error("%s: %s", error.code, error.message)
    return jsonify({"error": error.to_dict()}), error.status_code


def register_error_handlers(app):
    app.register_error_handler(ServiceError, handle_service_error)
