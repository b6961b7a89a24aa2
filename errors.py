"""Exception hierarchy and JSON error handlers."""

import json

from flask import jsonify
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from extensions import db
from logging_config import get_logger

logger = get_logger(__name__)


class CardooError(Exception):
    """Base exception for all Cardoo errors."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.error)
        self.message = message or self.error
        self.details = details

    def to_dict(self):
        data = {"error": self.message}
        if self.details is not None:
            data["details"] = self.details
        return data


class UnauthorizedError(CardooError):
    """Raised when there is no valid session."""

    status_code = 401
    error = "Unauthorized"


class ForbiddenError(CardooError):
    """Raised when the session role may not perform the action."""

    status_code = 403
    error = "Forbidden"


class NotFoundError(CardooError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    error = "Not found"


class RequestValidationError(CardooError):
    """Raised when a request is well-formed but semantically invalid."""

    status_code = 400
    error = "Validation error"


class InsufficientBalanceError(RequestValidationError):
    error = "Insufficient balance"


class ExcessWindowClosedError(RequestValidationError):
    error = "Excess can only be added after the booking ends and within the allowed window"


class ConflictError(CardooError):
    """Raised on unique constraint violations."""

    status_code = 409
    error = "Conflict"


def is_unique_violation(exc):
    """Tell unique-key clashes apart from NOT NULL, foreign key and check failures."""
    orig = exc.orig
    if getattr(orig, "pgcode", None) == "23505" or getattr(orig, "sqlstate", None) == "23505":
        return True
    message = str(orig).lower()
    return "unique" in message or "duplicate" in message


def register_error_handlers(app):
    @app.errorhandler(CardooError)
    def handle_cardoo_error(exc):
        db.session.rollback()
        if exc.status_code >= 500:
            logger.error("Unhandled domain error: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        # e.json() keeps ctx values JSON-safe
        details = json.loads(exc.json(include_url=False))
        return jsonify({"error": "Validation error", "details": details}), 400

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(exc):
        db.session.rollback()
        logger.warning("Integrity error: %s", exc.orig)
        if is_unique_violation(exc):
            return jsonify({"error": "Conflict", "details": "A record with the same unique value already exists"}), 409
        return jsonify({"error": "Validation error", "details": "The record violates a database constraint"}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({"error": exc.description or exc.name}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        logger.exception("Unexpected error while handling request")
        return jsonify({"error": "Internal server error"}), 500
