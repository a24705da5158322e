"""Error taxonomy, global HTTP error handling and JSON response helpers."""
from __future__ import annotations

from typing import Any

from flask import Flask, jsonify
from loguru import logger
from pydantic import ValidationError as PydanticValidationError


class AppError(Exception):
    """Base class for errors surfaced to the caller."""

    code = "app_error"
    status = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class AuthError(AppError):
    code = "auth_error"
    status = 401


class InvalidCredentials(AuthError):
    code = "invalid_credentials"


class UsernameTaken(AuthError):
    code = "username_taken"
    status = 409


class UserNotFound(AuthError):
    code = "user_not_found"
    status = 404


class NotAuthenticated(AuthError):
    code = "not_authenticated"


class ValidationError(AppError):
    code = "validation_error"
    status = 400


class NotFoundError(AppError):
    code = "not_found"
    status = 404


class NetworkError(AppError):
    """Any failed backend call."""

    code = "network_error"
    status = 502


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def app_error(err: AppError):  # type: ignore[override]
        if isinstance(err, NetworkError):
            logger.error("backend call failed: {}", err.message)
        return jsonify({"error": err.code, "message": err.message}), err.status

    @app.errorhandler(PydanticValidationError)
    def invalid_payload(err: PydanticValidationError):  # type: ignore[override]
        return jsonify({"error": "unprocessable_entity", "message": str(err)}), 422

    @app.errorhandler(400)
    def bad_request(err: Exception):  # type: ignore[override]
        return jsonify({"error": "bad_request", "message": str(err)}), 400

    @app.errorhandler(404)
    def not_found(err: Exception):  # type: ignore[override]
        return jsonify({"error": "not_found", "message": str(err)}), 404

    @app.errorhandler(422)
    def unprocessable(err: Exception):  # type: ignore[override]
        return jsonify({"error": "unprocessable_entity", "message": str(err)}), 422

    @app.errorhandler(500)
    def internal(err: Exception):  # type: ignore[override]
        return jsonify({"error": "internal_server_error", "message": "unexpected error"}), 500


def ok(data: Any, status: int = 200):
    return jsonify({"data": data}), status
