from fastapi import status
from .base import build_response
from utils.exceptions import AppError


ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_409_CONFLICT: "conflict",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "internal_server_error",
}


def _failure(status_code: int, message: str):
    return build_response(
        status_code,
        success=False,
        error=ERROR_CODES.get(status_code, "error"),
        message=message,
    )


def error_response(exc: AppError):
    return _failure(exc.status_code, exc.message)


def bad_request_error(error: str = "Bad request"):
    return _failure(status.HTTP_400_BAD_REQUEST, error)


def internal_server_error(error: str = "Internal server error"):
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, error)

