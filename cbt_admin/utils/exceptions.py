# -*- coding: utf-8 -*-
"""
Custom exceptions for the CBT admin front end.

Each exception carries an HTTP status code and a stable error code so the BFF
can render it directly, while controllers catch them to report failures.
"""

from enum import Enum
from typing import Any

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Unique error codes."""

    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    REMOTE_API_ERROR = "REMOTE_API_ERROR"
    UPLOAD_ERROR = "UPLOAD_ERROR"


class APIException(HTTPException):
    """Base class for the application's exceptions."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str,
        headers: dict | None = None,
    ):
        """
        Args:
            status_code (int): HTTP status code.
            detail (str): Error message.
            error_code (str): Unique error code.
            headers (dict, optional): Extra response headers.
        """
        super().__init__(status_code=status_code, headers=headers)
        self.detail = detail
        self.error_code = error_code

    def __str__(self) -> str:
        return self.detail


class NotFoundError(APIException):
    """Raised when a resource does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str | int = None,
        details: str | None = None,
    ):
        detail = f"{resource_type} tidak ditemukan"
        if resource_id:
            detail = f"{resource_type} dengan ID {resource_id} tidak ditemukan"
        if details:
            detail = f"{detail}: {details}"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=ErrorCode.NOT_FOUND,
        )


class PermissionDeniedError(APIException):
    """Raised when the caller lacks the required role."""

    def __init__(self, detail: str = "Akses ditolak"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=ErrorCode.PERMISSION_DENIED,
        )


class ValidationError(APIException):
    """Raised locally, before any request, when input is not well-formed."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code=ErrorCode.VALIDATION_ERROR,
        )


class RemoteAPIError(APIException):
    """Raised when the remote exam API fails or cannot be reached."""

    def __init__(
        self,
        detail: str,
        remote_status: int | None = None,
        payload: Any = None,
    ):
        """
        Args:
            detail (str): User-facing message.
            remote_status (int, optional): Status returned by the remote API,
                ``None`` for transport errors.
            payload: Decoded error body, if any.
        """
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error_code=ErrorCode.REMOTE_API_ERROR,
        )
        self.remote_status = remote_status
        self.payload = payload


class UploadError(APIException):
    """Raised when an upload succeeded but no usable URL came back."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error_code=ErrorCode.UPLOAD_ERROR,
        )


DEFAULT_ERROR_MESSAGE = "Terjadi kesalahan."


def error_message(exc: Any) -> str:
    """
    Extract a user-facing message from an error.

    Looks at plain strings, ``detail``/``message`` attributes and a nested
    ``data.message`` in the remote payload, in that order.
    """
    if isinstance(exc, str):
        return exc.strip() or DEFAULT_ERROR_MESSAGE

    for attr in ("detail", "message"):
        value = getattr(exc, attr, None)
        if isinstance(value, str) and value.strip():
            return value

    payload = getattr(exc, "payload", None)
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict):
            message = data.get("message")
            if isinstance(message, str) and message.strip():
                return message

    if isinstance(exc, Exception) and str(exc).strip():
        return str(exc)
    return DEFAULT_ERROR_MESSAGE
