"""
HTTP exceptions carrying machine-readable error codes.

The exception handler in ``api.py`` renders ``detail`` with
``error_response``, so clients always see::

    {"success": false, "error": {"message": ..., "code": ..., "details": ...}}
"""

from typing import Optional, Any, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """HTTPException whose detail is a ``{message, code, details}`` dict."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        detail: Dict[str, Any] = {"message": message}
        if code:
            detail["code"] = code
        if details is not None:
            detail["details"] = details

        super().__init__(status_code=status_code, detail=detail)


class BadRequestException(APIException):
    """400 - malformed ids or request values."""

    def __init__(self, message: str = "Bad request", code: str = "BAD_REQUEST", details: Optional[Any] = None):
        super().__init__(400, message, code, details)


class NotFoundException(APIException):
    """404 - referenced member or record doesn't exist."""

    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND", details: Optional[Any] = None):
        super().__init__(404, message, code, details)


class ValidationException(APIException):
    """422 - value is well-formed JSON but semantically invalid (e.g. a bad date)."""

    def __init__(self, message: str = "Validation error", code: str = "VALIDATION_ERROR", details: Optional[Any] = None):
        super().__init__(422, message, code, details)


class InternalServerException(APIException):
    """500 - a write MongoDB did not acknowledge."""

    def __init__(self, message: str = "Internal server error", code: str = "INTERNAL_ERROR", details: Optional[Any] = None):
        super().__init__(500, message, code, details)
