"""
Utilities module - Common helpers for API responses and exceptions.
"""

from common.utils.responses import success_response, error_response, paginated_response
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    NotFoundException,
    ValidationException,
    InternalServerException,
)

__all__ = [
    "success_response",
    "error_response",
    "paginated_response",
    "APIException",
    "BadRequestException",
    "NotFoundException",
    "ValidationException",
    "InternalServerException",
]
