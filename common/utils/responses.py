"""
Response envelopes shared by every endpoint.

    success_response(stats)                 -> {"success": true, "data": stats}
    error_response("Member not found", ...) -> {"success": false, "error": {...}}
    paginated_response(readings, total=41, limit=10, offset=20)
"""

from typing import Any, Optional, Dict


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Wrap data (and an optional message) in the success envelope."""
    response: Dict[str, Any] = {"success": True}
    if data is not None:
        response["data"] = data
    if message:
        response["message"] = message
    return response


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """Error envelope; ``code`` is the machine-readable error, e.g. INVALID_DATE."""
    error: Dict[str, Any] = {"message": message}
    if code:
        error["code"] = code
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


def paginated_response(
    items: list,
    total: int,
    limit: int,
    offset: int = 0,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Success envelope for an offset/limit page.

    ``page`` is the page containing the first returned item. Navigation
    flags are derived from the offset itself, so offsets that are not a
    multiple of ``limit`` still report skipped and remaining records.

    Args:
        items: Records on this page
        total: Records across all pages
        limit: Page size actually applied
        offset: Records skipped before this page
        message: Optional success message
    """
    total_pages = (total + limit - 1) // limit if limit > 0 else 0

    response: Dict[str, Any] = {
        "success": True,
        "data": items,
        "pagination": {
            "page": offset // limit + 1 if limit > 0 else 1,
            "limit": limit,
            "offset": offset,
            "total": total,
            "totalPages": total_pages,
            "hasNextPage": offset + len(items) < total,
            "hasPreviousPage": offset > 0,
        },
    }
    if message:
        response["message"] = message
    return response
