"""
FastAPI authentication dependencies.

Provides factory functions to create auth dependencies that can be
injected into route handlers. Works with any AuthProvider implementation.

Example:
    from common.auth import JWTAuth, create_auth_dependency

    auth = JWTAuth(secret="your-secret")
    get_current_user_id = create_auth_dependency(lambda: auth)

    @app.get("/profile")
    async def get_profile(user_id: str = Depends(get_current_user_id)):
        return {"user_id": user_id}
"""

from typing import Any, Callable, Dict, Optional
from fastapi import Header, HTTPException

from common.auth.base import AuthProvider
from common.auth.jwt_auth import USER_ID_CLAIMS


def _user_id_from_claims(payload: Dict[str, Any]) -> Optional[str]:
    for claim in USER_ID_CLAIMS:
        if payload.get(claim):
            return str(payload[claim])
    return None


def create_auth_dependency(
    get_auth_provider: Callable[[], AuthProvider],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create FastAPI auth dependencies.

    Args:
        get_auth_provider: Callable that returns the AuthProvider instance
        header_name: Header to extract token from (default: Authorization)
        scheme: Auth scheme prefix (default: Bearer)

    Returns:
        A FastAPI dependency function that extracts and verifies the user ID
    """

    async def get_current_user_id(
        authorization: Optional[str] = Header(None, alias=header_name),
    ) -> str:
        """
        Extract and verify user ID from the authorization header.

        Raises:
            HTTPException 401: If token is missing, invalid, or expired
        """
        if not authorization:
            raise HTTPException(
                status_code=401,
                detail={"message": "Authorization required", "code": "UNAUTHORIZED"},
            )

        prefix = f"{scheme} "
        if not authorization.startswith(prefix):
            raise HTTPException(
                status_code=401,
                detail={
                    "message": f"Invalid authorization scheme. Expected: {scheme}",
                    "code": "INVALID_AUTH_SCHEME",
                },
            )

        token = authorization[len(prefix) :]

        if not token:
            raise HTTPException(
                status_code=401,
                detail={"message": "Token is empty", "code": "EMPTY_TOKEN"},
            )

        auth = get_auth_provider()
        try:
            payload = await auth.verify_token(token)
        except ValueError as e:
            raise HTTPException(
                status_code=401,
                detail={"message": str(e), "code": "INVALID_TOKEN"},
            )

        user_id = _user_id_from_claims(payload)
        if not user_id:
            raise HTTPException(
                status_code=401,
                detail={"message": "Member ID not found", "code": "INVALID_TOKEN"},
            )

        return user_id

    return get_current_user_id


def create_optional_auth_dependency(
    get_auth_provider: Callable[[], AuthProvider],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create optional auth dependency.

    Returns None instead of raising when no valid token is provided.
    Useful for endpoints that work for both authenticated and anonymous users.
    """

    async def get_optional_user_id(
        authorization: Optional[str] = Header(None, alias=header_name),
    ) -> Optional[str]:
        if not authorization:
            return None

        prefix = f"{scheme} "
        if not authorization.startswith(prefix):
            return None

        token = authorization[len(prefix) :]
        if not token:
            return None

        auth = get_auth_provider()
        try:
            payload = await auth.verify_token(token)
        except ValueError:
            return None
        return _user_id_from_claims(payload)

    return get_optional_user_id
