"""
FastAPI dependencies for Sycamore application.

Provides authentication and re-exports the per-system service getters.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import JWTAuth, create_auth_dependency, create_optional_auth_dependency

from sycamore.devotional.dependencies import (
    init_devotional_services,
    ensure_devotional_indexes,
    get_engagement_tracker,
    get_reading_service,
    get_achievement_service,
    get_topic_service,
    get_like_service,
    get_member_service,
    get_comment_service,
)


# ─────────────────────────────────────────────────────────────────
# Global service instances
# ─────────────────────────────────────────────────────────────────

_auth_provider: Optional[JWTAuth] = None
_unlocks_enabled: bool = True


def init_auth_services(
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    access_token_expire_minutes: int = 30,
) -> None:
    """Initialize the token verifier."""
    global _auth_provider
    _auth_provider = JWTAuth(
        secret=jwt_secret,
        algorithm=jwt_algorithm,
        access_token_expire_minutes=access_token_expire_minutes,
    )


def init_all_services(
    db: AsyncIOMotorDatabase,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    access_token_expire_minutes: int = 30,
    reading_history_max_limit: int = 90,
    achievement_unlocks_enabled: bool = True,
) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
        jwt_secret: Secret used to verify bearer tokens
        jwt_algorithm: JWT signing algorithm
        access_token_expire_minutes: Lifetime of tokens created by the provider
        reading_history_max_limit: Page size cap for reading history
        achievement_unlocks_enabled: Persist badge unlocks on the write path
    """
    global _unlocks_enabled
    _unlocks_enabled = achievement_unlocks_enabled

    init_auth_services(jwt_secret, jwt_algorithm, access_token_expire_minutes)
    init_devotional_services(db, reading_history_max_limit)


def get_auth_provider() -> JWTAuth:
    """Get auth provider instance."""
    if _auth_provider is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_provider


def unlocks_enabled() -> bool:
    """Whether achievement unlocks are persisted."""
    return _unlocks_enabled


# Dependency that requires a valid bearer token; resolves to the user id
require_auth = create_auth_dependency(get_auth_provider)

# Resolves to the user id, or None for anonymous requests
optional_auth = create_optional_auth_dependency(get_auth_provider)


__all__ = [
    "init_all_services",
    "ensure_devotional_indexes",
    "get_auth_provider",
    "unlocks_enabled",
    "require_auth",
    "optional_auth",
    "get_engagement_tracker",
    "get_reading_service",
    "get_achievement_service",
    "get_topic_service",
    "get_like_service",
    "get_member_service",
    "get_comment_service",
]
