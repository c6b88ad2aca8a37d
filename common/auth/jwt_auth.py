"""
HS256 JWT verifier for mobile and dashboard tokens.

Mobile tokens carry the member id in ``memberId``, dashboard tokens in
``sub``; the dependency layer accepts either (see USER_ID_CLAIMS).
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import jwt, JWTError

from common.auth.base import AuthProvider

USER_ID_CLAIMS = ("sub", "memberId", "userId")


class JWTAuth(AuthProvider):
    """Signs and verifies tokens with a shared secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 30,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)

    async def create_token(self, user_id: str, **claims: Any) -> str:
        issued_at = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self.access_token_expire,
            **claims,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")
