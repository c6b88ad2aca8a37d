"""
Token verifier interface.

Route dependencies only depend on this contract, so the signing
strategy can change without touching the routers.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class AuthProvider(ABC):
    """Issues and verifies bearer tokens."""

    @abstractmethod
    async def create_token(self, user_id: str, **claims: Any) -> str:
        """
        Issue a signed token for a member.

        Args:
            user_id: Member ID stored in the ``sub`` claim
            **claims: Extra claims, e.g. ``memberId`` for mobile tokens
        """

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Decode a bearer token.

        Returns:
            The token's claims

        Raises:
            ValueError: Bad signature, malformed or expired token
        """
