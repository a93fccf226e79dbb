"""
JWT Token Service

Signs and verifies the session tokens handed out by ``login``. The payload
only carries the user id; the current user is reloaded from the database on
every request.
"""

import logging
from functools import lru_cache
from typing import Any

import jwt

from food_delivery.core.config import get_settings

logger = logging.getLogger(__name__)


class JwtService:
    """Thin wrapper around PyJWT bound to the configured private key."""

    def __init__(self, private_key: str, algorithm: str = "HS256"):
        self._private_key = private_key
        self._algorithm = algorithm

    def sign(self, user_id: int) -> str:
        return jwt.encode({"id": user_id}, self._private_key, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode a token.

        Raises:
            jwt.InvalidTokenError: If the token is malformed or tampered with
        """
        return jwt.decode(token, self._private_key, algorithms=[self._algorithm])


@lru_cache()
def get_jwt_service() -> JwtService:
    settings = get_settings()
    return JwtService(settings.private_key, settings.jwt_algorithm)
