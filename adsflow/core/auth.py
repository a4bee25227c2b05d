"""
Auth utilities for the Ads Flow API.

Validates bearer JWTs issued by the identity provider and resolves the
caller identity from the ``sub`` claim.
"""
from fastapi import Depends, Header
from typing import List, Optional
import jwt
import logging

from adsflow.core.config import settings
from adsflow.core.errors import UnauthenticatedError
from adsflow.models.profile import Identity

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header, if any."""
    if not authorization:
        return None
    if not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class IdentityResolver:
    """Resolve a caller identity from an inbound credential."""

    def __init__(
        self,
        secret: Optional[str] = None,
        *,
        algorithms: Optional[List[str]] = None,
        audience: Optional[str] = None,
    ):
        self.secret = secret
        self.algorithms = algorithms or ["HS256"]
        self.audience = audience

    @classmethod
    def from_settings(cls, cfg=None) -> "IdentityResolver":
        cfg = cfg or settings
        return cls(
            cfg.AUTH_JWT_SECRET,
            algorithms=cfg.jwt_algorithms(),
            audience=cfg.AUTH_JWT_AUDIENCE,
        )

    def resolve_identity(self, authorization: Optional[str]) -> Identity:
        """
        Verify the bearer token and extract the identity.

        Args:
            authorization: Raw Authorization header value

        Returns:
            Identity with user_id from the 'sub' claim

        Raises:
            UnauthenticatedError: Missing, malformed, expired or invalid token
        """
        token = extract_bearer_token(authorization)
        if not token:
            raise UnauthenticatedError("Please sign in to continue.")

        if not self.secret:
            logger.error("AUTH_JWT_SECRET is not configured; rejecting all tokens")
            raise UnauthenticatedError("Authentication is not available right now.")

        options = {"verify_signature": True, "verify_exp": True, "verify_aud": self.audience is not None}
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                options=options,
            )
        except jwt.ExpiredSignatureError:
            raise UnauthenticatedError("Your session has expired. Please sign in again.")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid token: {e}")
            raise UnauthenticatedError("Your session is not valid. Please sign in again.")

        user_id = payload.get("sub")
        if not user_id:
            logger.debug("Token has no 'sub' claim")
            raise UnauthenticatedError("Your session is not valid. Please sign in again.")

        return Identity(user_id=str(user_id), email=payload.get("email"))


_resolver: Optional[IdentityResolver] = None


def get_identity_resolver() -> IdentityResolver:
    """FastAPI dependency returning the process-wide resolver."""
    global _resolver
    if _resolver is None:
        _resolver = IdentityResolver.from_settings()
    return _resolver


def require_identity(
    authorization: Optional[str] = Header(None),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Identity:
    """FastAPI dependency: resolve the caller or fail with 401."""
    return resolver.resolve_identity(authorization)
