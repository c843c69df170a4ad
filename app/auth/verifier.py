# =============================================================================
# app/auth/verifier.py - Supabase JWT Verification
# =============================================================================
# Verifies access tokens issued by Supabase Auth.
#
# Supports both:
# - ES256/RS256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret)
#
# One verifier is built at startup; it owns its JWKS cache.
# =============================================================================

import logging
import time
from typing import Any, Callable
from uuid import UUID

import httpx
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JOSEError, JWTError

from app.auth.models import AuthUser

logger = logging.getLogger(__name__)

JWKS_CACHE_TTL = 3600  # 1 hour


class InvalidTokenError(Exception):
    """Token can't be trusted: bad signature, expired, wrong audience, no user."""


class TokenVerifier:
    """
    Validates Supabase access tokens with python-jose.

    Example:
        verifier = TokenVerifier(settings.SUPABASE_URL, settings.SUPABASE_JWT_SECRET)
        user = verifier.verify(token)  # AuthUser or InvalidTokenError
    """

    def __init__(
        self,
        supabase_url: str,
        jwt_secret: str = "",
        audience: str = "authenticated",
        jwks_ttl: int = JWKS_CACHE_TTL,
        fetch_jwks: Callable[[str], dict[str, Any]] | None = None,
    ):
        self.jwks_url = f"{supabase_url.rstrip('/')}/auth/v1/.well-known/jwks.json"
        self.jwt_secret = jwt_secret
        self.audience = audience
        self.jwks_ttl = jwks_ttl
        self._fetch_jwks_from = fetch_jwks or self._http_get_json
        self._jwks_cache: dict[str, Any] = {}
        self._jwks_cache_time: float = 0

    # -------------------------------------------------------------------------
    # JWKS
    # -------------------------------------------------------------------------

    @staticmethod
    def _http_get_json(url: str) -> dict[str, Any]:
        response = httpx.get(url, timeout=10)
        response.raise_for_status()
        return response.json()

    def _fetch_jwks(self) -> dict[str, Any]:
        """Fetch JWKS from Supabase with caching."""
        current_time = time.time()

        # Return cached if valid
        if self._jwks_cache and (current_time - self._jwks_cache_time) < self.jwks_ttl:
            return self._jwks_cache

        try:
            self._jwks_cache = self._fetch_jwks_from(self.jwks_url)
            self._jwks_cache_time = current_time
            logger.debug(f"Fetched JWKS from {self.jwks_url}")
        except Exception as e:
            logger.warning(f"Failed to fetch JWKS: {e}")
            # Stale keys beat no keys
            if not self._jwks_cache:
                return {"keys": []}

        return self._jwks_cache

    def _get_signing_key(self, token: str) -> tuple[Any, str]:
        """
        Get the appropriate signing key for a token.

        Returns:
            Tuple of (key, algorithm) to use for verification

        Raises:
            InvalidTokenError: If no usable key exists
        """
        try:
            unverified_header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise InvalidTokenError(f"unreadable token header: {e}")

        alg = unverified_header.get("alg", "HS256")
        kid = unverified_header.get("kid")

        if alg == "HS256":
            if not self.jwt_secret:
                raise InvalidTokenError("HS256 token but no JWT secret configured")
            return self.jwt_secret, "HS256"

        if kid:
            for key in self._fetch_jwks().get("keys", []):
                if key.get("kid") == kid:
                    return key, alg

        raise InvalidTokenError(f"no signing key for alg={alg}, kid={kid}")

    # -------------------------------------------------------------------------
    # Verify
    # -------------------------------------------------------------------------

    def verify(self, token: str) -> AuthUser:
        """
        Verify signature, expiry and audience, then extract the user.

        Raises:
            InvalidTokenError: For any token that can't be trusted
        """
        signing_key, algorithm = self._get_signing_key(token)

        try:
            payload = jwt.decode(
                token,
                signing_key,
                algorithms=[algorithm],
                audience=self.audience,
            )
        except ExpiredSignatureError:
            raise InvalidTokenError("token has expired")
        except JOSEError as e:
            raise InvalidTokenError(f"JWT validation failed: {e}")

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidTokenError("token missing 'sub' claim")

        try:
            user_uuid = UUID(str(user_id))
        except ValueError:
            raise InvalidTokenError("malformed user id in token")

        return AuthUser(id=user_uuid, email=payload.get("email"))
