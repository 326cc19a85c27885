"""
JWT token generation utilities.

This module handles JWT token creation and signing for users who logged in
with their Stripe account.
"""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import jwt

from .config import JwtConfig

logger = logging.getLogger(__name__)

# Claims describing the provider account, carried over when a token is refreshed
PROVIDER_CLAIMS = ("provider", "provider_user_id", "livemode")


def provider_claims(source: dict) -> dict:
    """Pick the provider claims present in a user info or token payload."""
    return {key: source[key] for key in PROVIDER_CLAIMS if key in source}


class JwtTokenGenerator:
    """Generate and sign JWT tokens for authenticated users."""

    def __init__(self, config: JwtConfig):
        """
        Initialize the JWT token generator.

        Args:
            config: JWT configuration object
        """
        self.config = config
        self._private_key: Optional[str] = None
        self._public_key: Optional[str] = None

    @property
    def private_key(self) -> str:
        if self._private_key is None:
            self._private_key = self._load_key(self.config.private_key_file)
        return self._private_key

    @property
    def public_key(self) -> str:
        if self._public_key is None:
            self._public_key = self._load_key(self.config.public_key_file)
        return self._public_key

    @staticmethod
    def _load_key(path: str) -> str:
        key_path = Path(path)
        if not key_path.exists():
            raise FileNotFoundError(f"Key file not found: {path}")
        return key_path.read_text()

    def generate_token(
        self,
        username: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
        additional_claims: Optional[dict] = None,
    ) -> str:
        """
        Generate a JWT token for an authenticated user.

        Args:
            username: Unique username, the Stripe account ID for Stripe logins
            display_name: Business or display name
            email: Account email address
            additional_claims: Any additional claims to include

        Returns:
            Signed JWT token string
        """
        now = datetime.now(timezone.utc)

        payload = {
            "iss": self.config.issuer,
            "aud": self.config.audience,
            "sub": username,
            "iat": now,
            "exp": now + timedelta(hours=self.config.token_expiry_hours),
            "nbf": now,
            "username": username,
        }

        if display_name:
            payload["name"] = display_name

        if email:
            payload["email"] = email

        if additional_claims:
            payload.update(additional_claims)

        token = jwt.encode(payload, self.private_key, algorithm=self.config.algorithm)

        logger.info(f"Generated JWT token for user: {username}")
        return token

    def verify_token(self, token: str) -> Optional[dict]:
        """
        Verify and decode a JWT token.

        Returns:
            Decoded payload if valid, None otherwise
        """
        try:
            return jwt.decode(
                token,
                self.public_key,
                algorithms=[self.config.algorithm],
                audience=self.config.audience,
                issuer=self.config.issuer,
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
        return None

    def refresh_token(self, token: str) -> Optional[str]:
        """Issue a new token with the claims of a still valid one."""
        payload = self.verify_token(token)
        if payload is None:
            return None

        return self.generate_token(
            username=payload["username"],
            display_name=payload.get("name"),
            email=payload.get("email"),
            additional_claims=provider_claims(payload) or None,
        )
