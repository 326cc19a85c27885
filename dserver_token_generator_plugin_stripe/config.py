"""
Configuration management for the Stripe OAuth2 integration.

This module handles loading the Stripe Connect client credentials and the
JWT settings used after a successful login.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union


def _env_or_none(name: str) -> Optional[str]:
    """Return an environment variable, treating empty values as unset."""
    value = os.environ.get(name, "")
    return value or None


@dataclass(frozen=True)
class OAuth2Config:
    """OAuth2 client configuration for a single provider."""

    # Client credentials
    client_id: str = ""
    client_secret: str = ""

    # URL the provider redirects back to with the authorization code
    callback_url: str = ""

    # Provider endpoints, left as None to use the strategy defaults
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    scope_separator: Optional[str] = None

    # Stripe Connect scopes are "read_only" or "read_write"
    scope: Optional[Union[str, Sequence[str]]] = None

    # Stripe reads client_secret from the form body
    token_endpoint_auth_method: str = "client_secret_post"

    @classmethod
    def from_env(cls) -> "OAuth2Config":
        """Create configuration from environment variables."""
        base_url = os.environ.get("STRIPE_AUTH_BASE_URL", "http://localhost:5000")

        return cls(
            client_id=os.environ.get("STRIPE_CLIENT_ID", ""),
            client_secret=os.environ.get("STRIPE_CLIENT_SECRET", ""),
            callback_url=os.environ.get(
                "STRIPE_CALLBACK_URL",
                f"{base_url}/auth/callback"
            ),
            authorization_url=_env_or_none("STRIPE_AUTHORIZATION_URL"),
            token_url=_env_or_none("STRIPE_TOKEN_URL"),
            scope_separator=_env_or_none("STRIPE_SCOPE_SEPARATOR"),
            scope=_env_or_none("STRIPE_SCOPE"),
        )


@dataclass
class JwtConfig:
    """JWT token configuration."""

    private_key_file: str = "/app/jwt/jwt_key"
    public_key_file: str = "/app/jwt/jwt_key.pub"
    algorithm: str = "RS256"
    issuer: str = "dserver"
    audience: str = "dserver"
    token_expiry_hours: int = 24

    @classmethod
    def from_env(cls) -> "JwtConfig":
        """Create configuration from environment variables."""
        return cls(
            private_key_file=os.environ.get(
                "JWT_PRIVATE_KEY_FILE", "/app/jwt/jwt_key"
            ),
            public_key_file=os.environ.get(
                "JWT_PUBLIC_KEY_FILE", "/app/jwt/jwt_key.pub"
            ),
            algorithm=os.environ.get("JWT_ALGORITHM", "RS256"),
            issuer=os.environ.get("JWT_ISSUER", "dserver"),
            audience=os.environ.get("JWT_AUDIENCE", "dserver"),
            token_expiry_hours=int(os.environ.get("JWT_TOKEN_EXPIRY_HOURS", "24")),
        )


@dataclass
class PluginConfig:
    """Overall plugin configuration."""

    oauth2: OAuth2Config = field(default_factory=OAuth2Config.from_env)
    jwt: JwtConfig = field(default_factory=JwtConfig.from_env)

    base_url: str = "http://localhost:5000"

    # Frontend redirect settings
    frontend_url: str = "/"
    login_success_redirect: str = "/"
    login_error_redirect: str = "/login?error=auth_failed"

    @classmethod
    def from_env(cls) -> "PluginConfig":
        """Create configuration from environment variables."""
        return cls(
            oauth2=OAuth2Config.from_env(),
            jwt=JwtConfig.from_env(),
            base_url=os.environ.get("STRIPE_AUTH_BASE_URL", "http://localhost:5000"),
            frontend_url=os.environ.get("STRIPE_AUTH_FRONTEND_URL", "/"),
            login_success_redirect=os.environ.get(
                "STRIPE_AUTH_LOGIN_SUCCESS_REDIRECT", "/"
            ),
            login_error_redirect=os.environ.get(
                "STRIPE_AUTH_LOGIN_ERROR_REDIRECT", "/login?error=auth_failed"
            ),
        )
