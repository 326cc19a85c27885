"""
dserver-token-generator-plugin-stripe

A token generator plugin for dserver that authenticates users with their
Stripe account through Stripe Connect OAuth 2.0.

This plugin provides:
- A Stripe OAuth2 strategy (authorization URL, code exchange, account lookup)
- JWT token generation after successful authentication
- Flask endpoints for the login flow
"""

__version__ = "0.1.0"

from .errors import ExchangeError, InternalOAuthError, ProfileFetchError
from .oauth2 import AuthResult, OAuth2Strategy, Strategy
from .strategy import StripeStrategy
from .plugin import StripeTokenGeneratorPlugin
from .blueprint import stripe_bp

__all__ = [
    "AuthResult",
    "ExchangeError",
    "InternalOAuthError",
    "OAuth2Strategy",
    "ProfileFetchError",
    "Strategy",
    "StripeStrategy",
    "StripeTokenGeneratorPlugin",
    "stripe_bp",
    "__version__",
]
