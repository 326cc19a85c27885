"""
Stripe authentication strategy.

Authenticates requests by delegating to Stripe Connect using the OAuth 2.0
protocol. Applications supply a ``verify`` callback which receives the access
token, refresh token and the connected Stripe account, and calls ``done`` with
the application user (or a falsy value if the account is not accepted)::

    def verify(access_token, refresh_token, account, done):
        done(None, {"username": account["id"]})

    strategy = StripeStrategy(
        {
            "client_id": "ca_123",
            "client_secret": "sk_live_...",
            "callback_url": "https://www.example.net/auth/callback",
        },
        verify,
    )

See https://stripe.com/docs/connect/oauth-reference
"""

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Tuple, Union

import stripe

from .config import OAuth2Config
from .errors import ProfileFetchError
from .oauth2 import AuthResult, Done, OAuth2Strategy, VerifyCallback

logger = logging.getLogger(__name__)

AUTHORIZATION_URL = "https://connect.stripe.com/oauth/authorize"
TOKEN_URL = "https://connect.stripe.com/oauth/token"
SCOPE_SEPARATOR = ","

PROFILE_FETCH_MESSAGE = "Failed to fetch user account"


class StripeAccountClient:
    """Stripe API access scoped to a connected account's access token."""

    def __init__(self, access_token: str):
        self.access_token = access_token

    def retrieve(self) -> stripe.Account:
        """Retrieve the account the access token belongs to."""
        return stripe.Account.retrieve(api_key=self.access_token)


class StripeStrategy:
    """OAuth2 strategy for Stripe Connect accounts."""

    name = "stripe"

    def __init__(
        self,
        options: Union[OAuth2Config, Mapping],
        verify: VerifyCallback,
        client_factory: Callable[[str], Any] = StripeAccountClient,
    ):
        if isinstance(options, Mapping):
            options = OAuth2Config(**options)

        self.config = dataclasses.replace(
            options,
            authorization_url=options.authorization_url or AUTHORIZATION_URL,
            token_url=options.token_url or TOKEN_URL,
            scope_separator=options.scope_separator or SCOPE_SEPARATOR,
        )
        self.authorization_url = self.config.authorization_url
        self.token_url = self.config.token_url
        self.scope_separator = self.config.scope_separator

        self._client_factory = client_factory
        self._oauth2 = OAuth2Strategy(self.config, verify, provider=self)

    def authorization_params(self, options: dict) -> dict:
        """
        Return extra parameters to be included in the authorization request.

        Stripe accepts non-standard parameters such as ``stripe_landing`` or
        ``stripe_user[business_type]``. Subclasses can override this to add
        them; the default passes the options through unchanged.
        """
        return options

    def user_profile(self, access_token: str, done: Done) -> None:
        """
        Retrieve the connected account from Stripe.

        Calls ``done(None, account)`` with the account exactly as Stripe
        returned it, or ``done(ProfileFetchError, None)`` if the API call
        failed.
        """
        try:
            account = self._client_factory(access_token).retrieve()
        except Exception as e:
            logger.warning(f"Stripe account lookup failed: {e}")
            done(ProfileFetchError(PROFILE_FETCH_MESSAGE, e), None)
            return

        try:
            done(None, account)
        except Exception:
            # Raised by the caller's own handling of the profile; not a Stripe error
            logger.exception("Profile callback raised after Stripe account lookup")

    def create_authorization_url(
        self, state: Optional[str] = None, **options
    ) -> Tuple[str, str]:
        """Build the Stripe authorization redirect URL."""
        return self._oauth2.create_authorization_url(state=state, **options)

    def authenticate(self, code: str) -> AuthResult:
        """Complete the flow for an authorization code returned by Stripe."""
        return self._oauth2.authenticate(code)
