"""
Generic OAuth 2.0 authorization code flow.

The flow itself is carried out by authlib's ``OAuth2Session``. This module
wires it to a provider strategy: the strategy contributes extra
authorization parameters and loads the account profile once an access token
has been obtained, and an application supplied ``verify`` callback maps the
result to an application user.

Callbacks follow the ``done(err, value)`` convention::

    def verify(access_token, refresh_token, profile, done):
        done(None, {"username": profile["id"]})
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, Tuple, runtime_checkable

from authlib.integrations.requests_client import OAuth2Session

from .config import OAuth2Config
from .errors import ExchangeError

logger = logging.getLogger(__name__)

Done = Callable[..., None]
VerifyCallback = Callable[[str, Optional[str], Any, Done], None]


@runtime_checkable
class Strategy(Protocol):
    """Capabilities the host dispatches on for every provider."""

    name: str

    def authorization_params(self, options: dict) -> dict:
        ...

    def user_profile(self, access_token: str, done: Done) -> None:
        ...


@dataclass
class AuthResult:
    """Outcome of a completed authorization code flow."""

    user: Any
    info: Any = None
    token: dict = field(default_factory=dict)


class _Completion:
    """Record the first ``done(err, value, info)`` call of a callback."""

    def __init__(self):
        self.called = False
        self.error = None
        self.value = None
        self.info = None

    def __call__(self, error=None, value=None, info=None):
        if self.called:
            logger.warning("Completion callback invoked more than once, ignoring")
            return
        self.called = True
        self.error = error
        self.value = value
        self.info = info


class OAuth2Strategy:
    """
    OAuth 2.0 authorization code flow driven by authlib.

    Provider strategies hold an instance of this class and pass themselves as
    ``provider`` so their hooks are used instead of the generic ones.
    """

    name = "oauth2"

    def __init__(
        self,
        config: OAuth2Config,
        verify: VerifyCallback,
        provider: Optional[Strategy] = None,
    ):
        if verify is None:
            raise ValueError("OAuth2Strategy requires a verify callback")
        for attribute in ("authorization_url", "token_url", "client_id",
                          "client_secret", "callback_url"):
            if not getattr(config, attribute):
                raise ValueError(f"OAuth2Strategy requires a {attribute} option")

        self.config = config
        self._verify = verify
        self._provider = provider if provider is not None else self

    def authorization_params(self, options: dict) -> dict:
        """Return extra parameters for the authorization request."""
        return options

    def user_profile(self, access_token: str, done: Done) -> None:
        """Load the account profile; the generic flow has none."""
        done(None, {})

    def _scope(self) -> Optional[str]:
        scope = self.config.scope
        if scope is None or isinstance(scope, str):
            return scope
        return (self.config.scope_separator or " ").join(scope)

    def create_session(self, state: Optional[str] = None) -> OAuth2Session:
        """Create an authlib session for the configured provider."""
        return OAuth2Session(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            token_endpoint_auth_method=self.config.token_endpoint_auth_method,
            redirect_uri=self.config.callback_url,
            scope=self._scope(),
            state=state,
        )

    def create_authorization_url(
        self, state: Optional[str] = None, **options
    ) -> Tuple[str, str]:
        """
        Build the URL the user is redirected to for authorization.

        Args:
            state: CSRF state value, generated by authlib when omitted
            **options: Extra query parameters, filtered through the
                provider's ``authorization_params`` hook

        Returns:
            Tuple of (authorization URL, state)
        """
        params = self._provider.authorization_params(dict(options))
        session = self.create_session(state=state)
        url, state = session.create_authorization_url(
            self.config.authorization_url,
            state=state,
            **params,
        )
        logger.debug(f"Authorization URL for {self._provider.name}: {url}")
        return url, state

    def exchange_code(self, code: str) -> dict:
        """
        Exchange an authorization code for an access token.

        Raises:
            ExchangeError: If the token endpoint rejects the code or cannot
                be reached
        """
        session = self.create_session()
        try:
            token = session.fetch_token(self.config.token_url, code=code)
        except Exception as e:
            raise ExchangeError("Failed to obtain access token", e) from e

        if not token or not token.get("access_token"):
            raise ExchangeError("Token response did not contain an access token")

        return dict(token)

    def authenticate(self, code: str) -> AuthResult:
        """
        Run the code exchange, profile lookup and verify callback.

        Returns:
            AuthResult whose ``user`` is falsy when ``verify`` rejected the
            account

        Raises:
            ExchangeError: If the code exchange failed
            Exception: Any error delivered by the profile hook or ``verify``
        """
        token = self.exchange_code(code)
        access_token = token["access_token"]

        profile = _Completion()
        self._provider.user_profile(access_token, profile)
        if profile.error is not None:
            raise profile.error

        verified = _Completion()
        self._verify(access_token, token.get("refresh_token"), profile.value, verified)
        if verified.error is not None:
            raise verified.error

        if not verified.value:
            logger.info(f"Verify callback rejected {self._provider.name} account")

        return AuthResult(user=verified.value, info=verified.info, token=token)
