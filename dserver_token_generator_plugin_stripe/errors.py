"""
Error types raised during the Stripe OAuth2 flow.
"""

from typing import Optional


class InternalOAuthError(Exception):
    """
    An error raised while talking to the OAuth2 provider.

    Wraps the original exception so the host can log the underlying cause
    while showing the user a generic message.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message


class ExchangeError(InternalOAuthError):
    """Authorization code could not be exchanged for an access token."""


class ProfileFetchError(InternalOAuthError):
    """The provider API call for the account profile failed."""
