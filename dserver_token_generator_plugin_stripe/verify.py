"""
Default verify callback mapping a connected Stripe account to a dserver user.

Applications with their own user store pass a different callback to
``StripeTokenGeneratorPlugin``.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


def _field(record, *path):
    """
    Read a nested field from an account record.

    Works on plain dicts and on ``stripe.StripeObject`` records, which only
    support key lookup and membership tests.
    """
    for key in path:
        if record is None or key not in record:
            return None
        record = record[key]
    return record


def account_display_name(account) -> Optional[str]:
    """
    Determine a display name for a Stripe account.

    Falls back from the public business profile name to the dashboard display
    name and the legacy ``business_name`` field.
    """
    return (
        _field(account, "business_profile", "name")
        or _field(account, "settings", "dashboard", "display_name")
        or _field(account, "business_name")
    )


def account_user_info(account) -> dict:
    """
    Build the user info dictionary for a Stripe account.

    Args:
        account: Account record as returned by Stripe

    Returns:
        Dictionary with username, display_name, email and provider details
    """
    account_id = _field(account, "id")
    return {
        "username": account_id,
        "display_name": account_display_name(account),
        "email": _field(account, "email"),
        "provider": "stripe",
        "provider_user_id": account_id,
        "livemode": _field(account, "livemode"),
    }


def default_verify(access_token, refresh_token, account, done):
    """Accept every Stripe account that has an ID."""
    if not _field(account, "id"):
        logger.warning("Stripe account has no ID, rejecting login")
        done(None, None, {"message": "Stripe account has no ID"})
        return

    done(None, account_user_info(account))
