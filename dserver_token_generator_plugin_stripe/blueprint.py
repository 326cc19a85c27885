"""
Flask blueprint for Stripe Connect authentication.

This blueprint provides the following endpoints:
- GET /auth/login - Redirect to Stripe to authorize the account
- GET /auth/callback - Stripe callback (receives authorization code)
- GET /auth/logout - Clear session and logout
- GET /auth/token - Get current user's JWT token
- POST /auth/refresh - Refresh an existing JWT token
- POST /auth/verify - Verify a JWT token
- GET /auth/info - Describe the login provider
"""

import logging
import secrets

from flask import (
    current_app,
    jsonify,
    make_response,
    redirect,
    request,
    session,
    url_for,
)
from flask_smorest import Blueprint

from .jwt_utils import provider_claims
from .strategy import StripeStrategy

logger = logging.getLogger(__name__)

EXTENSION_KEY = "stripe_auth"

# flask_smorest Blueprint is required by dservercore
stripe_bp = Blueprint(
    "stripe_auth",
    __name__,
    url_prefix="/auth",
    description="Stripe Connect authentication endpoints"
)


def get_plugin():
    """Return the plugin registered on the current application."""
    return current_app.extensions[EXTENSION_KEY]


@stripe_bp.route("/login")
def login():
    """
    Redirect the user to Stripe to connect their account.

    Query Parameters:
        next: URL to redirect to after successful login (optional)
    """
    plugin = get_plugin()
    config = plugin.config

    if plugin.strategy is None:
        return jsonify({
            "error": "Stripe login not configured",
            "message": "STRIPE_CLIENT_ID and STRIPE_CLIENT_SECRET must be set"
        }), 500

    try:
        state = secrets.token_urlsafe(32)
        session["stripe_state"] = state
        session["auth_return_url"] = request.args.get(
            "next", config.login_success_redirect
        )
        session.modified = True

        authorization_url, _ = plugin.strategy.create_authorization_url(state=state)

        logger.info("Initiating Stripe login, redirecting to provider")
        return redirect(authorization_url)

    except Exception as e:
        logger.error(f"Error initiating Stripe login: {e}")
        return jsonify({"error": "Failed to initiate authentication"}), 500


@stripe_bp.route("/callback")
def callback():
    """
    Stripe callback endpoint.

    Exchanges the authorization code for an access token, loads the connected
    account and issues a dserver JWT.
    """
    plugin = get_plugin()
    config = plugin.config

    if plugin.strategy is None:
        logger.error("Stripe callback received but Stripe login is not configured")
        return redirect(config.login_error_redirect)

    try:
        state = request.args.get("state")
        stored_state = session.pop("stripe_state", None)

        if not state or state != stored_state:
            logger.warning("Stripe state mismatch, rejecting callback")
            return redirect(config.login_error_redirect)

        error = request.args.get("error")
        if error:
            error_description = request.args.get("error_description", "Unknown error")
            logger.error(f"Stripe OAuth error: {error} - {error_description}")
            return redirect(config.login_error_redirect)

        code = request.args.get("code")
        if not code:
            logger.error("No authorization code received")
            return redirect(config.login_error_redirect)

        result = plugin.strategy.authenticate(code)
        logger.debug(f"Connected account: {result.token.get('stripe_user_id')}")

        user = result.user
        if not user:
            logger.warning(f"Stripe login rejected: {result.info}")
            return redirect(config.login_error_redirect)

        username = user["username"]
        token = plugin.jwt_generator.generate_token(
            username=username,
            display_name=user.get("display_name"),
            email=user.get("email"),
            additional_claims={
                **provider_claims(user),
                "provider": plugin.strategy.name,
            },
        )

        session["username"] = username
        session["jwt_token"] = token
        session["provider"] = plugin.strategy.name

        return_url = session.pop("auth_return_url", config.login_success_redirect)
        separator = "&" if "?" in return_url else "?"
        response = make_response(redirect(f"{return_url}{separator}token={token}"))

        response.set_cookie(
            "dserver_token",
            token,
            httponly=False,
            secure=request.is_secure,
            samesite="Lax",
            max_age=config.jwt.token_expiry_hours * 3600,
        )

        logger.info(f"User {username} authenticated successfully via Stripe")
        return response

    except Exception as e:
        logger.exception(f"Error processing Stripe callback: {e}")
        return redirect(config.login_error_redirect)


@stripe_bp.route("/logout")
def logout():
    """Logout and clear session."""
    config = get_plugin().config

    session.clear()

    response = make_response(redirect(config.frontend_url))
    response.delete_cookie("dserver_token")

    logger.info("User logged out")
    return response


@stripe_bp.route("/token", methods=["GET"])
def get_token():
    """Return the current user's JWT token."""
    token = session.get("jwt_token")

    if not token:
        return jsonify({
            "error": "Not authenticated",
            "login_url": url_for("stripe_auth.login", _external=True),
        }), 401

    return jsonify({
        "token": token,
        "username": session.get("username"),
        "provider": session.get("provider"),
        "token_type": "Bearer",
    })


@stripe_bp.route("/refresh", methods=["POST"])
def refresh_token():
    """
    Refresh an existing JWT token.

    Request body:
        {
            "token": "existing_jwt_token"
        }
    """
    data = request.get_json(silent=True)

    if not data or "token" not in data:
        return jsonify({"error": "Missing token"}), 400

    new_token = get_plugin().jwt_generator.refresh_token(data["token"])

    if not new_token:
        return jsonify({"error": "Invalid or expired token"}), 401

    return jsonify({
        "token": new_token,
        "token_type": "Bearer",
    })


@stripe_bp.route("/verify", methods=["POST"])
def verify_token():
    """
    Verify a JWT token and return its claims.

    Request body:
        {
            "token": "jwt_token_to_verify"
        }
    """
    data = request.get_json(silent=True)

    if not data or "token" not in data:
        return jsonify({"error": "Missing token"}), 400

    claims = get_plugin().jwt_generator.verify_token(data["token"])

    if not claims:
        return jsonify({"error": "Invalid or expired token"}), 401

    return jsonify({
        "valid": True,
        "claims": claims,
    })


@stripe_bp.route("/info")
def auth_info():
    """Return information about the login provider for the frontend."""
    plugin = get_plugin()

    return jsonify({
        "provider": StripeStrategy.name,
        "login_url": url_for("stripe_auth.login", _external=True),
        "configured": plugin.strategy is not None,
    })
