"""
dserver plugin registration for the Stripe token generator.

This module provides the plugin class that integrates with dservercore's
plugin discovery system via the ExtensionABC interface.
"""

import logging

from flask import Flask

from .blueprint import EXTENSION_KEY, stripe_bp
from .config import PluginConfig
from .jwt_utils import JwtTokenGenerator
from .strategy import StripeStrategy
from .verify import default_verify

logger = logging.getLogger(__name__)


class StripeTokenGeneratorPlugin:
    """
    Stripe Token Generator Plugin for dserver.

    Authenticates users with their Stripe Connect account and issues JWT
    tokens. Implements the dservercore ExtensionABC interface.
    """

    def __init__(self, app: Flask = None, config: PluginConfig = None, verify=None):
        """
        Initialize the plugin.

        Args:
            app: Flask application instance (optional, can call init_app later)
            config: Plugin configuration, loaded from the environment if omitted
            verify: Verify callback, defaults to accepting every Stripe account
        """
        self.app = app
        self.config = config
        self.verify = verify or default_verify
        self.strategy: StripeStrategy = None
        self.jwt_generator: JwtTokenGenerator = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask, *args, **kwargs):
        """
        Initialize the plugin with a Flask application.

        This is called by dservercore's app factory.
        """
        self.app = app

        if self.config is None:
            self.config = PluginConfig.from_env()

        try:
            self.strategy = StripeStrategy(self.config.oauth2, self.verify)
        except ValueError as e:
            self.strategy = None
            logger.warning(f"Stripe login not fully configured: {e}")
        self.jwt_generator = JwtTokenGenerator(self.config.jwt)
        app.extensions[EXTENSION_KEY] = self

        if not app.config.get("SECRET_KEY"):
            logger.warning(
                "Flask SECRET_KEY not set. Sessions will not persist across restarts."
            )

        logger.info("Stripe Token Generator plugin initialized")
        if self.strategy is not None:
            logger.info(f"Authorization URL: {self.strategy.authorization_url}")

    def get_blueprint(self):
        """
        Return the Flask blueprint for this extension.

        Required by dservercore ExtensionABC.
        """
        return stripe_bp

    def register_dataset(self, dataset_info):
        """Register a dataset (no-op for auth plugin)."""
        pass

    def get_config(self):
        """
        Return plugin configuration dictionary.

        Loaded BEFORE init_app, so session settings go here.
        """
        return {
            # SAMESITE must be "Lax" for the Stripe redirect to carry the session
            "SESSION_COOKIE_SECURE": False,
            "SESSION_COOKIE_HTTPONLY": True,
            "SESSION_COOKIE_SAMESITE": "Lax",
        }

    def get_config_secrets_to_obfuscate(self):
        """Return config keys that should not be exposed."""
        return ["STRIPE_CLIENT_SECRET"]

    @staticmethod
    def get_name() -> str:
        return "stripe-token-generator"

    @staticmethod
    def get_version() -> str:
        from . import __version__
        return __version__

    @staticmethod
    def get_description() -> str:
        return "Stripe Connect OAuth 2.0 token generator for dserver"
