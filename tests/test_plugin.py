"""Tests for plugin registration."""

import logging
from dataclasses import replace
from unittest.mock import Mock

from flask import Flask

from dserver_token_generator_plugin_stripe import StripeStrategy, StripeTokenGeneratorPlugin


class TestStripeTokenGeneratorPlugin:
    def test_registers_extension(self, app, plugin):
        assert isinstance(plugin, StripeTokenGeneratorPlugin)
        assert isinstance(plugin.strategy, StripeStrategy)
        assert plugin.strategy.token_url == "https://connect.stripe.com/oauth/token"

    def test_metadata(self):
        assert StripeTokenGeneratorPlugin.get_name() == "stripe-token-generator"
        assert StripeTokenGeneratorPlugin.get_version() == "0.1.0"
        assert StripeTokenGeneratorPlugin().get_config_secrets_to_obfuscate() == [
            "STRIPE_CLIENT_SECRET"
        ]

    def test_custom_verify(self, plugin_config):
        verify = Mock()
        app = Flask(__name__)

        plugin = StripeTokenGeneratorPlugin(app, config=plugin_config, verify=verify)

        assert plugin.verify is verify
        assert app.extensions["stripe_auth"] is plugin

    def test_one_strategy_per_app(self, plugin_config):
        first = StripeTokenGeneratorPlugin(Flask("first"), config=plugin_config)
        second = StripeTokenGeneratorPlugin(Flask("second"), config=plugin_config)

        assert first.strategy is not second.strategy

    def test_missing_credentials_keep_host_running(self, plugin_config, caplog):
        unconfigured = replace(
            plugin_config,
            oauth2=replace(plugin_config.oauth2, client_id="", client_secret=""),
        )
        app = Flask(__name__)

        with caplog.at_level(logging.WARNING):
            plugin = StripeTokenGeneratorPlugin(app, config=unconfigured)

        assert plugin.strategy is None
        assert plugin.jwt_generator is not None
        assert app.extensions["stripe_auth"] is plugin
        assert "Stripe login not fully configured" in caplog.text
