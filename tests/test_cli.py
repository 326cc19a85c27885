"""Tests for the stripe-auth CLI commands."""

from unittest.mock import patch

import httpx
import pytest

from dserver_token_generator_plugin_stripe.cli import stripe_auth_cli


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def stripe_env(monkeypatch, jwt_config):
    monkeypatch.setenv("STRIPE_CLIENT_ID", "ca_123456789")
    monkeypatch.setenv("STRIPE_CLIENT_SECRET", "sk_test_123")
    monkeypatch.setenv("STRIPE_SCOPE", "read_write")
    monkeypatch.delenv("STRIPE_TOKEN_URL", raising=False)
    monkeypatch.setenv("JWT_PRIVATE_KEY_FILE", jwt_config.private_key_file)
    monkeypatch.setenv("JWT_PUBLIC_KEY_FILE", jwt_config.public_key_file)
    return monkeypatch


class TestShowConfig:
    def test_masks_credentials(self, runner, stripe_env):
        result = runner.invoke(stripe_auth_cli, ["show-config"])

        assert result.exit_code == 0
        assert "Client ID: ca_12345..." in result.output
        assert "sk_test_123" not in result.output
        assert "https://connect.stripe.com/oauth/token" in result.output


class TestValidateConfig:
    def test_valid(self, runner, stripe_env):
        result = runner.invoke(stripe_auth_cli, ["validate-config"])

        assert result.exit_code == 0
        assert "[OK] Configuration is valid!" in result.output

    def test_missing_client_secret(self, runner, stripe_env):
        stripe_env.delenv("STRIPE_CLIENT_SECRET")

        result = runner.invoke(stripe_auth_cli, ["validate-config"])

        assert result.exit_code == 1
        assert "STRIPE_CLIENT_SECRET not configured" in result.output


class TestTestConnection:
    def test_reports_failures(self, runner, stripe_env):
        with patch.object(
            httpx.Client, "request", side_effect=httpx.ConnectError("unreachable")
        ):
            result = runner.invoke(stripe_auth_cli, ["test-connection"])

        assert result.exit_code == 0
        assert "[FAIL] Authorization URL: unreachable" in result.output
        assert "[FAIL] Token URL: unreachable" in result.output

    def test_reports_reachable(self, runner, stripe_env):
        with patch.object(httpx.Client, "request") as request:
            result = runner.invoke(stripe_auth_cli, ["test-connection"])

        assert request.call_count == 2
        assert "[OK] Token URL reachable: https://connect.stripe.com/oauth/token" in result.output
