"""
pytest configuration for the Stripe token generator plugin tests.
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from flask import Flask

from dserver_token_generator_plugin_stripe import StripeTokenGeneratorPlugin
from dserver_token_generator_plugin_stripe.config import (
    JwtConfig,
    OAuth2Config,
    PluginConfig,
)


@pytest.fixture
def oauth2_config():
    return OAuth2Config(
        client_id="abc",
        client_secret="xyz",
        callback_url="https://app.example/cb",
    )


@pytest.fixture
def jwt_config(tmp_path):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )

    private_file = tmp_path / "jwt_key"
    public_file = tmp_path / "jwt_key.pub"
    private_file.write_bytes(private_pem)
    public_file.write_bytes(public_pem)

    return JwtConfig(
        private_key_file=str(private_file),
        public_key_file=str(public_file),
    )


@pytest.fixture
def plugin_config(oauth2_config, jwt_config):
    return PluginConfig(
        oauth2=oauth2_config,
        jwt=jwt_config,
        login_success_redirect="/datasets",
        login_error_redirect="/login?error=auth_failed",
    )


@pytest.fixture
def app(plugin_config):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "test-secret"
    app.config["TESTING"] = True

    plugin = StripeTokenGeneratorPlugin(config=plugin_config)
    app.config.update(plugin.get_config())
    plugin.init_app(app)
    app.register_blueprint(plugin.get_blueprint())
    return app


@pytest.fixture
def plugin(app):
    return app.extensions["stripe_auth"]


@pytest.fixture
def client(app):
    return app.test_client()
