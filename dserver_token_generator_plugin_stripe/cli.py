"""
Flask CLI commands for Stripe plugin management.

These commands help with setup and debugging of the Stripe Connect
integration.
"""

from pathlib import Path

import click
import httpx
from flask.cli import with_appcontext

from .config import PluginConfig
from .strategy import AUTHORIZATION_URL, SCOPE_SEPARATOR, TOKEN_URL


@click.group("stripe-auth")
def stripe_auth_cli():
    """Stripe token generator management commands."""
    pass


@stripe_auth_cli.command("show-config")
@with_appcontext
def show_config():
    """Display current Stripe OAuth configuration."""
    config = PluginConfig.from_env()
    oauth2 = config.oauth2

    click.echo("=== Stripe Connect Configuration ===")
    click.echo(f"Authorization URL: {oauth2.authorization_url or AUTHORIZATION_URL}")
    click.echo(f"Token URL: {oauth2.token_url or TOKEN_URL}")
    click.echo(f"Scope separator: {oauth2.scope_separator or SCOPE_SEPARATOR!r}")
    click.echo(f"Scope: {oauth2.scope or 'Not configured'}")
    click.echo(f"Callback URL: {oauth2.callback_url}")
    click.echo(f"Client ID: {oauth2.client_id[:8] + '...' if oauth2.client_id else 'Not configured'}")
    click.echo(f"Client Secret: {'Configured' if oauth2.client_secret else 'Not configured'}")

    click.echo("\n=== JWT Configuration ===")
    click.echo(f"Private Key File: {config.jwt.private_key_file}")
    click.echo(f"Public Key File: {config.jwt.public_key_file}")
    click.echo(f"Algorithm: {config.jwt.algorithm}")
    click.echo(f"Issuer: {config.jwt.issuer}")
    click.echo(f"Token Expiry: {config.jwt.token_expiry_hours} hours")


@stripe_auth_cli.command("validate-config")
@with_appcontext
def validate_config():
    """Validate the current configuration."""
    config = PluginConfig.from_env()
    errors = []
    warnings = []

    if not Path(config.jwt.private_key_file).exists():
        errors.append(f"JWT private key not found: {config.jwt.private_key_file}")
    if not Path(config.jwt.public_key_file).exists():
        errors.append(f"JWT public key not found: {config.jwt.public_key_file}")

    if not config.oauth2.client_id:
        errors.append("STRIPE_CLIENT_ID not configured")
    elif not config.oauth2.client_id.startswith("ca_"):
        warnings.append("STRIPE_CLIENT_ID does not look like a Connect client ID (ca_...)")
    if not config.oauth2.client_secret:
        errors.append("STRIPE_CLIENT_SECRET not configured")
    if not config.oauth2.scope:
        warnings.append("STRIPE_SCOPE not configured, Stripe will default to read_only")

    if warnings:
        click.echo("=== Warnings ===")
        for warning in warnings:
            click.echo(f"  ! {warning}")

    if errors:
        click.echo("\n=== Errors ===")
        for error in errors:
            click.echo(f"  x {error}")
        click.echo(f"\nConfiguration validation failed with {len(errors)} error(s)")
        raise SystemExit(1)

    click.echo("\n[OK] Configuration is valid!")


@stripe_auth_cli.command("test-connection")
@with_appcontext
def test_connection():
    """Test connectivity to the Stripe Connect endpoints."""
    config = PluginConfig.from_env()

    click.echo("=== Testing Stripe Connectivity ===\n")

    endpoints = [
        ("Authorization URL", "HEAD", config.oauth2.authorization_url or AUTHORIZATION_URL),
        # Without credentials the token endpoint answers with an error status
        ("Token URL", "POST", config.oauth2.token_url or TOKEN_URL),
    ]

    with httpx.Client(timeout=10) as client:
        for label, method, url in endpoints:
            try:
                client.request(method, url, follow_redirects=True)
                click.echo(f"[OK] {label} reachable: {url}")
            except httpx.HTTPError as e:
                click.echo(f"[FAIL] {label}: {e}")
