"""CLI for Kraken Proxy."""
from typing import Optional

import click
import uvicorn
from dotenv import load_dotenv

from kraken_proxy.dependencies import check_server_secret
from kraken_proxy.domain.credentials.envelope import EnvelopeCodec, ServerSecret
from kraken_proxy.domain.credentials.tokens import CredentialPair, CredentialTokenService
from kraken_proxy.settings import Settings


@click.group()
def cli():
    """Kraken Proxy CLI."""
    load_dotenv()


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to HOST)")
@click.option("--port", type=int, default=None, help="Bind port (defaults to PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the HTTP server."""
    settings = Settings()
    host = host or settings.host
    port = port or settings.port

    click.echo(f"Kraken Proxy listening at http://{host}:{port}")
    uvicorn.run(
        "kraken_proxy.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower()
    )


@cli.command("issue-token")
@click.option("--api-key", required=True, help="Kraken API key")
@click.option("--api-secret", required=True, prompt=True, hide_input=True, help="Kraken API secret")
def issue_token(api_key: str, api_secret: str):
    """Seal a credential pair with the configured APP_SECRET and print the token."""
    if not api_key or not api_secret:
        raise click.UsageError("Both --api-key and --api-secret must be non-empty")

    settings = Settings()
    secret = ServerSecret.from_passphrase(settings.app_secret)
    tokens = CredentialTokenService(EnvelopeCodec(secret))
    click.echo(tokens.issue(CredentialPair(api_key=api_key, api_secret=api_secret)))


@cli.command("check-secret")
def check_secret():
    """Report weaknesses of the configured APP_SECRET."""
    settings = Settings()
    secret = ServerSecret.from_passphrase(settings.app_secret)

    click.echo(f"development default: {'yes' if settings.uses_dev_secret else 'no'}")
    click.echo(f"padded to 32 bytes:  {'yes' if secret.is_padded else 'no'}")
    click.echo(f"truncated to 32 bytes: {'yes' if secret.is_truncated else 'no'}")
    try:
        check_server_secret(settings, secret)
    except RuntimeError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
