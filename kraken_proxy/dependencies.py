"""Dependency Injection Module.

The object graph is built once by ``build_container`` and stored on
``app.state``; these providers only read it back.
"""
import logging
from dataclasses import dataclass

from fastapi import Request

from kraken_proxy.adapters.kraken.client import KrakenClient
from kraken_proxy.domain.credentials.envelope import EnvelopeCodec, ServerSecret
from kraken_proxy.domain.credentials.tokens import CredentialTokenService
from kraken_proxy.domain.kraken.service import KrakenService
from kraken_proxy.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    settings: Settings
    token_service: CredentialTokenService
    kraken_service: KrakenService


def check_server_secret(settings: Settings, secret: ServerSecret) -> None:
    """Refuse weak secrets in prod and warn about them elsewhere."""
    problems = []
    if settings.uses_dev_secret:
        problems.append("APP_SECRET is the development default")
    if secret.is_padded:
        problems.append("APP_SECRET is shorter than 32 bytes and was space-padded")
    if secret.is_truncated:
        logger.info("APP_SECRET is longer than 32 bytes; only the first 32 bytes are used")

    for problem in problems:
        logger.warning(f"Weak server secret: {problem}")
    if problems and settings.is_prod:
        raise RuntimeError(f"In PROD, {problems[0]}")


def build_container(settings: Settings) -> Container:
    secret = ServerSecret.from_passphrase(settings.app_secret)
    check_server_secret(settings, secret)

    client = KrakenClient(api_url=settings.kraken_api_url, timeout=settings.kraken_timeout_seconds)
    return Container(
        settings=settings,
        token_service=CredentialTokenService(EnvelopeCodec(secret)),
        kraken_service=KrakenService(client)
    )


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_app_settings(request: Request) -> Settings:
    return get_container(request).settings


def get_token_service(request: Request) -> CredentialTokenService:
    return get_container(request).token_service


def get_kraken_service(request: Request) -> KrakenService:
    return get_container(request).kraken_service
