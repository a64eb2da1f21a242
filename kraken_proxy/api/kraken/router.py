"""Kraken API Router - private endpoints called with the caller's credentials."""
import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from kraken_proxy.dependencies import get_app_settings, get_kraken_service
from kraken_proxy.domain.credentials.tokens import CredentialPair
from kraken_proxy.domain.kraken.service import KrakenService
from kraken_proxy.errors import ValidationError
from kraken_proxy.middleware.auth import AuthResult, authorize
from kraken_proxy.middleware.error_boundary import error_response
from kraken_proxy.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_credentials(credentials: CredentialPair, min_length: int) -> None:
    if len(credentials.api_key) < min_length or len(credentials.api_secret) < min_length:
        logger.error(
            f"Invalid credentials format: key_length={len(credentials.api_key)} "
            f"secret_length={len(credentials.api_secret)}"
        )
        raise ValidationError("Invalid credentials format. Please login again.")


@router.get("/", response_class=PlainTextResponse)
async def hello() -> str:
    return "Kraken Proxy is running"


@router.get("/ws-token")
async def get_ws_token(
    auth: AuthResult = Depends(authorize),
    kraken: KrakenService = Depends(get_kraken_service),
    settings: Settings = Depends(get_app_settings)
) -> Any:
    """Token for connecting directly to wss://ws-auth.kraken.com/."""
    if not auth.ok:
        return error_response(auth.error)

    _check_credentials(auth.credentials, settings.min_credential_length)
    token = await kraken.get_ws_token(auth.credentials)
    return {"result": {"token": token}}


@router.get("/balance")
async def get_balance(
    auth: AuthResult = Depends(authorize),
    kraken: KrakenService = Depends(get_kraken_service),
    settings: Settings = Depends(get_app_settings)
) -> Any:
    """Account balances keyed by Kraken asset code."""
    if not auth.ok:
        return error_response(auth.error)

    _check_credentials(auth.credentials, settings.min_credential_length)
    return await kraken.get_balance(auth.credentials)
