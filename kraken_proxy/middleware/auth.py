"""Bearer-token authorization for the protected Kraken routes.

The gate never raises for a bad or missing token. It returns an
``AuthResult`` and each handler branches on it, so rejections stay ordinary
control flow and only real defects reach the exception boundary.
"""
import logging
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from fastapi import Depends, Header

from kraken_proxy.dependencies import get_token_service
from kraken_proxy.domain.credentials.tokens import CredentialPair, CredentialTokenService
from kraken_proxy.errors import AuthenticationError, IntegrityError, TokenFormatError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
NO_CREDENTIALS_MESSAGE = "No credentials provided"
INVALID_TOKEN_MESSAGE = "Invalid authentication token"


@dataclass(frozen=True)
class Authorized:
    credentials: CredentialPair
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Rejected:
    error: AuthenticationError
    ok: ClassVar[bool] = False


AuthResult = Union[Authorized, Rejected]


def _reject(message: str) -> Rejected:
    return Rejected(AuthenticationError(message))


def authenticate(authorization: Optional[str], tokens: CredentialTokenService) -> AuthResult:
    """Resolve a raw Authorization header value into credentials or a rejection."""
    if not authorization:
        return _reject(NO_CREDENTIALS_MESSAGE)

    if not authorization.startswith(BEARER_PREFIX):
        logger.warning("Rejected Authorization header without Bearer scheme")
        return _reject(INVALID_TOKEN_MESSAGE)

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        logger.warning("Rejected Bearer header with empty token")
        return _reject(INVALID_TOKEN_MESSAGE)

    try:
        credentials = tokens.redeem(token)
    except IntegrityError as e:
        logger.warning(f"Invalid token (reason=integrity): {e.message}")
        return _reject(INVALID_TOKEN_MESSAGE)
    except TokenFormatError as e:
        logger.warning(f"Invalid token (reason=format): {e.message}")
        return _reject(INVALID_TOKEN_MESSAGE)

    return Authorized(credentials)


async def authorize(
    authorization: Optional[str] = Header(None),
    tokens: CredentialTokenService = Depends(get_token_service)
) -> AuthResult:
    """FastAPI dependency wrapping ``authenticate``."""
    return authenticate(authorization, tokens)
