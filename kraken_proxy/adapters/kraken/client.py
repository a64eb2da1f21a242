"""Kraken Upstream Client - thin wrapper around krakenex."""
import asyncio
import binascii
import logging
from typing import Any, Dict, Optional

import krakenex
import requests

from kraken_proxy.domain.credentials.tokens import CredentialPair
from kraken_proxy.errors import UpstreamError

logger = logging.getLogger(__name__)

# Timeout configuration
DEFAULT_TIMEOUT = 10.0
KRAKEN_DEFAULT_URL = "https://api.kraken.com"


class KrakenClient:
    """Runs private Kraken calls with per-request credentials.

    krakenex is blocking, so every call is pushed onto a worker thread.
    """

    def __init__(self, api_url: str = KRAKEN_DEFAULT_URL, timeout: float = DEFAULT_TIMEOUT):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    async def get_ws_auth_token(self, credentials: CredentialPair) -> str:
        """Fetch a token for wss://ws-auth.kraken.com/."""
        result = await self.private_rest_request("GetWebSocketsToken", credentials)
        token = result.get("token") if isinstance(result, dict) else None
        if not token:
            raise UpstreamError("Kraken returned no websocket token")
        return token

    async def private_rest_request(
        self,
        endpoint: str,
        credentials: CredentialPair,
        data: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Call a private endpoint and return its ``result`` payload."""
        return await asyncio.to_thread(self._query_private, endpoint, credentials, data)

    def _query_private(
        self,
        endpoint: str,
        credentials: CredentialPair,
        data: Optional[Dict[str, Any]]
    ) -> Any:
        api = krakenex.API(key=credentials.api_key, secret=credentials.api_secret)
        api.uri = self.api_url
        try:
            response = api.query_private(endpoint, data=data, timeout=self.timeout)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else 502
            logger.error(f"Kraken {endpoint} returned HTTP {status}")
            raise UpstreamError(f"Kraken returned HTTP {status}", status_code=status) from e
        except requests.RequestException as e:
            logger.error(f"Kraken {endpoint} request failed: {type(e).__name__}")
            raise UpstreamError("Kraken API unreachable", status_code=502) from e
        except binascii.Error as e:
            # krakenex base64-decodes the secret before signing
            raise UpstreamError("Invalid Kraken API secret", status_code=400) from e
        finally:
            api.close()

        errors = response.get("error") or []
        if errors:
            message = ", ".join(str(err) for err in errors)
            logger.warning(f"Kraken {endpoint} rejected request: {message}")
            raise UpstreamError(message)

        return response.get("result")
