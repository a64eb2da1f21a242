"""Kraken account operations exposed by the proxy."""
from typing import Any

from kraken_proxy.adapters.kraken.client import KrakenClient
from kraken_proxy.domain.credentials.tokens import CredentialPair


class KrakenService:
    def __init__(self, client: KrakenClient):
        self.client = client

    async def get_ws_token(self, credentials: CredentialPair) -> str:
        return await self.client.get_ws_auth_token(credentials)

    async def get_balance(self, credentials: CredentialPair) -> Any:
        return await self.client.private_rest_request("Balance", credentials)
