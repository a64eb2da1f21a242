"""Credential tokens: a Kraken key/secret pair sealed into one bearer string."""
import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict

from kraken_proxy.domain.credentials.envelope import Envelope, EnvelopeCodec
from kraken_proxy.errors import TokenFormatError

# Real tokens are well under 1 KB
MAX_TOKEN_LENGTH = 8192


def _mask(value: str) -> str:
    if len(value) <= 6:
        return "***"
    return f"{value[:2]}***{value[-2:]}"


@dataclass(frozen=True)
class CredentialPair:
    """Kraken API credentials recovered for the duration of one request."""
    api_key: str
    api_secret: str

    def __repr__(self) -> str:
        return f"CredentialPair(api_key={_mask(self.api_key)!r}, api_secret='***')"

    __str__ = __repr__


class CredentialTokenService:
    """Issues and redeems stateless credential tokens.

    Tokens do not expire and cannot be revoked; they stay valid for as long as
    the server secret is unchanged.
    """

    def __init__(self, codec: EnvelopeCodec):
        self.codec = codec

    def issue(self, pair: CredentialPair) -> str:
        payload = {
            "key": self.codec.seal(pair.api_key).to_dict(),
            "secret": self.codec.seal(pair.api_secret).to_dict()
        }
        # Byte layout must match previously issued tokens
        raw = json.dumps(payload, separators=(",", ":"))
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    def redeem(self, token: str) -> CredentialPair:
        payload = self._decode(token)
        return CredentialPair(
            api_key=self.codec.open(Envelope.from_dict(payload["key"])),
            api_secret=self.codec.open(Envelope.from_dict(payload["secret"]))
        )

    @staticmethod
    def _decode(token: str) -> Dict[str, Any]:
        if not isinstance(token, str) or not token.strip():
            raise TokenFormatError("Empty token")

        compact = token.strip()
        if len(compact) > MAX_TOKEN_LENGTH:
            raise TokenFormatError(f"Token longer than {MAX_TOKEN_LENGTH} characters")
        compact += "=" * (-len(compact) % 4)
        try:
            raw = base64.b64decode(compact, validate=True)
            payload = json.loads(raw.decode("utf-8"))
        except (binascii.Error, ValueError, RecursionError) as e:
            # ValueError covers UnicodeDecodeError and JSONDecodeError;
            # RecursionError comes from deeply nested JSON
            raise TokenFormatError(f"Token is not base64-encoded JSON: {type(e).__name__}") from e

        if not isinstance(payload, dict):
            raise TokenFormatError("Token payload must be an object")
        for field_name in ("key", "secret"):
            if not isinstance(payload.get(field_name), dict):
                raise TokenFormatError(f"Token payload missing '{field_name}' envelope")
        return payload
