"""AES-256-GCM envelope encryption for single credential strings.

An envelope is the iv/ciphertext/tag triple produced by sealing one string.
All binary fields travel as hex strings under the keys ``iv``, ``data`` and
``authTag``, the layout used by every token this service has issued.
"""
import binascii
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from kraken_proxy.errors import IntegrityError

KEY_LENGTH = 32
IV_LENGTH = 16
TAG_LENGTH = 16

_IV_RE = re.compile(r"^[0-9a-fA-F]{%d}$" % (IV_LENGTH * 2))
_TAG_RE = re.compile(r"^[0-9a-fA-F]{%d}$" % (TAG_LENGTH * 2))
_HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{2})*$")


@dataclass(frozen=True)
class ServerSecret:
    """The process-wide AES-256 key.

    Derived from the configured passphrase by padding its UTF-8 bytes on the
    right with spaces and truncating to 32 bytes. This is not a KDF: short
    passphrases yield low-entropy keys; ``is_padded`` feeds the startup
    secret checks.
    """
    key: bytes = field(repr=False)
    is_padded: bool = False
    is_truncated: bool = False

    def __post_init__(self):
        if len(self.key) != KEY_LENGTH:
            raise ValueError(f"Server secret must be exactly {KEY_LENGTH} bytes, got {len(self.key)}")

    @classmethod
    def from_passphrase(cls, passphrase: str) -> "ServerSecret":
        if not passphrase:
            raise ValueError("Server secret passphrase must not be empty")
        raw = passphrase.encode("utf-8")
        return cls(
            key=raw.ljust(KEY_LENGTH, b" ")[:KEY_LENGTH],
            is_padded=len(raw) < KEY_LENGTH,
            is_truncated=len(raw) > KEY_LENGTH
        )


@dataclass(frozen=True)
class Envelope:
    """One sealed string. Fields are hex strings."""
    iv: str
    data: str
    auth_tag: str

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Reject structurally invalid envelopes before any decryption."""
        for name, value in (("iv", self.iv), ("data", self.data), ("authTag", self.auth_tag)):
            if not isinstance(value, str):
                raise IntegrityError(f"Envelope field {name} must be a hex string")
        if not _IV_RE.fullmatch(self.iv):
            raise IntegrityError(f"Invalid iv: must be {IV_LENGTH * 2} hex characters. Got len={len(self.iv)}")
        if not _TAG_RE.fullmatch(self.auth_tag):
            raise IntegrityError(f"Invalid authTag: must be {TAG_LENGTH * 2} hex characters. Got len={len(self.auth_tag)}")
        if not _HEX_RE.fullmatch(self.data):
            raise IntegrityError("Invalid data: must be a hex string")

    def to_dict(self) -> Dict[str, str]:
        return {
            "iv": self.iv,
            "data": self.data,
            "authTag": self.auth_tag
        }

    @staticmethod
    def from_dict(data: Any) -> "Envelope":
        if not isinstance(data, dict):
            raise IntegrityError("Envelope must be an object")
        missing = [k for k in ("iv", "data", "authTag") if k not in data]
        if missing:
            raise IntegrityError(f"Envelope missing fields: {', '.join(missing)}")
        return Envelope(iv=data["iv"], data=data["data"], auth_tag=data["authTag"])


class EnvelopeCodec:
    """Seals and opens single strings with AES-256-GCM under the server secret."""

    def __init__(self, secret: ServerSecret):
        self._aesgcm = AESGCM(secret.key)

    def seal(self, plaintext: str) -> Envelope:
        # Fresh iv per call, never reused under the same key
        iv = os.urandom(IV_LENGTH)
        ct_and_tag = self._aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)

        return Envelope(
            iv=binascii.hexlify(iv).decode("ascii"),
            data=binascii.hexlify(ct_and_tag[:-TAG_LENGTH]).decode("ascii"),
            auth_tag=binascii.hexlify(ct_and_tag[-TAG_LENGTH:]).decode("ascii")
        )

    def open(self, envelope: Envelope) -> str:
        iv = binascii.unhexlify(envelope.iv)
        ciphertext = binascii.unhexlify(envelope.data)
        tag = binascii.unhexlify(envelope.auth_tag)

        try:
            plaintext = self._aesgcm.decrypt(iv, ciphertext + tag, None)
        except InvalidTag:
            raise IntegrityError("Envelope authentication failed") from None

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError:
            raise IntegrityError("Envelope plaintext is not valid UTF-8") from None
