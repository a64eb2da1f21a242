"""Tests for the AES-256-GCM envelope codec."""
import random
import string

import pytest

from kraken_proxy.domain.credentials.envelope import (
    Envelope,
    EnvelopeCodec,
    ServerSecret,
)
from kraken_proxy.errors import AuthenticationError, IntegrityError


def _flip_bit(hex_str: str, bit: int) -> str:
    raw = bytearray(bytes.fromhex(hex_str))
    raw[bit // 8] ^= 1 << (bit % 8)
    return raw.hex()


def test_seal_open_roundtrip(codec):
    envelope = codec.seal("super-secret-api-key")

    assert envelope.data != "super-secret-api-key"
    assert len(envelope.iv) == 32       # 16 bytes hex
    assert len(envelope.auth_tag) == 32  # 16 bytes hex
    assert codec.open(envelope) == "super-secret-api-key"


def test_roundtrip_printable_ascii(codec):
    rng = random.Random(1234)
    alphabet = string.printable[:95]
    for length in (1, 2, 15, 16, 17, 64, 255, 256):
        s = "".join(rng.choice(alphabet) for _ in range(length))
        assert codec.open(codec.seal(s)) == s


def test_roundtrip_unicode(codec):
    assert codec.open(codec.seal("clé-секрет-鍵")) == "clé-секрет-鍵"


def test_fresh_iv_per_seal(codec):
    e1 = codec.seal("same")
    e2 = codec.seal("same")
    assert e1.iv != e2.iv
    assert e1.data != e2.data or e1.auth_tag != e2.auth_tag


@pytest.mark.parametrize("field_name", ["iv", "data", "auth_tag"])
def test_bit_flip_fails_closed(codec, field_name):
    envelope = codec.seal("valid-secret-12345")
    original = getattr(envelope, field_name)

    for bit in (0, 7, len(original) * 4 - 1):
        fields = {"iv": envelope.iv, "data": envelope.data, "auth_tag": envelope.auth_tag}
        fields[field_name] = _flip_bit(original, bit)
        with pytest.raises(IntegrityError):
            codec.open(Envelope(**fields))


def test_wrong_key_fails(codec):
    other = EnvelopeCodec(ServerSecret.from_passphrase("a-completely-different-secret!!!"))
    envelope = codec.seal("sensitive")

    with pytest.raises(IntegrityError, match="authentication failed"):
        other.open(envelope)


def test_integrity_error_is_authentication_error():
    assert issubclass(IntegrityError, AuthenticationError)
    assert IntegrityError("x").status_code == 401


@pytest.mark.parametrize("data", [
    {"iv": "00" * 16, "data": "abcd"},
    {"data": "abcd", "authTag": "00" * 16},
    {"iv": "zz" * 16, "data": "abcd", "authTag": "00" * 16},
    {"iv": "00" * 12, "data": "abcd", "authTag": "00" * 16},
    {"iv": "00" * 16, "data": "abc", "authTag": "00" * 16},
    {"iv": "00" * 16, "data": "abcd", "authTag": "00" * 8},
    {"iv": 1, "data": "abcd", "authTag": "00" * 16},
    ["not", "an", "object"],
])
def test_malformed_envelope_rejected(data):
    with pytest.raises(IntegrityError):
        Envelope.from_dict(data)


def test_to_dict_uses_wire_keys(codec):
    wire = codec.seal("x").to_dict()
    assert list(wire) == ["iv", "data", "authTag"]
    assert Envelope.from_dict(wire).auth_tag == wire["authTag"]


class TestServerSecret:
    def test_short_passphrase_is_space_padded(self):
        secret = ServerSecret.from_passphrase("short")
        assert secret.key == b"short" + b" " * 27
        assert secret.is_padded
        assert not secret.is_truncated

    def test_long_passphrase_is_truncated(self):
        passphrase = "x" * 40
        secret = ServerSecret.from_passphrase(passphrase)
        assert secret.key == b"x" * 32
        assert secret.is_truncated
        assert not secret.is_padded

    def test_exact_length_used_verbatim(self):
        secret = ServerSecret.from_passphrase("0123456789abcdef0123456789abcdef")
        assert secret.key == b"0123456789abcdef0123456789abcdef"
        assert not secret.is_padded and not secret.is_truncated

    def test_same_passphrase_same_key(self):
        envelope = EnvelopeCodec(ServerSecret.from_passphrase("same-key")).seal("data")
        assert EnvelopeCodec(ServerSecret.from_passphrase("same-key")).open(envelope) == "data"

    def test_empty_passphrase_rejected(self):
        with pytest.raises(ValueError):
            ServerSecret.from_passphrase("")

    def test_key_not_in_repr(self):
        assert "0123" not in repr(ServerSecret.from_passphrase("0123456789"))
