import pytest

from kraken_proxy.domain.credentials.envelope import EnvelopeCodec, ServerSecret
from kraken_proxy.domain.credentials.tokens import CredentialTokenService

TEST_APP_SECRET = "test-app-secret-0123456789abcdef"  # exactly 32 bytes
OTHER_APP_SECRET = "another-secret-0123456789abcdef!"


@pytest.fixture
def server_secret():
    return ServerSecret.from_passphrase(TEST_APP_SECRET)


@pytest.fixture
def codec(server_secret):
    return EnvelopeCodec(server_secret)


@pytest.fixture
def token_service(codec):
    return CredentialTokenService(codec)


@pytest.fixture
def foreign_token_service():
    """Token service keyed with a different server secret."""
    return CredentialTokenService(EnvelopeCodec(ServerSecret.from_passphrase(OTHER_APP_SECRET)))
