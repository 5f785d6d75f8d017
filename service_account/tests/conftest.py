"""
Shared fixtures for account service tests.
"""

import random

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from service_account.app.keys.provider import ServiceKeys, StaticKeyProvider
from service_account.app.tokens.codec import TokenCodec
from service_account.app.tokens.models import CryptoMaterial


def generate_rsa_pair(key_size: int = 1024):
    """Return (private PEM, public PEM) in the formats the key directory uses."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return private_pem, public_pem


@pytest.fixture
def make_rsa_pair():
    """Factory for extra key pairs."""
    return generate_rsa_pair


@pytest.fixture(scope="session")
def rsa_pair():
    """1024-bit RSA key pair."""
    return generate_rsa_pair()


@pytest.fixture
def aes_key():
    """Fixed AES-128 key."""
    return bytes(16)


@pytest.fixture
def hmac_secret():
    """HMAC secret for the account service."""
    return bytes.fromhex("8e4b1f0c2d7a9e63b5a14c0f7d2e9b31")


@pytest.fixture
def account_keys(rsa_pair, aes_key, hmac_secret):
    """Complete key set for the account service."""
    private_pem, public_pem = rsa_pair
    return ServiceKeys(
        aes_key=aes_key,
        public_key=public_pem,
        private_key=private_pem,
        hmac_secret=hmac_secret
    )


@pytest.fixture
def key_provider(account_keys):
    """In-memory provider serving the account keys."""
    return StaticKeyProvider({"account": account_keys})


@pytest.fixture
def codec(key_provider):
    """Codec with a seeded point generator."""
    return TokenCodec(key_provider, rng=random.Random(1337))


@pytest.fixture
def material(rsa_pair, hmac_secret):
    """Material for issuing long tokens."""
    return CryptoMaterial(public_key=rsa_pair[1], hmac_secret=hmac_secret)
