"""
Shared test fixtures for jsontoken tests.

Provides clocks, signers, key material and discovery configurations
for both the sync and async parsers.
"""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from jsontoken import (
    AsyncVerifierProviders,
    HmacSHA256Verifier,
    InMemoryVerifierProvider,
    ParserConfig,
    RsaSHA256Verifier,
    SignatureAlgorithm,
    VerifierProviders,
)

from .helpers import ISSUER, KEY_ID, SYMMETRIC_KEY, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock frozen at the reference instant."""
    return FakeClock()


@pytest.fixture
def parser_config() -> ParserConfig:
    """Provide parser configuration with a one minute skew."""
    return ParserConfig(clock_skew_seconds=60)


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Provide an RSA key pair, generated once per session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def locators(rsa_private_key: rsa.RSAPrivateKey) -> VerifierProviders:
    """Provide HS256 and RS256 discovery for google.com."""
    hmac_provider = InMemoryVerifierProvider().add(
        ISSUER, HmacSHA256Verifier(SYMMETRIC_KEY), key_id=KEY_ID
    )
    rsa_provider = InMemoryVerifierProvider().add(
        ISSUER, RsaSHA256Verifier(rsa_private_key.public_key())
    )
    return VerifierProviders(
        {
            SignatureAlgorithm.HS256: hmac_provider,
            SignatureAlgorithm.RS256: rsa_provider,
        }
    )


@pytest.fixture
def locators_from_ruby() -> VerifierProviders:
    """Provide HS256 discovery for tokens without issuer or key id."""
    provider = InMemoryVerifierProvider().add(None, HmacSHA256Verifier(SYMMETRIC_KEY))
    return VerifierProviders({SignatureAlgorithm.HS256: provider})


@pytest.fixture
def async_locators(locators: VerifierProviders) -> AsyncVerifierProviders:
    """Provide the async view of the standard discovery set."""
    return AsyncVerifierProviders.from_sync(locators)


@pytest.fixture
def async_locators_from_ruby(locators_from_ruby: VerifierProviders) -> AsyncVerifierProviders:
    return AsyncVerifierProviders.from_sync(locators_from_ruby)
