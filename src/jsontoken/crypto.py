"""Signature capabilities for jsontoken.

Signers and verifiers wrap PyJWT's algorithm primitives; the parsers only
ever see the ``Signer`` and ``Verifier`` protocols.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import jwt
from jwt.algorithms import HMACAlgorithm, RSAAlgorithm

from .errors import SignatureError, SigningError, UnsupportedAlgorithmError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.rsa import (
        RSAPrivateKey,
        RSAPublicKey,
    )


class SignatureAlgorithm(StrEnum):
    """Signature algorithms a token header may name."""

    HS256 = "HS256"
    RS256 = "RS256"

    @classmethod
    def from_name(cls, name: str) -> SignatureAlgorithm:
        """Resolve a header ``alg`` value.

        Raises:
            UnsupportedAlgorithmError: If the name is outside the closed set.
        """
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedAlgorithmError(
                f"Unknown signature algorithm: {name!r}",
                algorithm=name,
            ) from None


@runtime_checkable
class Signer(Protocol):
    """Signing capability bound to an issuer and key id."""

    @property
    def issuer(self) -> str | None: ...

    @property
    def key_id(self) -> str | None: ...

    @property
    def signature_algorithm(self) -> SignatureAlgorithm: ...

    def sign(self, source: bytes) -> bytes:
        """Sign ``source`` and return the raw signature bytes."""
        ...


@runtime_checkable
class Verifier(Protocol):
    """Verification capability for a single key."""

    def verify_signature(self, source: bytes, signature: bytes) -> None:
        """Check ``signature`` over ``source``.

        Raises:
            SignatureError: If the signature does not match.
        """
        ...


class _BaseSigner:
    """Shared identity handling for concrete signers."""

    signature_algorithm: SignatureAlgorithm

    def __init__(self, issuer: str | None, key_id: str | None) -> None:
        self._issuer = issuer
        self._key_id = key_id

    @property
    def issuer(self) -> str | None:
        return self._issuer

    @property
    def key_id(self) -> str | None:
        return self._key_id

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(issuer={self._issuer!r}, "
            f"key_id={self._key_id!r})"
        )


class HmacSHA256Signer(_BaseSigner):
    """HMAC-SHA256 signer over a shared secret."""

    signature_algorithm = SignatureAlgorithm.HS256

    def __init__(self, issuer: str | None, key_id: str | None, key: bytes) -> None:
        super().__init__(issuer, key_id)
        self._algorithm = HMACAlgorithm(HMACAlgorithm.SHA256)
        try:
            self._key = self._algorithm.prepare_key(key)
        except jwt.exceptions.InvalidKeyError as e:
            raise SigningError(f"Unusable HMAC key: {e}", cause=e) from e

    def sign(self, source: bytes) -> bytes:
        return self._algorithm.sign(source, self._key)


class HmacSHA256Verifier:
    """HMAC-SHA256 verifier over a shared secret."""

    def __init__(self, key: bytes) -> None:
        self._algorithm = HMACAlgorithm(HMACAlgorithm.SHA256)
        self._key = self._algorithm.prepare_key(key)

    def verify_signature(self, source: bytes, signature: bytes) -> None:
        # HMACAlgorithm.verify compares digests in constant time
        if not self._algorithm.verify(source, self._key, signature):
            raise SignatureError("HMAC-SHA256 signature mismatch")


class RsaSHA256Signer(_BaseSigner):
    """RSASSA-PKCS1-v1_5 SHA-256 signer."""

    signature_algorithm = SignatureAlgorithm.RS256

    def __init__(
        self,
        issuer: str | None,
        key_id: str | None,
        private_key: RSAPrivateKey,
    ) -> None:
        super().__init__(issuer, key_id)
        self._algorithm = RSAAlgorithm(RSAAlgorithm.SHA256)
        self._key = private_key

    def sign(self, source: bytes) -> bytes:
        try:
            return self._algorithm.sign(source, self._key)
        except (TypeError, ValueError) as e:
            raise SigningError(f"RSA signing failed: {e}", cause=e) from e


class RsaSHA256Verifier:
    """RSASSA-PKCS1-v1_5 SHA-256 verifier."""

    def __init__(self, public_key: RSAPublicKey) -> None:
        self._algorithm = RSAAlgorithm(RSAAlgorithm.SHA256)
        self._key = public_key

    @classmethod
    def from_jwk(cls, jwk: str | dict[str, object]) -> RsaSHA256Verifier:
        """Build a verifier from an RSA public JWK."""
        return cls(RSAAlgorithm.from_jwk(jwk))  # type: ignore[arg-type]

    def verify_signature(self, source: bytes, signature: bytes) -> None:
        if not self._algorithm.verify(source, self._key, signature):
            raise SignatureError("RSA-SHA256 signature mismatch")
