"""Unit tests for signers and verifiers."""

import json

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from jsontoken import (
    HmacSHA256Signer,
    HmacSHA256Verifier,
    RsaSHA256Signer,
    RsaSHA256Verifier,
    SignatureAlgorithm,
    Signer,
    Verifier,
    codec,
)
from jsontoken.errors import SignatureError, SigningError, UnsupportedAlgorithmError

from ..helpers import SYMMETRIC_KEY, TOKEN_STRING, hmac_signer


class TestSignatureAlgorithm:
    def test_from_name(self) -> None:
        assert SignatureAlgorithm.from_name("RS256") is SignatureAlgorithm.RS256

    @pytest.mark.parametrize("name", ["none", "HS512", "hs256", ""])
    def test_unknown(self, name: str) -> None:
        with pytest.raises(UnsupportedAlgorithmError) as exc_info:
            SignatureAlgorithm.from_name(name)

        assert exc_info.value.algorithm == name


class TestHmac:
    """HMAC-SHA256 signer and verifier."""

    def test_reference_signature(self) -> None:
        source, signature = TOKEN_STRING.rsplit(".", 1)

        assert hmac_signer().sign(source.encode()) == codec.decode_bytes(signature)

    def test_verify(self) -> None:
        signature = hmac_signer().sign(b"payload")

        HmacSHA256Verifier(SYMMETRIC_KEY).verify_signature(b"payload", signature)

    def test_wrong_key(self) -> None:
        signature = hmac_signer().sign(b"payload")

        with pytest.raises(SignatureError):
            HmacSHA256Verifier(b"another-key-another-key-another!").verify_signature(b"payload", signature)

    def test_pem_key_rejected(self) -> None:
        with pytest.raises(SigningError):
            HmacSHA256Signer("google.com", "key2", b"-----BEGIN PUBLIC KEY-----\nabc\n-----END PUBLIC KEY-----")

    def test_protocols(self) -> None:
        assert isinstance(hmac_signer(), Signer)
        assert isinstance(HmacSHA256Verifier(SYMMETRIC_KEY), Verifier)
        assert repr(hmac_signer()) == "HmacSHA256Signer(issuer='google.com', key_id='key2')"


class TestRsa:
    """RSA-SHA256 signer and verifier."""

    def test_sign_and_verify(self, rsa_private_key: rsa.RSAPrivateKey) -> None:
        signer = RsaSHA256Signer("google.com", "key1", rsa_private_key)
        signature = signer.sign(b"payload")

        RsaSHA256Verifier(rsa_private_key.public_key()).verify_signature(b"payload", signature)
        assert signer.signature_algorithm is SignatureAlgorithm.RS256

    def test_tampered(self, rsa_private_key: rsa.RSAPrivateKey) -> None:
        signature = RsaSHA256Signer(None, None, rsa_private_key).sign(b"payload")

        with pytest.raises(SignatureError):
            RsaSHA256Verifier(rsa_private_key.public_key()).verify_signature(b"payloaD", signature)

    def test_from_jwk(self, rsa_private_key: rsa.RSAPrivateKey) -> None:
        jwk = json.loads(RSAAlgorithm.to_jwk(rsa_private_key.public_key()))
        signature = RsaSHA256Signer(None, None, rsa_private_key).sign(b"payload")

        RsaSHA256Verifier.from_jwk(jwk).verify_signature(b"payload", signature)
