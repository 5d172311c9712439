"""Verification steps shared by the sync and async parsers.

Both parsers run the same pipeline and differ only in how candidate
verifiers are obtained: algorithm, provider, candidates, signature, time
range, checkers. The first failing step determines the outcome.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from .. import codec
from ..errors import (
    BadSignatureError,
    MissingSignatureError,
    NoVerifierError,
    SignatureError,
    TokenUsageError,
    UnsupportedAlgorithmError,
)
from ..telemetry import get_logger
from .errors import ErrorFactory
from .time_validator import TimeValidator

if TYPE_CHECKING:
    from ..checkers import Checker
    from ..clock import Clock
    from ..config import ParserConfig
    from ..crypto import SignatureAlgorithm, Verifier
    from ..models import JsonToken

ProviderT = TypeVar("ProviderT")


def _canonical(claims: Mapping[str, Any]) -> str:
    return json.dumps(dict(claims), sort_keys=True, separators=(",", ":"))


class VerificationCore:
    """Read-only verification state and steps, safe to share across calls."""

    def __init__(
        self,
        clock: Clock,
        checkers: Sequence[Checker],
        config: ParserConfig,
    ) -> None:
        self.clock = clock
        self.checkers: tuple[Checker, ...] = tuple(checkers)
        self.config = config
        self.time_validator = TimeValidator(clock, config.clock_skew)
        self._logger = get_logger()

    def resolve_algorithm(self, token: JsonToken) -> SignatureAlgorithm:
        return token.signature_algorithm

    def require_provider(
        self,
        provider: ProviderT | None,
        algorithm: SignatureAlgorithm,
    ) -> ProviderT:
        if provider is None:
            raise UnsupportedAlgorithmError(
                f"No verifier provider configured for {algorithm.value}",
                algorithm=algorithm.value,
            )
        return provider

    def require_verifiers(
        self,
        verifiers: Sequence[Verifier] | None,
        token: JsonToken,
    ) -> Sequence[Verifier]:
        if not verifiers:
            raise NoVerifierError(
                "No verifier found for issuer and key id",
                issuer=token.issuer,
                key_id=token.key_id,
            )
        return verifiers

    def signature_is_valid(
        self,
        token_string: str | None,
        verifiers: Sequence[Verifier],
    ) -> bool:
        """Check the signature of ``token_string`` against candidate verifiers.

        Returns:
            True if any candidate accepts the signature.

        Raises:
            MissingSignatureError: If there is no signature to check.
            MalformedTokenError: If the string is not a three-segment token.
        """
        if token_string is None:
            raise MissingSignatureError("Token has no token string to verify")
        if token_string.count(codec.SEPARATOR) == 1:
            raise MissingSignatureError()

        header, payload, signature_segment = codec.split_token(token_string)
        if not signature_segment:
            raise MissingSignatureError("Token signature segment is empty")

        try:
            signature = codec.decode_bytes(signature_segment)
        except ValueError:
            # undecodable signatures match no key
            return False

        source = f"{header}{codec.SEPARATOR}{payload}".encode("utf-8")
        for verifier in verifiers:
            try:
                verifier.verify_signature(source, signature)
            except SignatureError:
                continue
            return True
        return False

    def verify_signature(self, token: JsonToken, verifiers: Sequence[Verifier]) -> None:
        if not self.signature_is_valid(token.token_string, verifiers):
            raise BadSignatureError(
                f"Signature rejected by {len(verifiers)} candidate verifier(s)"
            )
        self.require_signed_claims(token)

    def require_signed_claims(self, token: JsonToken) -> None:
        """Reject a token whose claims differ from its signed token string.

        Raises:
            TokenUsageError: If header or payload were altered after decoding.
        """
        header, payload = codec.decode_claims(token.token_string or "")
        if (_canonical(header), _canonical(payload)) != (
            _canonical(token.header),
            _canonical(token.payload),
        ):
            raise TokenUsageError("Token header or payload differs from its signed token string")

    def check_time(self, token: JsonToken) -> None:
        self.time_validator.validate(token)

    def run_checkers(self, token: JsonToken) -> None:
        for checker in self.checkers:
            checker.check(token)

    @contextmanager
    def classified(self, token: JsonToken) -> Iterator[None]:
        """Report failures of the enclosed steps in taxonomy form.

        Anticipated failures leave as ``InvalidTokenError``; usage and
        programming errors leave unchanged.
        """
        try:
            yield
        except Exception as e:
            classified = ErrorFactory.classify(e)
            if classified is None:
                self._logger.warning(
                    "token_verification_error",
                    error_type=type(e).__name__,
                    alg=token.header.get("alg"),
                    kid=token.key_id,
                )
                raise
            self._logger.debug(
                "token_rejected",
                code=classified.code,
                reason=classified.message,
                kid=token.key_id,
                iss=token.issuer,
            )
            ErrorFactory.reraise_classified(e)
