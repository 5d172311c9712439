"""Synchronous token parser and verifier."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from . import codec
from .clock import SystemClock
from .config import ParserConfig
from .core.verification import VerificationCore
from .errors import MissingSignatureError
from .telemetry import token_attributes, trace_operation, traced

if TYPE_CHECKING:
    from .checkers import Checker
    from .clock import Clock
    from .crypto import Verifier
    from .discovery import VerifierProviders
    from .models import JsonToken


class JsonTokenParser:
    """Deserializes and verifies compact tokens, blocking on discovery.

    Raises classified ``InvalidTokenError`` subclasses for invalid tokens
    and ``TokenUsageError`` for tokens that should never have reached
    ``verify``.
    """

    def __init__(
        self,
        verifier_providers: VerifierProviders,
        checkers: Sequence[Checker] = (),
        *,
        clock: Clock | None = None,
        config: ParserConfig | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            verifier_providers: Per-algorithm verifier discovery.
            checkers: Policy checkers, run in order after time validation.
            clock: Time source (defaults to system time).
            config: Parser configuration (defaults to ``ParserConfig()``).
        """
        self.config = config or ParserConfig()
        self.clock = clock or SystemClock()
        self.verifier_providers = verifier_providers
        self._core = VerificationCore(self.clock, checkers, self.config)

    @property
    def checkers(self) -> tuple[Checker, ...]:
        return self._core.checkers

    @traced("jsontoken.deserialize")
    def deserialize(self, token_string: str) -> JsonToken:
        """Decode a token string without verifying it.

        Raises:
            MalformedTokenError: If the string cannot be decoded.
            MissingSignatureError: If the signature segment is empty.
        """
        token = codec.decode(token_string, max_length=self.config.max_token_length)
        if not codec.split_token(token_string)[2]:
            raise MissingSignatureError("Token signature segment is empty")
        return token

    def verify(self, token: JsonToken) -> JsonToken:
        """Verify signature, time range and checkers.

        Returns:
            The same token, now verified.

        Raises:
            InvalidTokenError: Classified validity failure.
            TokenUsageError: If the header lacks ``alg`` or the signature is missing.
        """
        with trace_operation("jsontoken.verify", attributes=token_attributes(token)):
            with self._core.classified(token):
                algorithm = self._core.resolve_algorithm(token)
                provider = self._core.require_provider(
                    self.verifier_providers.get_verifier_provider(algorithm),
                    algorithm,
                )
                verifiers = self._core.require_verifiers(
                    provider.find_verifier(token.issuer, token.key_id),
                    token,
                )
                self._core.verify_signature(token, verifiers)
                self._core.check_time(token)
                self._core.run_checkers(token)
        return token

    @traced("jsontoken.verify_and_deserialize")
    def verify_and_deserialize(self, token_string: str) -> JsonToken:
        """Deserialize then verify; decode errors surface first."""
        return self.verify(self.deserialize(token_string))

    def signature_is_valid(self, token_string: str, verifiers: Sequence[Verifier]) -> bool:
        """Check a signature directly against caller-supplied verifiers.

        Raises:
            MissingSignatureError: If the token string has no signature.
        """
        return self._core.signature_is_valid(token_string, verifiers)

    def issued_at_is_valid(self, token: JsonToken, now: datetime) -> bool:
        return self._core.time_validator.issued_at_is_valid(token, now)

    def expiration_is_valid(self, token: JsonToken, now: datetime) -> bool:
        return self._core.time_validator.expiration_is_valid(token, now)
