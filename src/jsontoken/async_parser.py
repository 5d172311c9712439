"""Asynchronous token parser and verifier.

Discovery is awaited; every other stage is cheap and runs inline once
candidates arrive. Concurrent calls share only the read-only parser
configuration, so no call blocks another.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from . import codec
from .clock import SystemClock
from .config import ParserConfig
from .core.verification import VerificationCore
from .errors import MissingSignatureError
from .telemetry import token_attributes, trace_operation, traced_async

if TYPE_CHECKING:
    from .checkers import Checker
    from .clock import Clock
    from .discovery import AsyncVerifierProviders
    from .models import JsonToken


class AsyncJsonTokenParser:
    """Deserializes and verifies compact tokens without blocking on discovery.

    Invalid tokens fail with a classified ``InvalidTokenError``. Usage and
    programming errors, such as a header without ``alg``, propagate
    unwrapped so integration bugs stay distinguishable from forged tokens.
    """

    def __init__(
        self,
        verifier_providers: AsyncVerifierProviders,
        checkers: Sequence[Checker] = (),
        *,
        clock: Clock | None = None,
        config: ParserConfig | None = None,
    ) -> None:
        """Initialize async parser.

        Args:
            verifier_providers: Per-algorithm awaitable verifier discovery.
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

    def deserialize(self, token_string: str) -> JsonToken:
        """Decode a token string without verifying it."""
        with trace_operation("jsontoken.async.deserialize"):
            token = codec.decode(token_string, max_length=self.config.max_token_length)
            if not codec.split_token(token_string)[2]:
                raise MissingSignatureError("Token signature segment is empty")
            return token

    async def verify(self, token: JsonToken) -> JsonToken:
        """Verify signature, time range and checkers.

        Cancellation only interrupts the discovery await; stages after it
        run to completion without suspending.

        Returns:
            The same token, now verified.

        Raises:
            InvalidTokenError: Classified validity failure.
            TokenUsageError: If the header lacks ``alg`` or the signature is missing.
        """
        with trace_operation("jsontoken.async.verify", attributes=token_attributes(token)):
            with self._core.classified(token):
                algorithm = self._core.resolve_algorithm(token)
                provider = self._core.require_provider(
                    self.verifier_providers.get_verifier_provider(algorithm),
                    algorithm,
                )
                candidates = await provider.find_verifier(token.issuer, token.key_id)
                verifiers = self._core.require_verifiers(candidates, token)
                self._core.verify_signature(token, verifiers)
                self._core.check_time(token)
                self._core.run_checkers(token)
        return token

    @traced_async("jsontoken.async.verify_and_deserialize")
    async def verify_and_deserialize(self, token_string: str) -> JsonToken:
        """Deserialize then verify; decode errors surface first."""
        return await self.verify(self.deserialize(token_string))
