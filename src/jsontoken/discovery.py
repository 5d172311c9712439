"""Verifier discovery.

An algorithm maps to a provider; a provider maps an (issuer, key id) pair
to candidate verifiers. Issuers rotate keys, so a lookup may return
several candidates, and key material is often remote, so providers come
in a blocking and an awaitable flavour with identical semantics.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol, runtime_checkable

from .crypto import SignatureAlgorithm, Verifier


@runtime_checkable
class VerifierProvider(Protocol):
    """Blocking lookup of candidate verifiers."""

    def find_verifier(self, issuer: str | None, key_id: str | None) -> Sequence[Verifier] | None:
        """Return candidate verifiers; None or empty means none available."""
        ...


@runtime_checkable
class AsyncVerifierProvider(Protocol):
    """Awaitable lookup of candidate verifiers."""

    async def find_verifier(
        self,
        issuer: str | None,
        key_id: str | None,
    ) -> Sequence[Verifier] | None:
        """Return candidate verifiers; None or empty means none available."""
        ...


class VerifierProviders:
    """Per-algorithm registry of blocking verifier providers."""

    def __init__(
        self,
        providers: Mapping[SignatureAlgorithm, VerifierProvider] | None = None,
    ) -> None:
        self._providers: dict[SignatureAlgorithm, VerifierProvider] = dict(providers or {})

    def set_verifier_provider(
        self,
        algorithm: SignatureAlgorithm,
        provider: VerifierProvider,
    ) -> None:
        self._providers[algorithm] = provider

    def get_verifier_provider(self, algorithm: SignatureAlgorithm) -> VerifierProvider | None:
        """Provider for ``algorithm``, or None if this configuration lacks one."""
        return self._providers.get(algorithm)

    @property
    def algorithms(self) -> frozenset[SignatureAlgorithm]:
        return frozenset(self._providers)


class AsyncVerifierProviders:
    """Per-algorithm registry of awaitable verifier providers."""

    def __init__(
        self,
        providers: Mapping[SignatureAlgorithm, AsyncVerifierProvider] | None = None,
    ) -> None:
        self._providers: dict[SignatureAlgorithm, AsyncVerifierProvider] = dict(providers or {})

    @classmethod
    def from_sync(cls, providers: VerifierProviders) -> AsyncVerifierProviders:
        """Expose blocking providers to the async parser.

        Lookups complete immediately, so only use this for providers that
        do not perform I/O.
        """
        return cls(
            {
                algorithm: _ImmediateVerifierProvider(provider)
                for algorithm in providers.algorithms
                if (provider := providers.get_verifier_provider(algorithm)) is not None
            }
        )

    def set_verifier_provider(
        self,
        algorithm: SignatureAlgorithm,
        provider: AsyncVerifierProvider,
    ) -> None:
        self._providers[algorithm] = provider

    def get_verifier_provider(
        self,
        algorithm: SignatureAlgorithm,
    ) -> AsyncVerifierProvider | None:
        """Provider for ``algorithm``, or None if this configuration lacks one."""
        return self._providers.get(algorithm)


class _ImmediateVerifierProvider:
    """Awaitable facade over a blocking provider."""

    def __init__(self, provider: VerifierProvider) -> None:
        self._provider = provider

    async def find_verifier(
        self,
        issuer: str | None,
        key_id: str | None,
    ) -> Sequence[Verifier] | None:
        return self._provider.find_verifier(issuer, key_id)


class InMemoryVerifierProvider:
    """Verifiers registered per issuer, optionally per key id.

    A lookup with a key id returns that key's verifiers, falling back to
    the issuer-wide verifiers when the key id is unknown or absent.
    """

    def __init__(self) -> None:
        self._by_key: dict[tuple[str | None, str], list[Verifier]] = {}
        self._by_issuer: dict[str | None, list[Verifier]] = {}

    def add(
        self,
        issuer: str | None,
        verifiers: Verifier | Iterable[Verifier],
        *,
        key_id: str | None = None,
    ) -> InMemoryVerifierProvider:
        candidates = [verifiers] if isinstance(verifiers, Verifier) else list(verifiers)
        if key_id is None:
            self._by_issuer.setdefault(issuer, []).extend(candidates)
        else:
            self._by_key.setdefault((issuer, key_id), []).extend(candidates)
        return self

    def find_verifier(self, issuer: str | None, key_id: str | None) -> list[Verifier]:
        if key_id is not None and (issuer, key_id) in self._by_key:
            return list(self._by_key[(issuer, key_id)])
        return list(self._by_issuer.get(issuer, []))
