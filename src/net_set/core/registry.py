"""Provider registry — the closed set of DNS providers and the current selection."""

from __future__ import annotations

import logging
import threading
from functools import lru_cache
from pathlib import Path

import yaml

from net_set.core.base import DnsProvider
from net_set.core.paths import PROVIDERS_FILE

logger = logging.getLogger(__name__)


class UnknownProviderError(KeyError):
    def __init__(self, name: str, known: list[str]) -> None:
        super().__init__(name)
        self.name = name
        self.known = known

    def __str__(self) -> str:
        return f"unknown DNS provider {self.name!r} (choose from {', '.join(self.known)})"


@lru_cache(maxsize=None)
def load_providers(path: Path = PROVIDERS_FILE) -> tuple[dict[str, DnsProvider], str]:
    """Load providers keyed by display name, plus the default provider name."""
    with open(path) as f:
        data = yaml.safe_load(f)
    providers = {p.name: p for p in (DnsProvider(**entry) for entry in data["providers"])}
    default = data.get("default", next(iter(providers)))
    return providers, default


class ProviderRegistry:
    """Holds the providers and which one is selected.

    The selection is shared between the configuration and diagnostics paths,
    so reads and writes go through a lock.
    """

    def __init__(
        self,
        providers: dict[str, DnsProvider] | None = None,
        default: str | None = None,
    ) -> None:
        if providers is None:
            providers, shipped_default = load_providers()
            default = default or shipped_default
        self._providers = dict(providers)
        self._lock = threading.Lock()
        self._selected = self.get(default or next(iter(self._providers)))

    @property
    def names(self) -> list[str]:
        return list(self._providers)

    def all(self) -> list[DnsProvider]:
        return list(self._providers.values())

    def get(self, name: str) -> DnsProvider:
        """Case-insensitive lookup by display name."""
        for provider_name, provider in self._providers.items():
            if provider_name.lower() == name.strip().lower():
                return provider
        raise UnknownProviderError(name, self.names)

    @property
    def selected(self) -> DnsProvider:
        with self._lock:
            return self._selected

    def select(self, name: str) -> DnsProvider:
        provider = self.get(name)
        with self._lock:
            self._selected = provider
        logger.info("DNS provider set to: %s", provider.name)
        return provider
