"""Ordered adapter registry: the first adapter whose patterns match wins."""

from __future__ import annotations

from typing import Iterable

from mangatrack.extraction.adapters import SiteAdapter, build_default_adapters


class AdapterRegistry:
    """Hold adapters in registration order and resolve them by URL or name."""

    def __init__(self, adapters: Iterable[SiteAdapter] = ()) -> None:
        self._adapters: list[SiteAdapter] = []
        for adapter in adapters:
            self.register(adapter)

    @property
    def adapters(self) -> list[SiteAdapter]:
        """Registered adapters in priority order."""

        return list(self._adapters)

    def register(self, adapter: SiteAdapter) -> None:
        """Append an adapter; earlier registrations keep priority on overlap."""

        if not adapter.get_name():
            raise ValueError("Adapter name cannot be empty")
        self._adapters.append(adapter)

    def get_adapter_for_url(self, url: str) -> SiteAdapter | None:
        if not url:
            return None
        for adapter in self._adapters:
            if adapter.can_handle(url):
                return adapter
        return None

    def get_adapter_by_name(self, name: str) -> SiteAdapter | None:
        for adapter in self._adapters:
            if adapter.get_name() == name:
                return adapter
        return None

    def can_handle(self, url: str) -> bool:
        return self.get_adapter_for_url(url) is not None

    def supported_websites(self) -> list[str]:
        return [adapter.get_name() for adapter in self._adapters]


def build_default_registry(*, debug: bool = False) -> AdapterRegistry:
    """Registry with every bundled site adapter, in priority order."""

    return AdapterRegistry(build_default_adapters(debug=debug))
