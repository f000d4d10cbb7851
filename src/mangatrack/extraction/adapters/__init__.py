"""Site adapter implementations and contracts."""

from .asura_scans_adapter import AsuraScansAdapter
from .base import BaseSiteAdapter, SiteAdapter
from .debug_adapter import DebugAdapter
from .mangadex_adapter import MangaDexAdapter
from .mangafire_adapter import MangaFireAdapter
from .mangakakalot_adapter import MangaKakalotAdapter
from .mangaplus_adapter import MangaPlusAdapter
from .webtoons_adapter import WebtoonsAdapter
from .weebcentral_adapter import WeebCentralAdapter


def build_default_adapters(*, debug: bool = False) -> list[SiteAdapter]:
    """Return the default adapters in priority order.

    Order matters: the registry picks the first adapter whose patterns match,
    so the catch-all debug probe, when enabled, shadows every site.
    """
    adapters: list[SiteAdapter] = []
    if debug:
        adapters.append(DebugAdapter())
    adapters.extend(
        [
            WebtoonsAdapter(),
            AsuraScansAdapter(),
            MangaFireAdapter(),
            WeebCentralAdapter(),
            MangaDexAdapter(),
            MangaKakalotAdapter(),
            MangaPlusAdapter(),
        ]
    )
    return adapters


__all__ = [
    "SiteAdapter",
    "BaseSiteAdapter",
    "AsuraScansAdapter",
    "DebugAdapter",
    "MangaDexAdapter",
    "MangaFireAdapter",
    "MangaKakalotAdapter",
    "MangaPlusAdapter",
    "WebtoonsAdapter",
    "WeebCentralAdapter",
    "build_default_adapters",
]
