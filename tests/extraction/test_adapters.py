from __future__ import annotations

import pytest

from mangatrack.extraction.adapters import (
    AsuraScansAdapter,
    MangaFireAdapter,
    MangaPlusAdapter,
    WebtoonsAdapter,
    WeebCentralAdapter,
    build_default_adapters,
)
from mangatrack.extraction.adapters.base import BaseSiteAdapter, SiteAdapter
from mangatrack.extraction.registry import build_default_registry
from mangatrack.extraction.service import MetadataService
from mangatrack.extraction.strategies import ScrapingProgram, source_url_chain, title_chain


CHAPTER_URLS = {
    "Webtoons": "https://www.webtoons.com/en/fantasy/tower-of-god/season-1-ep-0/viewer?title_no=95&episode_no=1",
    "AsuraScans": "https://asuracomic.net/series/swordmasters-youngest-son-b62b5a15/chapter/194",
    "MangaFire": "https://mangafire.to/read/solo-leveling.1pv7/en/chapter-150",
    "WeebCentral": "https://weebcentral.com/series/01J76XY/Kagurabachi/chapter/108",
    "MangaDex": "https://mangadex.org/title/abc-123/chapter/5",
    "MangaKakalot": "https://mangakakalot.com/manga/one-piece/chapter/1000",
    "MangaPlus": "https://mangaplus.shueisha.co.jp/viewer/1000486",
}


class _GenericAdapter(BaseSiteAdapter):
    name = "Generic"
    url_patterns = (r"example\.org/series",)

    def build_program(self) -> ScrapingProgram:
        return ScrapingProgram(site=self.name, fields=(title_chain(), source_url_chain()))


def test_default_adapters_satisfy_protocol() -> None:
    for adapter in build_default_adapters(debug=True):
        assert isinstance(adapter, SiteAdapter)
        program = adapter.get_injection_script()
        assert program.site == adapter.get_name()
        assert adapter.get_url_patterns()


def test_adapter_without_name_is_rejected() -> None:
    class _Nameless(BaseSiteAdapter):
        def build_program(self) -> ScrapingProgram:
            return ScrapingProgram(site="x")

    with pytest.raises(ValueError, match="must define a name"):
        _Nameless()


@pytest.mark.parametrize("name,url", sorted(CHAPTER_URLS.items()))
def test_chapter_pages_never_get_an_injection_script(name: str, url: str) -> None:
    service = MetadataService(build_default_registry())

    adapter = service.get_extractor_for_url(url)
    assert adapter is not None
    assert adapter.get_name() == name
    assert adapter.is_chapter_page(url) is True
    assert adapter.is_detail_page(url) is False
    assert service.get_injection_script(url) is None


def test_webtoons_series_url_rebuilds_list_page() -> None:
    adapter = WebtoonsAdapter()

    series = adapter.get_series_url_from_chapter(CHAPTER_URLS["Webtoons"])

    assert series == "https://www.webtoons.com/en/fantasy/tower-of-god/list?title_no=95"
    assert adapter.is_chapter_page(series) is False
    assert adapter.get_series_url_from_chapter("https://www.webtoons.com/en/fantasy/tower-of-god/list") is None


def test_asura_series_url_drops_chapter_segment() -> None:
    adapter = AsuraScansAdapter()

    assert (
        adapter.get_series_url_from_chapter(CHAPTER_URLS["AsuraScans"])
        == "https://asuracomic.net/series/swordmasters-youngest-son-b62b5a15"
    )
    assert adapter.get_series_url_from_chapter("https://asuracomic.net/series/foo") is None


def test_mangafire_reader_and_query_chapters() -> None:
    adapter = MangaFireAdapter()

    assert adapter.get_series_url_from_chapter(CHAPTER_URLS["MangaFire"]) == "https://mangafire.to/manga/solo-leveling.1pv7"
    query_url = "https://mangafire.to/manga/solo-leveling.1pv7?chapter=12"
    assert adapter.is_chapter_page(query_url) is True
    assert adapter.get_series_url_from_chapter(query_url) == "https://mangafire.to/manga/solo-leveling.1pv7"
    assert adapter.is_detail_page("https://mangafire.to/manga/solo-leveling.1pv7") is True


def test_weebcentral_series_url() -> None:
    adapter = WeebCentralAdapter()

    assert (
        adapter.get_series_url_from_chapter(CHAPTER_URLS["WeebCentral"])
        == "https://weebcentral.com/series/01J76XY/Kagurabachi"
    )
    assert adapter.is_detail_page("https://weebcentral.com/series/01J76XY/Kagurabachi") is True


def test_mangaplus_viewer_has_no_series_url() -> None:
    adapter = MangaPlusAdapter()

    assert adapter.is_chapter_page(CHAPTER_URLS["MangaPlus"]) is True
    assert adapter.get_series_url_from_chapter(CHAPTER_URLS["MangaPlus"]) is None


def test_base_adapter_strips_trailing_chapter_segment() -> None:
    adapter = _GenericAdapter()

    assert adapter.get_series_url_from_chapter("https://example.org/series/foo/chapter/12") == "https://example.org/series/foo"
    assert adapter.get_series_url_from_chapter("https://example.org/series/foo/chapter-12.5") == "https://example.org/series/foo"
    assert adapter.get_series_url_from_chapter("https://example.org/series/foo") is None


def test_validate_metadata_lists_every_missing_field() -> None:
    adapter = _GenericAdapter()

    result = adapter.validate_metadata({})
    assert result.is_valid is False
    assert len(result.errors) == 3

    mismatch = adapter.validate_metadata(
        {"title": "x", "sourceUrl": "https://example.org/series/x", "sourceWebsite": "Other"}
    )
    assert mismatch.is_valid is False
    assert "sourceWebsite mismatch" in mismatch.errors[0]

    ok = adapter.validate_metadata(
        {"title": "x", "sourceUrl": "https://example.org/series/x", "sourceWebsite": "Generic"}
    )
    assert ok.is_valid is True
    assert ok.errors == []
