"""Declarative fallback chains describing how each metadata field is scraped.

A program is plain data: an ordered list of fields, each with an ordered list
of candidate strategies. The same data drives the Python interpreter in
``engine`` and the browser script rendered by ``javascript``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Union

# Tokens marking site chrome rather than series artwork.
BRANDING_TOKENS = ("logo", "background", "bg.png", "brand.png", "icon", "blank")

STATUS_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("ongoing", ("ongoing",)),
    ("completed", ("completed", "complete", "finished")),
    ("hiatus", ("hiatus",)),
    ("cancelled", ("cancelled", "canceled", "dropped")),
)

FIELD_KINDS = ("text", "image", "list", "status", "url")


class _Strategy:
    type: ClassVar[str]

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)  # type: ignore[call-overload]
        payload["type"] = self.type
        return payload

    @property
    def label(self) -> str:
        return self.type


@dataclass(frozen=True, slots=True)
class SelectText(_Strategy):
    """First element matching ``selector`` whose text is long enough."""

    type: ClassVar[str] = "select_text"

    selector: str
    min_length: int = 1
    exclude_texts: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return self.selector


@dataclass(frozen=True, slots=True)
class LabeledText(_Strategy):
    """Value part of a ``Caption: value`` row whose text mentions ``caption``."""

    type: ClassVar[str] = "labeled_text"

    selector: str
    caption: str
    separator: str = ":"

    @property
    def label(self) -> str:
        return f"{self.selector}[{self.caption}]"


@dataclass(frozen=True, slots=True)
class LongestText(_Strategy):
    """Longest text among all elements matching ``selector``."""

    type: ClassVar[str] = "longest_text"

    selector: str
    exclude_texts: tuple[str, ...] = ("summary",)

    @property
    def label(self) -> str:
        return f"longest:{self.selector}"


@dataclass(frozen=True, slots=True)
class MetaContent(_Strategy):
    """``<meta property|name=...>`` content, with site suffixes removed."""

    type: ClassVar[str] = "meta"

    names: tuple[str, ...]
    strip_suffixes: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return "meta:" + ",".join(self.names)


@dataclass(frozen=True, slots=True)
class DocumentTitle(_Strategy):
    """The page ``<title>``, cut at the first separator."""

    type: ClassVar[str] = "document_title"

    separators: tuple[str, ...] = ("|", " - ", " – ")
    strip_suffixes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SelectImage(_Strategy):
    """``src`` of the first image matching ``selector``."""

    type: ClassVar[str] = "select_image"

    selector: str

    @property
    def label(self) -> str:
        return f"image:{self.selector}"


@dataclass(frozen=True, slots=True)
class ImageByAlt(_Strategy):
    """First image whose alt text names the cover or the extracted title."""

    type: ClassVar[str] = "image_by_alt"

    keywords: tuple[str, ...] = ("cover",)
    match_title: bool = True


@dataclass(frozen=True, slots=True)
class LargeImage(_Strategy):
    """First image larger than the given box."""

    type: ClassVar[str] = "large_image"

    min_width: int = 150
    min_height: int = 200


@dataclass(frozen=True, slots=True)
class SelectTextList(_Strategy):
    """Texts of every element matching ``selector``."""

    type: ClassVar[str] = "select_text_list"

    selector: str

    @property
    def label(self) -> str:
        return f"list:{self.selector}"


@dataclass(frozen=True, slots=True)
class PageUrl(_Strategy):
    type: ClassVar[str] = "page_url"


Strategy = Union[
    SelectText,
    LabeledText,
    LongestText,
    MetaContent,
    DocumentTitle,
    SelectImage,
    ImageByAlt,
    LargeImage,
    SelectTextList,
    PageUrl,
]


@dataclass(frozen=True, slots=True)
class FieldChain:
    """Ordered strategies for one wire field plus its post-processing rules."""

    name: str
    strategies: tuple[Strategy, ...]
    kind: str = "text"
    max_length: int | None = None
    remove_words: tuple[str, ...] = ()
    exclude_tokens: tuple[str, ...] = ()
    limit: int | None = None
    default: Any = None
    canonical_suffix: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind: {self.kind}")
        if not self.strategies and self.default is None:
            raise ValueError(f"Field {self.name} needs at least one strategy or a default")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "strategies": [strategy.to_dict() for strategy in self.strategies],
            "maxLength": self.max_length,
            "removeWords": list(self.remove_words),
            "excludeTokens": list(self.exclude_tokens),
            "limit": self.limit,
            "default": self.default,
            "canonicalSuffix": self.canonical_suffix,
        }


@dataclass(frozen=True, slots=True)
class ScrapingProgram:
    """Everything needed to scrape one site's detail page."""

    site: str
    fields: tuple[FieldChain, ...] = field(default_factory=tuple)
    debug: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "site": self.site,
            "debug": self.debug,
            "fields": [chain.to_dict() for chain in self.fields],
            "statusKeywords": [[status, list(words)] for status, words in STATUS_KEYWORDS],
        }

    def to_javascript(self) -> str:
        """Render the raw page script; its completion value is the JSON result string."""

        from mangatrack.extraction.javascript import render_program

        return render_program(self)


# Building blocks shared by most adapters.


def title_chain(*selectors: str, site_suffixes: tuple[str, ...] = ()) -> FieldChain:
    strategies: list[Strategy] = [SelectText(selector) for selector in selectors]
    strategies.append(LongestText("h1"))
    strategies.append(MetaContent(("og:title", "title"), strip_suffixes=site_suffixes))
    strategies.append(DocumentTitle(strip_suffixes=site_suffixes))
    return FieldChain("title", tuple(strategies))


def description_chain(*selectors: str, prefer_meta: bool = True) -> FieldChain:
    meta = MetaContent(("og:description", "description"))
    visible: list[Strategy] = [SelectText(selector, min_length=21) for selector in selectors]
    visible.append(SelectText("p", min_length=21))
    strategies = [meta, *visible] if prefer_meta else [*visible, meta]
    return FieldChain("description", tuple(strategies), max_length=500)


def cover_chain(*selectors: str, extra_tokens: tuple[str, ...] = ()) -> FieldChain:
    strategies: list[Strategy] = [SelectImage(selector) for selector in selectors]
    strategies.extend([ImageByAlt(), LargeImage(), MetaContent(("og:image",))])
    return FieldChain(
        "coverImage",
        tuple(strategies),
        kind="image",
        exclude_tokens=BRANDING_TOKENS + extra_tokens,
    )


def text_chain(name: str, *selectors: str, remove_words: tuple[str, ...] = ()) -> FieldChain:
    return FieldChain(
        name,
        tuple(SelectText(selector) for selector in selectors),
        remove_words=remove_words,
    )


def genres_chain(*selectors: str, default: tuple[str, ...] = ()) -> FieldChain:
    return FieldChain(
        "genres",
        tuple(SelectTextList(selector) for selector in selectors),
        kind="list",
        limit=5,
        default=list(default),
    )


def status_chain(*selectors: str) -> FieldChain:
    return FieldChain(
        "mangaStatus",
        tuple(SelectText(selector) for selector in selectors),
        kind="status",
        default="ongoing",
    )


def source_url_chain(canonical_suffix: str | None = None) -> FieldChain:
    return FieldChain("sourceUrl", (PageUrl(),), kind="url", canonical_suffix=canonical_suffix)
