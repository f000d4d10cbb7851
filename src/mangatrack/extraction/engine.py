"""Site-agnostic interpreter for scraping programs.

Each field walks its strategies in order; the first candidate that survives
the field's cleanup and plausibility rules wins. A failing strategy (for
example a selector the parser rejects) is skipped, never fatal.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator, Mapping
from urllib.parse import urlsplit, urlunsplit

from mangatrack.extraction.dom import PageDocument
from mangatrack.extraction.models import DEBUG_MARKER
from mangatrack.extraction.strategies import (
    STATUS_KEYWORDS,
    DocumentTitle,
    FieldChain,
    ImageByAlt,
    LabeledText,
    LargeImage,
    LongestText,
    MetaContent,
    PageUrl,
    ScrapingProgram,
    SelectImage,
    SelectText,
    SelectTextList,
    Strategy,
)
from mangatrack.text import normalize_text, normalize_whitespace, strip_trailing_punctuation, truncate


LOGGER = logging.getLogger(__name__)

_DEBUG_IMAGE_LIMIT = 10
_DEBUG_CANDIDATE_LIMIT = 5


def _strip_suffixes(text: str, suffixes: tuple[str, ...]) -> str:
    for suffix in suffixes:
        text = re.sub(re.escape(suffix), "", text, flags=re.IGNORECASE)
    return normalize_whitespace(text)


def _has_token(value: str, tokens: tuple[str, ...]) -> bool:
    lowered = value.lower()
    return any(token.lower() in lowered for token in tokens)


def _candidates(
    strategy: Strategy,
    page: PageDocument,
    chain: FieldChain,
    extracted: Mapping[str, Any],
) -> Iterator[Any]:
    if isinstance(strategy, SelectText):
        excluded = {normalize_text(text) for text in strategy.exclude_texts}
        for element in page.select(strategy.selector):
            text = element.text
            if len(text) >= strategy.min_length and normalize_text(text) not in excluded:
                yield text
    elif isinstance(strategy, LabeledText):
        caption = normalize_text(strategy.caption)
        for element in page.select(strategy.selector):
            text = element.text
            if caption not in normalize_text(text) or strategy.separator not in text:
                continue
            value = text.split(strategy.separator, 1)[1].strip()
            if value:
                yield value
    elif isinstance(strategy, LongestText):
        excluded = {normalize_text(text) for text in strategy.exclude_texts}
        longest = ""
        for element in page.select(strategy.selector):
            text = element.text
            if normalize_text(text) in excluded:
                continue
            if len(text) > len(longest):
                longest = text
        if longest:
            yield longest
    elif isinstance(strategy, MetaContent):
        for name in strategy.names:
            content = _strip_suffixes(page.meta(name), strategy.strip_suffixes)
            if content:
                yield content
    elif isinstance(strategy, DocumentTitle):
        title = _strip_suffixes(page.title, strategy.strip_suffixes)
        for separator in strategy.separators:
            title = title.split(separator)[0]
        title = title.strip()
        if title:
            yield title
    elif isinstance(strategy, SelectImage):
        for element in page.select(strategy.selector):
            if _has_token(element.attr("alt"), chain.exclude_tokens):
                continue
            if element.src:
                yield element.src
    elif isinstance(strategy, ImageByAlt):
        title = normalize_text(str(extracted.get("title") or ""))
        for element in page.select("img"):
            alt = normalize_text(element.attr("alt"))
            if not alt or _has_token(alt, chain.exclude_tokens):
                continue
            named = any(keyword in alt for keyword in strategy.keywords)
            if named or (strategy.match_title and title and title in alt):
                yield element.src
    elif isinstance(strategy, LargeImage):
        for element in page.select("img"):
            if element.width > strategy.min_width and element.height > strategy.min_height:
                yield element.src
    elif isinstance(strategy, SelectTextList):
        yield [element.text for element in page.select(strategy.selector)]
    elif isinstance(strategy, PageUrl):
        yield page.url
    else:
        raise TypeError(f"Unsupported strategy: {type(strategy).__name__}")


def _clean_text(value: Any, chain: FieldChain) -> str:
    text = normalize_whitespace(str(value or ""))
    for word in chain.remove_words:
        text = re.sub(re.escape(word), "", text, flags=re.IGNORECASE)
    text = normalize_whitespace(text).rstrip(",").strip()
    return truncate(text, chain.max_length)


def _clean_list(value: Any, limit: int | None) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    items: list[str] = []
    seen: set[str] = set()
    for raw in value:
        item = strip_trailing_punctuation(normalize_whitespace(str(raw or "")))
        key = normalize_text(item)
        if not item or key in seen:
            continue
        seen.add(key)
        items.append(item)
    return items[:limit] if limit is not None else items


def match_status(text: str) -> str | None:
    """Map free status text to a known status, or None when nothing matches."""

    lowered = normalize_text(text)
    for status, keywords in STATUS_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return status
    return None


def normalize_source_url(url: str, canonical_suffix: str | None = None) -> str:
    """Drop query and fragment; rewrite to the canonical path when the site has one."""

    parts = urlsplit(url.strip())
    path = parts.path
    if canonical_suffix and not path.endswith(canonical_suffix):
        path = path.split(canonical_suffix)[0].rstrip("/") + canonical_suffix
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def _accept(chain: FieldChain, candidate: Any) -> Any:
    if chain.kind == "text":
        return _clean_text(candidate, chain) or None
    if chain.kind == "image":
        url = str(candidate or "").strip()
        if url and not _has_token(url, chain.exclude_tokens):
            return url
        return None
    if chain.kind == "list":
        return _clean_list(candidate, chain.limit) or None
    if chain.kind == "status":
        return match_status(str(candidate or ""))
    if chain.kind == "url":
        url = str(candidate or "").strip()
        return normalize_source_url(url, chain.canonical_suffix) if url else None
    raise ValueError(f"Unknown field kind: {chain.kind}")


def _evaluate(strategy: Strategy, page: PageDocument, chain: FieldChain, extracted: Mapping[str, Any]) -> list[Any]:
    try:
        return list(_candidates(strategy, page, chain, extracted))
    except Exception as exc:
        LOGGER.debug("Strategy %s for %s skipped: %s", strategy.label, chain.name, exc)
        return []


def resolve_field(chain: FieldChain, page: PageDocument, extracted: Mapping[str, Any] | None = None) -> Any:
    """Walk one fallback chain and return the first plausible value or the default."""

    context = extracted or {}
    for strategy in chain.strategies:
        for candidate in _evaluate(strategy, page, chain, context):
            accepted = _accept(chain, candidate)
            if accepted is not None:
                return accepted

    if isinstance(chain.default, list):
        return list(chain.default)
    return chain.default


def _probe(program: ScrapingProgram, page: PageDocument) -> dict[str, Any]:
    report: dict[str, Any] = {"url": page.url, "fields": {}}
    for chain in program.fields:
        attempts: dict[str, Any] = {}
        for strategy in chain.strategies:
            candidates = _evaluate(strategy, page, chain, {})
            if candidates:
                attempts[strategy.label] = candidates[:_DEBUG_CANDIDATE_LIMIT]
        report["fields"][chain.name] = attempts

    report["meta"] = {
        "ogTitle": page.meta("og:title"),
        "ogDescription": page.meta("og:description"),
        "ogImage": page.meta("og:image"),
        "description": page.meta("description"),
    }
    report["images"] = [
        {
            "index": index,
            "src": element.src,
            "alt": element.attr("alt"),
            "width": element.width,
            "height": element.height,
            "classes": element.attr("class"),
        }
        for index, element in enumerate(page.select("img")[:_DEBUG_IMAGE_LIMIT])
    ]
    report[DEBUG_MARKER] = True
    return report


def run_program(program: ScrapingProgram, page: PageDocument) -> dict[str, Any]:
    """Execute a program against a page; failures come back as ``{"error": ...}``."""

    try:
        if program.debug:
            return _probe(program, page)

        data: dict[str, Any] = {}
        for chain in program.fields:
            value = resolve_field(chain, page, data)
            if value is not None:
                data[chain.name] = value
        data["sourceWebsite"] = program.site
        return data
    except Exception as exc:
        LOGGER.warning("%s extraction failed: %s", program.site, exc)
        payload: dict[str, Any] = {"error": str(exc) or type(exc).__name__}
        if program.debug:
            payload[DEBUG_MARKER] = True
        return payload
