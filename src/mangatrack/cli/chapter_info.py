"""CLI entrypoint: show the chapter number and cleaned title for a reader page."""

from __future__ import annotations

import argparse
import json

from mangatrack.chapters import clean_manga_title, extract_chapter_number, format_chapter_display


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Parse chapter information from a reader URL and page title")
    parser.add_argument("--url", required=True, help="Reader page URL")
    parser.add_argument("--title", default=None, help="Page title, used when the URL has no chapter number")
    args = parser.parse_args(argv)

    chapter = extract_chapter_number(args.url, args.title)
    payload = {
        "url": args.url,
        "chapter": chapter,
        "display": format_chapter_display(chapter or ""),
        "title": clean_manga_title(args.title) if args.title else None,
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0 if chapter is not None else 1


if __name__ == "__main__":
    raise SystemExit(main())
