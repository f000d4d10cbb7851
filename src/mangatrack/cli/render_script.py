"""CLI entrypoint: print the browser extraction script for a URL."""

from __future__ import annotations

import argparse
import sys

from mangatrack.extraction.registry import build_default_registry
from mangatrack.extraction.service import MetadataService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render the metadata extraction script for a manga page URL")
    parser.add_argument("--url", required=True, help="Manga detail page URL")
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the bare scraping expression without the messaging envelope",
    )
    args = parser.parse_args(argv)

    service = MetadataService(build_default_registry())
    payload = service.get_injection_script(args.url)
    if payload is None:
        print(f"No extraction script for {args.url}", file=sys.stderr)
        return 1

    print(payload.program.to_javascript() if args.raw else payload.source)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
