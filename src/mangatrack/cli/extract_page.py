"""CLI entrypoint: scrape a saved manga page with the matching site adapter."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

from mangatrack.extraction.registry import build_default_registry
from mangatrack.extraction.sandbox import SoupPageSandbox
from mangatrack.extraction.service import MetadataService


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Extract manga metadata from a saved HTML page")
    parser.add_argument("--url", required=True, help="URL the page was loaded from")
    parser.add_argument("--html", required=True, help="Path to the saved HTML file")
    parser.add_argument("--debug", action="store_true", help="Run the selector probe instead of the site adapter")
    parser.add_argument("--verbose", action="store_true", help="Log extraction details to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO if args.verbose else logging.WARNING,
    )

    service = MetadataService(build_default_registry(debug=args.debug))
    payload = service.get_injection_script(args.url)
    if payload is None:
        print(json.dumps({"url": args.url, "error": "No extractable page for this URL"}, ensure_ascii=True, indent=2))
        return 1

    html_path = Path(args.html)
    try:
        html = html_path.read_bytes()
    except OSError as exc:
        print(f"Failed to read {html_path}: {exc}", file=sys.stderr)
        return 1

    messages: list[str] = []
    sandbox = SoupPageSandbox()
    sandbox.set_message_handler(messages.append)
    sandbox.load(html, args.url)
    sandbox.inject(payload)

    raw = messages[-1] if messages else ""
    if args.debug:
        print(raw)
        return 0

    metadata = service.parse_and_validate(raw)
    if metadata is None:
        print(json.dumps({"url": args.url, "adapter": payload.adapter_name, "raw": raw}, ensure_ascii=True, indent=2))
        return 1

    print(json.dumps(metadata.to_dict(), ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
