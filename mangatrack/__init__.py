"""Checkout shim so `python -m mangatrack.cli.<tool>` works without installing."""

from __future__ import annotations

from pathlib import Path

_SRC_PACKAGE = Path(__file__).resolve().parent.parent / "src" / "mangatrack"

if _SRC_PACKAGE.is_dir():
    __path__.append(str(_SRC_PACKAGE))
