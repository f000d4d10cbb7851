from __future__ import annotations

import json
from pathlib import Path

from mangatrack.cli import chapter_info, extract_page, render_script


SERIES_URL = "https://weebcentral.com/series/ABC123/My-Title"


def _write_page(tmp_path: Path) -> Path:
    html_path = tmp_path / "page.html"
    html_path.write_text(
        '<html><head><meta property="og:image" content="https://x/cover.jpg"></head>'
        "<body><h1>My Title</h1></body></html>",
        encoding="utf-8",
    )
    return html_path


def test_extract_page_prints_metadata(tmp_path: Path, capsys) -> None:
    html_path = _write_page(tmp_path)

    exit_code = extract_page.main(["--url", SERIES_URL, "--html", str(html_path)])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["title"] == "My Title"
    assert output["sourceWebsite"] == "WeebCentral"
    assert output["genres"] == ["Manga"]


def test_extract_page_debug_prints_probe(tmp_path: Path, capsys) -> None:
    html_path = _write_page(tmp_path)

    exit_code = extract_page.main(["--url", SERIES_URL, "--html", str(html_path), "--debug"])

    assert exit_code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["_isDebugAdapter"] is True
    assert report["meta"]["ogImage"] == "https://x/cover.jpg"


def test_extract_page_rejects_unsupported_url(tmp_path: Path, capsys) -> None:
    html_path = _write_page(tmp_path)

    exit_code = extract_page.main(["--url", "https://example.com/foo", "--html", str(html_path)])

    assert exit_code == 1
    assert "No extractable page" in capsys.readouterr().out


def test_extract_page_reports_missing_file(tmp_path: Path, capsys) -> None:
    exit_code = extract_page.main(["--url", SERIES_URL, "--html", str(tmp_path / "missing.html")])

    assert exit_code == 1
    assert "Failed to read" in capsys.readouterr().err


def test_render_script_prints_envelope_or_raw(capsys) -> None:
    assert render_script.main(["--url", SERIES_URL]) == 0
    wrapped = capsys.readouterr().out
    assert "postMessage(result)" in wrapped

    assert render_script.main(["--url", SERIES_URL, "--raw"]) == 0
    raw = capsys.readouterr().out
    assert raw.startswith("(function(program)")
    assert "postMessage" not in raw


def test_render_script_refuses_chapter_page(capsys) -> None:
    assert render_script.main(["--url", SERIES_URL + "/chapter/3"]) == 1
    assert "No extraction script" in capsys.readouterr().err


def test_chapter_info_reports_number_and_title(capsys) -> None:
    exit_code = chapter_info.main(
        [
            "--url",
            "https://asuracomic.net/series/swordmasters-youngest-son-b62b5a15/chapter/194",
            "--title",
            "Swordmaster's Youngest Son Chapter 194 - Asura Scans",
        ]
    )

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["chapter"] == "194"
    assert payload["display"] == "Chapter 194"
    assert payload["title"] == "Swordmaster's Youngest Son"


def test_chapter_info_without_chapter(capsys) -> None:
    assert chapter_info.main(["--url", SERIES_URL]) == 1
    assert json.loads(capsys.readouterr().out)["display"] == "Not started"
