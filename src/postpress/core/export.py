"""Output writing: rendered HTML fragment, sidecar JSON, and the site index"""

import json
from datetime import date
from pathlib import Path
from typing import Any

from postpress.core.models import RenderedDoc


# ids are slugs and never start with an underscore
INDEX_FILE = "_index.json"


def json_default(value: Any) -> Any:
    """Serialise YAML-native values json cannot handle (dates, sets)."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return str(value)


def plain_keys(value: Any) -> Any:
    """Recursively turn mapping keys into strings (YAML allows dates, ints, bools as keys)."""
    if isinstance(value, dict):
        return {
            (k.isoformat() if isinstance(k, date) else str(k)): plain_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [plain_keys(v) for v in value]
    return value


def build_sidecar(rendered: RenderedDoc) -> dict:
    """Build the sidecar dict: typed fields, opaque front matter, excerpt, and warnings."""
    doc = rendered.document
    return {
        "id": doc.id,
        "path": doc.path,
        "title": doc.title,
        "date": doc.date.isoformat(),
        "categories": doc.categories,
        "tags": sorted(doc.tags),
        "published": doc.published,
        "hash": doc.hash,
        "metadata": plain_keys(doc.metadata),
        "excerpt": rendered.excerpt,
        "warnings": [
            {"kind": w.kind, "line": w.line, "message": w.message} for w in rendered.warnings
        ],
    }


def write_doc(rendered: RenderedDoc, output_dir: Path, rel_dir: Path = Path()) -> tuple[Path, Path]:
    """Write <id>.html + <id>.json for one document.

    Output mirrors the source layout: output_dir / rel_dir / id.{html,json}.
    Returns (html_path, json_path).
    """
    dest_dir = output_dir / rel_dir
    dest_dir.mkdir(parents=True, exist_ok=True)

    doc = rendered.document
    html_path = dest_dir / f"{doc.id}.html"
    json_path = dest_dir / f"{doc.id}.json"

    sidecar = json.dumps(build_sidecar(rendered), indent=2, ensure_ascii=False, default=json_default)
    html_path.write_text(rendered.html, encoding='utf-8')
    json_path.write_text(sidecar, encoding='utf-8')
    return html_path, json_path


def build_index(entries: list[tuple[RenderedDoc, Path]]) -> list[dict]:
    """Return index entries (newest first) for (rendered, url) pairs."""
    ordered = sorted(entries, key=lambda e: e[0].document.date.timestamp(), reverse=True)
    return [
        {
            "id": r.document.id,
            "title": r.document.title,
            "date": r.document.date.isoformat(),
            "categories": r.document.categories,
            "tags": sorted(r.document.tags),
            "url": url.as_posix(),
            "excerpt": r.excerpt,
        }
        for r, url in ordered
    ]


def write_index(entries: list[tuple[RenderedDoc, Path]], output_dir: Path) -> Path:
    """Write _index.json listing every rendered document; returns its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / INDEX_FILE
    path.write_text(
        json.dumps(build_index(entries), indent=2, ensure_ascii=False, default=json_default),
        encoding='utf-8',
    )
    return path
