"""Pipeline step functions: load, render, and build orchestration"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from postpress.config import Settings
from postpress.core.export import write_doc, write_index
from postpress.core.models import BuildReport, Document, RenderedDoc
from postpress.core.parse import discover_files, load_document
from postpress.core.render import render_excerpt, render_markdown
from postpress.errors import DocumentError


_logger = logging.getLogger(__name__)


def render_document(doc: Document, settings: Settings) -> RenderedDoc:
    """Render a parsed document's body and excerpt; degradations are logged, not raised."""
    rendered = render_markdown(doc.body, settings.parser_config, settings.allow_html)
    excerpt = render_excerpt(
        doc.body, settings.excerpt_separator, settings.parser_config, settings.allow_html,
    )
    for w in rendered.warnings:
        _logger.warning(
            "%s: %s", doc.path, w,
            extra={"doc_id": doc.id, "line": w.line, "kind": w.kind},
        )
    return RenderedDoc(document=doc, html=rendered.html, excerpt=excerpt, warnings=rendered.warnings)


def process_file(path: Path, settings: Settings) -> RenderedDoc:
    """Load and render a single file. Raises DocumentError for unusable documents."""
    return render_document(load_document(path), settings)


def _attempt(path: Path, settings: Settings) -> RenderedDoc | DocumentError:
    try:
        return process_file(path, settings)
    except DocumentError as e:
        return e


def collect_files(paths: str | Path | Iterable[str | Path]) -> list[tuple[Path, Path]]:
    """Expand files and directories into (file, relative_dir) pairs, in input order."""
    if isinstance(paths, (str, Path)):
        paths = [paths]
    files = []
    for p in paths:
        files.extend(discover_files(Path(p)))
    return files


def run_build(
    paths: str | Path | Iterable[str | Path],
    settings: Settings,
    write: bool = True,
    ) -> BuildReport:
    """Render every document under paths and (optionally) write outputs.

    A failing document is recorded in the report and never stops the others.
    With write=False nothing touches the filesystem (used by `check`).
    """
    files = collect_files(paths)
    output_dir = Path(settings.output_dir)

    if settings.workers > 1:
        with ThreadPoolExecutor(max_workers=settings.workers) as pool:
            outcomes = list(pool.map(lambda f: _attempt(f[0], settings), files))
    else:
        outcomes = [_attempt(f, settings) for f, _ in files]

    report = BuildReport()
    index_entries: list[tuple[RenderedDoc, Path]] = []
    seen: dict[Path, str] = {}

    for (path, rel_dir), outcome in zip(files, outcomes):
        if isinstance(outcome, DocumentError):
            _logger.error("%s", outcome, extra={"doc_id": outcome.doc_id})
            report.failures.append((str(path), outcome.message))
            continue

        doc = outcome.document
        if not doc.published and not settings.include_drafts:
            _logger.info("%s: skipped draft", path, extra={"doc_id": doc.id})
            report.skipped.append(str(path))
            continue

        target = rel_dir / doc.id
        if target in seen:
            message = f"duplicate document id '{doc.id}' (also produced by {seen[target]})"
            _logger.error("%s: %s", path, message, extra={"doc_id": doc.id})
            report.failures.append((str(path), message))
            continue
        seen[target] = str(path)

        html_path = None
        if write:
            try:
                html_path, _ = write_doc(outcome, output_dir, rel_dir)
            except (OSError, TypeError, ValueError) as e:
                message = f"cannot write output: {e}"
                _logger.error("%s: %s", path, message, extra={"doc_id": doc.id})
                report.failures.append((str(path), message))
                continue
            _logger.debug("%s -> %s", path, html_path, extra={"doc_id": doc.id})
        report.warnings.extend((str(path), str(w)) for w in outcome.warnings)
        report.rendered.append((doc.id, html_path))
        index_entries.append((outcome, rel_dir / f"{doc.id}.html"))

    if write and settings.write_index and index_entries:
        report.index = write_index(index_entries, output_dir)
    return report
