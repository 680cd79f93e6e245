"""Markdown rendering with code-fence and raw-block passthrough"""

import re
from functools import lru_cache

from markdown_it import MarkdownIt

from postpress.core.models import Region, RegionKind, Rendered
from postpress.core.regions import scan_regions
from postpress.core.utils.hashing import sha256


@lru_cache(maxsize=None)
def make_parser(preset: str = 'gfm-like', allow_html: bool = True) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False, "html": allow_html})


def _render_regions(regions: list[Region], preset: str, allow_html: bool) -> str:
    """Render markdown and fence regions; splice raw regions back in verbatim."""
    nonce = sha256(''.join(r.text for r in regions))[:12]
    raws: dict[int, str] = {}
    parts = []
    for i, region in enumerate(regions):
        if region.kind is RegionKind.raw:
            raws[i] = region.text
            parts.append(f"postpress-raw-{nonce}-{i}x")
        else:
            parts.append(region.text)

    html = make_parser(preset, allow_html).render(''.join(parts))
    if not raws:
        return html
    placeholder = re.compile(rf"(<p>)?postpress-raw-{nonce}-(\d+)x(?(1)</p>)")

    def restore(m: re.Match) -> str:
        text = raws[int(m.group(2))]
        # a raw region standing alone as a paragraph replaces the whole element
        # only when it is markup itself; inline text keeps its paragraph
        if m.group(1) and not text.lstrip().startswith("<"):
            return f"<p>{text}</p>"
        return text

    return placeholder.sub(restore, html)


def render_markdown(body: str, preset: str = 'gfm-like', allow_html: bool = True) -> Rendered:
    """Render a document body to HTML.

    Fenced code is escaped and never reinterpreted; {% raw %} regions are
    emitted unchanged. A raw region that fills a paragraph on its own and starts
    with a tag (an iframe embed, say) replaces that paragraph; otherwise it stays
    wrapped in <p> like any other inline text. Unterminated regions run to the
    end of the body and are reported as warnings on the result rather than raised.
    """
    regions, warnings = scan_regions(body)
    return Rendered(html=_render_regions(regions, preset, allow_html), warnings=warnings)


def excerpt_regions(regions: list[Region], separator: str) -> list[Region]:
    """Return the regions before the first separator found in markdown text.

    Leading whitespace is skipped before searching. A separator only counts if
    it ends inside markdown text, so blank lines within code fences or raw
    blocks never cut the excerpt. Without a match the whole body is kept.
    """
    if not separator:
        return list(regions)
    out: list[Region] = []
    tail = ''
    seen_text = False
    for region in regions:
        text = region.text
        if region.kind is RegionKind.markdown:
            begin = 0 if seen_text else len(tail) + len(text) - len(text.lstrip())
            idx = (tail + text).find(separator, begin)
            if idx != -1:
                out.append(region.model_copy(update={"text": text[:max(idx - len(tail), 0)]}))
                return out
        out.append(region)
        seen_text = seen_text or region.kind is not RegionKind.markdown or bool(text.strip())
        tail = (tail + text)[-(len(separator) - 1):] if len(separator) > 1 else ''
    return out


def render_excerpt(
    body: str,
    separator: str = "\n\n",
    preset: str = 'gfm-like',
    allow_html: bool = True,
    ) -> str:
    """Render the excerpt (body text before the first separator) to HTML."""
    regions, _ = scan_regions(body)
    return _render_regions(excerpt_regions(regions, separator), preset, allow_html)
