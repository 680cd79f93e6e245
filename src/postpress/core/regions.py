"""Passthrough-region scanner: splits a body into markdown, code fences, and raw blocks

States are outside-code-fence, inside-code-fence and inside-raw-block. A fence
can only open at the start of a line that begins outside any region; raw
markers are only recognised outside fences.
"""

import re

from postpress.core.models import Region, RegionKind
from postpress.errors import RenderWarning, UnterminatedCodeFence, UnterminatedRawBlock


FENCE_OPEN_RE = re.compile(r'^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>.*)$')
FENCE_CLOSE_RE = re.compile(r'^ {0,3}(?P<fence>`{3,}|~{3,})[ \t]*$')
RAW_OPEN_RE = re.compile(r'\{%-?\s*raw\s*-?%\}')
RAW_CLOSE_RE = re.compile(r'\{%-?\s*endraw\s*-?%\}')


def _opening_fence(line: str) -> str | None:
    """Return the fence marker a line opens with, else None."""
    m = FENCE_OPEN_RE.match(line.rstrip('\r\n'))
    if not m:
        return None
    fence = m.group('fence')
    # a backtick fence's info string may not contain backticks (CommonMark)
    if fence[0] == '`' and '`' in m.group('info'):
        return None
    return fence


def _closes_fence(line: str, fence: str) -> bool:
    m = FENCE_CLOSE_RE.match(line.rstrip('\r\n'))
    return bool(m) and m.group('fence')[0] == fence[0] and len(m.group('fence')) >= len(fence)


def scan_regions(body: str) -> tuple[list[Region], list[RenderWarning]]:
    """Split body into ordered regions; unterminated fences/raw blocks run to end of input.

    Returns (regions, warnings). Concatenating every region's text gives the body
    with its raw markers removed.
    """
    regions: list[Region] = []
    warnings: list[RenderWarning] = []
    buf: list[str] = []
    kind = RegionKind.markdown
    start = 1
    fence = ''

    def flush(next_kind: RegionKind, next_start: int, terminated: bool = True) -> None:
        nonlocal kind, start
        text = ''.join(buf)
        if text or kind is RegionKind.raw:
            regions.append(Region(kind=kind, text=text, line=start, terminated=terminated))
        buf.clear()
        kind, start = next_kind, next_start

    for lineno, line in enumerate(body.splitlines(keepends=True), start=1):
        if kind is RegionKind.fence:
            buf.append(line)
            if _closes_fence(line, fence):
                flush(RegionKind.markdown, lineno + 1)
            continue

        if kind is RegionKind.markdown:
            opened = _opening_fence(line)
            if opened:
                flush(RegionKind.fence, lineno)
                fence = opened
                buf.append(line)
                continue

        pos = 0
        while pos < len(line):
            if kind is RegionKind.markdown:
                m = RAW_OPEN_RE.search(line, pos)
                if not m:
                    buf.append(line[pos:])
                    break
                buf.append(line[pos:m.start()])
                flush(RegionKind.raw, lineno)
            else:
                m = RAW_CLOSE_RE.search(line, pos)
                if not m:
                    buf.append(line[pos:])
                    break
                buf.append(line[pos:m.start()])
                flush(RegionKind.markdown, lineno)
            pos = m.end()

    if kind is RegionKind.fence:
        warnings.append(UnterminatedCodeFence(
            f"code fence opened with {fence} is never closed; rendering the rest of the document as code",
            line=start,
        ))
        flush(RegionKind.markdown, 0, terminated=False)
    elif kind is RegionKind.raw:
        warnings.append(UnterminatedRawBlock(
            "{% raw %} block is never closed; passing the rest of the document through verbatim",
            line=start,
        ))
        flush(RegionKind.markdown, 0, terminated=False)
    else:
        flush(RegionKind.markdown, 0)

    return regions, warnings
