"""Front-matter extraction and composition"""

from typing import Any

import yaml

from postpress.errors import MalformedFrontMatter


DELIMITER = "---"
BOM = "\ufeff"


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def extract_frontmatter(text: str, doc_id: str = None) -> tuple[dict[str, Any], str]:
    """Return (metadata, body) for a document's raw text.

    The block must open on the very first line. Without an opening delimiter
    the whole input is body and the metadata is empty. An opening delimiter
    with no closing one, invalid YAML, or YAML that is not a mapping raises
    MalformedFrontMatter. The body is returned exactly as it follows the
    closing delimiter line.
    """
    source = text[len(BOM):] if text.startswith(BOM) else text
    lines = source.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        return {}, text

    for i in range(1, len(lines)):
        if _is_delimiter(lines[i]):
            block = "".join(lines[1:i])
            body = "".join(lines[i + 1:])
            break
    else:
        raise MalformedFrontMatter("front matter opened with '---' is never closed", doc_id)

    try:
        metadata = yaml.safe_load(block) if block.strip() else {}
    except yaml.YAMLError as e:
        raise MalformedFrontMatter(f"invalid YAML front matter: {e}", doc_id) from e
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise MalformedFrontMatter(
            f"front matter must be a mapping, got {type(metadata).__name__}", doc_id
        )
    return metadata, body


def compose_frontmatter(metadata: dict[str, Any], body: str) -> str:
    """Prepend metadata as a YAML front-matter block; inverse of extract_frontmatter."""
    if not metadata:
        header = ""
    else:
        header = yaml.safe_dump(
            metadata, default_flow_style=False, allow_unicode=True, sort_keys=False
        )
    return f"{DELIMITER}\n{header}{DELIMITER}\n{body}"
