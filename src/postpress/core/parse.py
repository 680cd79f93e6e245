"""File discovery and Document construction from raw files"""

from pathlib import Path

from pydantic import ValidationError

from postpress.core.frontmatter import extract_frontmatter
from postpress.core.models import Document
from postpress.core.utils.hashing import sha256
from postpress.core.utils.slug import slugify, split_dated_name
from postpress.errors import DocumentError, InvalidDocument


MD_EXTENSIONS = {'.md', '.markdown'}
REQUIRED_FIELDS = ('title', 'date')


def discover_files(path: Path) -> list[tuple[Path, Path]]:
    """Return sorted (file, relative_dir) pairs for .md/.markdown files under path.

    A file path is returned as-is with an empty relative dir, whatever its suffix.
    """
    if not path.is_dir():
        return [(path, Path())]
    return [
        (p, p.parent.relative_to(path))
        for p in sorted(path.rglob('*'))
        if p.is_file() and p.suffix.lower() in MD_EXTENSIONS
    ]


def document_id(path: Path, slug: str = None) -> str:
    """Derive a document id: front-matter slug, else the filename minus any date prefix."""
    _, name = split_dated_name(path.stem)
    return slugify(str(slug or '')) or slugify(name) or slugify(path.stem) or 'doc'


def _summarise(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def parse_document(raw: str, path: Path) -> Document:
    """Build a Document from raw file text; raises DocumentError subclasses."""
    source = str(path)
    metadata, body = extract_frontmatter(raw, doc_id=source)
    date_prefix, _ = split_dated_name(path.stem)

    fields = {
        'id':         document_id(path, metadata.get('slug')),
        'path':       source,
        'title':      metadata.get('title'),
        'date':       metadata.get('date') or date_prefix,
        'categories': metadata.get('categories', metadata.get('category')),
        'tags':       metadata.get('tags'),
        'published':  metadata.get('published', True),
        'metadata':   metadata,
        'body':       body,
        'hash':       sha256(raw),
    }
    missing = [name for name in REQUIRED_FIELDS if fields[name] is None]
    if missing:
        raise InvalidDocument(f"missing required front matter: {', '.join(missing)}", source)
    try:
        return Document(**fields)
    except ValidationError as e:
        raise InvalidDocument(f"invalid front matter: {_summarise(e)}", source) from e


def load_document(path: Path) -> Document:
    """Read and parse a single document file."""
    try:
        raw = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"cannot read file: {e}", str(path)) from e
    return parse_document(raw, path)
