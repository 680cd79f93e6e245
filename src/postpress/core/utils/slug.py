"""Slug generation for document identifiers"""

import re


JEKYLL_NAME_RE = re.compile(r'^(?P<date>\d{4}-\d{2}-\d{2})-(?P<name>.+)$')


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def split_dated_name(stem: str) -> tuple[str | None, str]:
    """Split a 'YYYY-MM-DD-name' stem into ('YYYY-MM-DD', 'name'); (None, stem) otherwise."""
    m = JEKYLL_NAME_RE.match(stem)
    if m:
        return m.group('date'), m.group('name')
    return None, stem
