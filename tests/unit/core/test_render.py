"""Unit tests for core/render.py"""

import pytest

from postpress.core.frontmatter import extract_frontmatter
from postpress.core.regions import scan_regions
from postpress.core.render import excerpt_regions, render_excerpt, render_markdown
from postpress.errors import UnterminatedCodeFence, UnterminatedRawBlock


def test_render_emphasis_after_frontmatter():
    """The body returned by the extractor renders its emphasis markup."""
    fm, body = extract_frontmatter("---\ntitle: X\ntags:\n- a\n---\nBody **bold**")
    result = render_markdown(body)
    assert result.html == "<p>Body <strong>bold</strong></p>\n"
    assert result.warnings == []
    assert fm == {"title": "X", "tags": ["a"]}


def test_render_heading():
    """Ordinary markdown is rendered."""
    assert render_markdown("# Title\n").html == "<h1>Title</h1>\n"


def test_render_fence_is_literal():
    """Markdown-special characters inside a fence are not interpreted."""
    html = render_markdown("```\n# not a heading\n**not bold**\n```\n").html
    assert html == "<pre><code># not a heading\n**not bold**\n</code></pre>\n"
    assert "<h1>" not in html
    assert "<strong>" not in html


def test_render_fence_escapes_markup():
    """HTML inside a fence is escaped."""
    html = render_markdown("```html\n<b>x</b>\n```\n").html
    assert '<code class="language-html">&lt;b&gt;x&lt;/b&gt;\n</code>' in html


def test_render_raw_block_passthrough():
    """A raw block standing alone is emitted unchanged, tags included."""
    body = "{% raw %}<span>{{ site.url }}</span> **not bold**{% endraw %}\n"
    assert render_markdown(body).html == "<span>{{ site.url }}</span> **not bold**\n"


def test_render_multiline_raw_block_passthrough():
    """A multi-line raw block keeps markdown-looking lines as they are."""
    body = "Intro\n\n{% raw %}\n# not a heading\n<div class=\"deck\">\n\n  {{ x }}\n</div>\n{% endraw %}\n"
    html = render_markdown(body).html
    assert "<p>Intro</p>" in html
    assert "\n# not a heading\n<div class=\"deck\">\n\n  {{ x }}\n</div>\n" in html
    assert "<h1>" not in html


def test_render_inline_raw_block():
    """A raw region inside a paragraph is spliced back in place."""
    html = render_markdown("Use {% raw %}{{ x }}{% endraw %} here.\n").html
    assert html == "<p>Use {{ x }} here.</p>\n"


def test_render_raw_markers_inside_fence_are_shown():
    """Raw markers inside a fence render as literal code."""
    html = render_markdown("```liquid\n{% raw %}{{ x }}{% endraw %}\n```\n").html
    assert "{% raw %}{{ x }}{% endraw %}" in html
    assert html.startswith("<pre><code")


def test_render_iframe_passthrough():
    """An embedded slide iframe passes through verbatim."""
    iframe = '<iframe src="//slides.com/example/deck/embed" width="576" height="420" allowfullscreen></iframe>'
    html = render_markdown(f"Slides:\n\n{iframe}\n").html
    assert f"{iframe}\n" in html
    assert "<p><iframe" not in html


def test_render_html_disabled_escapes_iframe():
    """With raw HTML disabled, bare HTML is escaped but raw blocks still pass through."""
    result = render_markdown("<iframe></iframe>\n\n{% raw %}<b>ok</b>{% endraw %}\n", allow_html=False)
    assert "&lt;iframe&gt;" in result.html
    assert "<b>ok</b>" in result.html


def test_render_unterminated_fence_degrades():
    """An unclosed fence renders the rest as code and reports a warning."""
    result = render_markdown("Text\n\n```python\nx = 1\n")
    assert '<pre><code class="language-python">x = 1\n</code></pre>' in result.html
    assert "<p>Text</p>" in result.html
    assert len(result.warnings) == 1
    assert isinstance(result.warnings[0], UnterminatedCodeFence)
    assert result.warnings[0].line == 3


def test_render_unterminated_raw_degrades():
    """An unclosed raw block passes the rest through and reports a warning."""
    result = render_markdown("Text\n\n{% raw %}\n# kept <i>as is</i>\n")
    assert "\n# kept <i>as is</i>\n" in result.html
    assert "<h1>" not in result.html
    assert isinstance(result.warnings[0], UnterminatedRawBlock)


def test_render_warning_str_includes_line():
    """Warnings format with their line number."""
    result = render_markdown("```\ncode\n")
    assert str(result.warnings[0]).startswith("line 1: ")


def test_render_is_pure():
    """Rendering the same body twice gives identical output."""
    body = "a {% raw %}<x>{% endraw %} b\n\n```\nc\n```\n"
    assert render_markdown(body).html == render_markdown(body).html


@pytest.mark.parametrize("body,expected", [
    ("First para.\n\nSecond para.\n", "<p>First para.</p>\n"),
    ("\n\nFirst.\n\nSecond.", "<p>First.</p>\n"),
    ("Only one paragraph.", "<p>Only one paragraph.</p>\n"),
])
def test_render_excerpt(body, expected):
    """The excerpt is the body up to the first blank line."""
    assert render_excerpt(body) == expected


def test_render_excerpt_ignores_separator_inside_fence():
    """Blank lines inside a code fence do not end the excerpt."""
    html = render_excerpt("```\na\n\nb\n```\n\nafter\n")
    assert html == "<pre><code>a\n\nb\n</code></pre>\n"


def test_render_excerpt_custom_separator():
    """A custom separator marks the end of the excerpt."""
    html = render_excerpt("One.\n\nTwo.\n<!--more-->\nThree.\n", separator="<!--more-->")
    assert "<p>Two.</p>" in html
    assert "Three." not in html


def test_excerpt_regions_without_separator_keeps_everything():
    """An empty separator keeps every region."""
    regions, _ = scan_regions("a\n\nb\n")
    assert excerpt_regions(regions, "") == regions


def test_render_sample_post(sample_post):
    """A full article renders prose, code, the embedded deck, and lists."""
    _, body = extract_frontmatter(sample_post)
    result = render_markdown(body)
    assert "<strong>functionally</strong>" in result.html
    assert '<code class="language-scala">// # not a heading' in result.html
    assert '<iframe src="//slides.com/example/errors/embed"' in result.html
    assert "<h2>Further reading</h2>" in result.html
    assert '<a href="https://typelevel.org/cats/">cats</a>' in result.html
    assert result.warnings == []


def test_render_many_raw_regions_stay_distinct():
    """Each raw region is restored in place, even with ten or more of them."""
    body = "".join(f"{{% raw %}}<i>{n}</i>{{% endraw %}}{n} " for n in range(12)) + "\n"
    html = render_markdown(body).html
    expected = "".join(f"<i>{n}</i>{n} " for n in range(12)).rstrip()
    assert html == f"<p>{expected}</p>\n"


def test_render_inline_raw_paragraph_keeps_wrapper():
    """A raw region holding plain text keeps its paragraph even when alone."""
    html = render_markdown("{% raw %}{{ page.title }}{% endraw %}\n").html
    assert html == "<p>{{ page.title }}</p>\n"


def test_render_raw_markup_paragraph_is_unwrapped():
    """A raw region starting with a tag replaces its paragraph."""
    html = render_markdown("{% raw %}  <div>{{ x }}</div>{% endraw %}\n").html
    assert html == "  <div>{{ x }}</div>\n"
