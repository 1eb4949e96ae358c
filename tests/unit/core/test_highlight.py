"""Unit tests for core/highlight.py"""

import pytest
from jinja2 import Environment

from pagepub.core.highlight import (
    crude_markup_check,
    detect_language,
    fix_markup,
    highlight_code_blocks,
    language_from_class,
    load_template,
    outdent,
    parse_line_numbers,
    resolve_language,
    split_multiline_spans,
)
from pagepub.core.markdown import render_markdown


# --- outdent ---

def test_outdent_removes_common_tabs():
    """k shared leading tabs are removed; relative indentation is kept."""
    assert outdent("\t\tfoo\n\t\t\tbar\n\t\tbaz") == "foo\n\tbar\nbaz"


def test_outdent_zero_common_tabs_unchanged():
    text = "foo\n\tbar\n  baz"
    assert outdent(text) == text


def test_outdent_drops_blank_first_and_last_lines():
    assert outdent("\n\tfoo\n\tbar\n\t") == "foo\nbar"


def test_outdent_blank_interior_line_becomes_space():
    """Interior blank lines keep their place as a single space."""
    assert outdent("\tfoo\n\n\tbar") == "foo\n \nbar"


def test_outdent_is_idempotent():
    once = outdent("\n\t\tfoo\n\n\t\t\tbar\n")
    assert outdent(once) == once


# --- language resolution ---

def test_detect_language():
    assert detect_language("javascript")
    assert detect_language("xml")
    assert not detect_language("example")
    assert not detect_language("")
    assert not detect_language(None)


def test_language_from_class_strips_prefix():
    assert language_from_class(["example", "lang-python"]) == "python"
    assert language_from_class(["language-python"]) == "python"
    assert language_from_class("example ruby") == "ruby"
    assert language_from_class(["example"]) == ""
    assert language_from_class(None) == ""


@pytest.mark.parametrize("code,expected", [
    ("<div>", "xml"),
    ("   \n <p>", "xml"),
    ("&lt;div&gt;", "xml"),
    ("var x;", ""),
])
def test_crude_markup_check(code, expected):
    assert crude_markup_check(code) == expected


def test_resolve_language_attribute_wins():
    assert resolve_language("<div>", "python", ["lang-ruby"]) == "python"


def test_resolve_language_class_beats_heuristic():
    assert resolve_language("<div>", None, ["example", "lang-ruby"]) == "ruby"


def test_resolve_language_heuristic_beats_default():
    assert resolve_language("<div>", None, ["example"]) == "xml"


def test_resolve_language_default():
    assert resolve_language("var x = 1;", None, None) == "javascript"
    assert resolve_language("x = 1", None, None, default="python") == "python"


def test_resolve_language_unknown_attribute_falls_through():
    """An unknown data-lang is not an error; resolution continues."""
    assert resolve_language("x = 1", "nosuchlang", None) == "javascript"


# --- line numbers ---

@pytest.mark.parametrize("attr,expected", [
    ("true", (1, True)),
    ("5", (5, True)),
    ("12px", (12, True)),
    ("0", (1, True)),
    ("notanumber", (1, True)),
    ("", (1, True)),
    (None, (1, False)),
])
def test_parse_line_numbers(attr, expected):
    """Gutter shows whenever the attribute is present; start defaults to 1."""
    assert parse_line_numbers(attr) == expected


# --- markup passes ---

def test_fix_markup_replaces_leading_tabs():
    assert fix_markup("\tfoo\n\t\tbar", "  ") == "  foo\n    bar"


def test_fix_markup_tabs_inside_leading_tags():
    assert fix_markup('<span class="w">\t</span>x', "    ") == '<span class="w">    </span>x'


def test_fix_markup_leaves_inner_tabs():
    assert fix_markup("a\tb", "  ") == "a\tb"


def test_split_multiline_comment_span():
    """A multi-line comment span is reopened on each line."""
    value = '<span class="comment">/* line1\nline2 */</span>'
    assert split_multiline_spans(value) == (
        '<span class="comment">/* line1</span>\n<span class="comment">line2 */</span>'
    )


def test_split_multiline_spans_single_line_untouched():
    value = '<span class="comment">/* one */</span>\n<span class="k">var</span>'
    assert split_multiline_spans(value) == value


# --- highlight_code_blocks ---

def test_highlight_with_start_line():
    """data-linenum="5" shows the gutter and numbers rows from 5."""
    out = highlight_code_blocks('<pre><code data-linenum="5">var a = 1;\nvar b = 2;</code></pre>')
    assert '<td class="gutter">' in out
    assert "number5" in out and "number6" in out
    assert "number7" not in out
    assert 'class="syntaxhighlighter javascript"' in out
    assert "<pre>" not in out


def test_highlight_without_linenum_has_no_gutter():
    out = highlight_code_blocks("<pre><code>var a = 1;</code></pre>")
    assert '<td class="gutter">' not in out
    assert "nogutter" in out
    assert "number1" in out


def test_highlight_class_language_and_tab_indent():
    """The class picks the lexer; leading tabs become the indent unit."""
    out = highlight_code_blocks(
        '<pre><code class="lang-python">def f():\n\tpass</code></pre>',
        indent_unit="  ",
    )
    assert 'class="syntaxhighlighter python' in out
    assert '<span class="k">def</span>' in out
    assert "\t" not in out


def test_highlight_decodes_entities_and_detects_markup():
    out = highlight_code_blocks("<pre><code>&lt;div&gt;hi&lt;/div&gt;</code></pre>")
    assert 'class="syntaxhighlighter xml' in out


def test_highlight_multiline_comment_per_line():
    """Every line of a block comment keeps its comment class."""
    out = highlight_code_blocks("<pre><code>/* a\nb */\nvar x;</code></pre>")
    assert '<span class="cm">/* a</span>' in out
    assert '<span class="cm">b */</span>' in out


def test_highlight_outdents_nested_source():
    out = highlight_code_blocks('<pre><code data-lang="python">\n\t\tx = 1\n\t\ty = 2\n</code></pre>',
                                template=Environment().from_string("{{ lines|length }}"))
    assert out == "2"


def test_highlight_preserves_surrounding_markup():
    out = highlight_code_blocks("<p>Intro</p><pre><code>x</code></pre><p>Outro</p>")
    assert out.startswith("<p>Intro</p>")
    assert out.endswith("<p>Outro</p>")


def test_highlight_ignores_code_outside_pre():
    html = "<p>Use <code>foo()</code> here.</p>"
    assert highlight_code_blocks(html) == html


def test_highlight_keeps_escaped_text_outside_code():
    """Entities outside code blocks, quotes included, are written back unchanged."""
    html = "<p>&lt;a href=&quot;x&quot;&gt;it&#039;s&lt;/a&gt;</p>"
    assert highlight_code_blocks(html) == html


def test_highlight_fenced_markdown_block():
    """Fenced blocks rendered by markdown-it keep their info-string language."""
    html = render_markdown("```python\ndef f():\n    pass\n```\n", generate_links=True)
    out = highlight_code_blocks(html)
    assert "syntaxhighlighter python" in out
    assert '<span class="k">def</span>' in out


def test_highlight_multiple_blocks():
    out = highlight_code_blocks(
        '<pre><code data-lang="python">a</code></pre><pre><code data-lang="ruby">b</code></pre>'
    )
    assert out.count("syntaxhighlighter") == 2
    assert "syntaxhighlighter python" in out
    assert "syntaxhighlighter ruby" in out


def test_highlight_custom_template_file(tmp_path):
    """A template file replaces the built-in line-number markup."""
    path = tmp_path / "lines.html"
    path.write_text("{{ lang }}:{{ start_at }}:{{ gutter }}:{{ lines|length }}")
    out = highlight_code_blocks(
        '<pre><code data-lang="python" data-linenum="3">a\nb</code></pre>',
        template=load_template(path),
    )
    assert out == "python:3:True:2"
