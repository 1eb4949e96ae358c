"""Markdown rendering with linked headings and an optional table of contents"""

import re

from markdown_it import MarkdownIt
from markdown_it.token import Token

from pagepub.core.models import Heading
from pagepub.core.utils.slug import slugify


TAG_RE = re.compile(r'<[^>]+>')
TOC_INDENT = '  '


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _heading_level(token: Token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def linked_heading(heading: Heading) -> str:
    """Return the anchored heading html that replaces the default heading render."""
    return (
        f'<h{heading.depth} class="toc-linked">'
        f'<a href="#{heading.toc_id}" id="{heading.toc_id}" class="icon-link toc-link">'
        '<span class="visuallyhidden">link</span>'
        f'</a> {heading.text}</h{heading.depth}>'
    )


def collect_headings(md: MarkdownIt, tokens: list[Token], env: dict) -> list[tuple[int, Heading]]:
    """Return (token index, Heading) for every heading_open in the stream."""
    found = []
    for i, tok in enumerate(tokens):
        depth = _heading_level(tok)
        if depth is None:
            continue
        inline = tokens[i + 1]
        text = md.renderer.renderInline(inline.children or [], md.options, env)
        toc_text = TAG_RE.sub('', text)
        found.append((i, Heading(depth=depth, text=text, toc_text=toc_text, toc_id=slugify(toc_text))))
    return found


def toc_outline(headings: list[Heading]) -> str:
    """Return a nested markdown bullet list linking to each heading, in document order."""
    return ''.join(
        f"{TOC_INDENT * (h.depth - 1)}* [{h.toc_text}](#{h.toc_id})\n"
        for h in headings
    )


def link_headings(md: MarkdownIt, tokens: list[Token], env: dict) -> tuple[list[Token], list[Heading]]:
    """Replace each heading_open/inline/heading_close triple with a single html_block token."""
    found = collect_headings(md, tokens, env)
    by_index = dict(found)
    out: list[Token] = []
    skip = 0
    for i, tok in enumerate(tokens):
        if skip:
            skip -= 1
            continue
        heading = by_index.get(i)
        if heading is None:
            out.append(tok)
            continue
        out.append(Token(
            'html_block', '', 0,
            map=tok.map, level=tok.level, block=True,
            content=linked_heading(heading) + '\n',
        ))
        skip = 2
    return out, [h for _, h in found]


def render_markdown(
    body: str,
    generate_links: bool = False,
    generate_toc: bool = False,
    preset: str = 'gfm-like',
    ) -> str:
    """Convert markdown to html, optionally anchoring headings and prepending a TOC.

    generate_toc only applies when generate_links is set.
    """
    md = make_parser(preset)
    env: dict = {}
    tokens = md.parse(body, env)

    if not generate_links:
        return md.renderer.render(tokens, md.options, env)

    tokens, headings = link_headings(md, tokens, env)

    if generate_toc:
        # The outline defines no link references, so the document's env is reused as is.
        tokens = md.parse(toc_outline(headings), env) + tokens

    return md.renderer.render(tokens, md.options, env)
