"""Code block post-processor: language detection, outdent, Pygments highlighting, line numbers"""

import html
import re
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup, Tag
from bs4.formatter import HTMLFormatter
from jinja2 import Environment, FileSystemLoader, Template
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from pagepub.core.models import CodeBlock
from pagepub.core.partials import escape_entities


LEADING_TABS_RE = re.compile(r'^\t+')
LEADING_MARKUP_RE = re.compile(r'^((?:<[^>]+>|\t)+)', re.MULTILINE)
MULTILINE_SPAN_RE = re.compile(r'<span class="([^"]*)">([^<]*\n[^<]*)</span>')
LINE_START_RE = re.compile(r'\s*([+-]?\d+)')
# markdown-it emits "language-<name>" on fenced code
LANG_PREFIX_RE = re.compile(r'^lang(?:uage)?-')

# keeps quotes escaped in text and attributes when the tree is written back out
PAGE_FORMATTER = HTMLFormatter(entity_substitution=escape_entities)

LINE_NUMBER_TEMPLATE = """\
<div class="syntaxhighlighter {{ lang }}{% if not gutter %} nogutter{% endif %}">
<table>
<tbody>
<tr>
{%- if gutter %}
<td class="gutter">
{%- for line in lines %}
<div class="line number{{ start_at + loop.index0 }} index{{ loop.index0 }} alt{{ 2 - loop.index0 % 2 }}">{{ start_at + loop.index0 }}</div>
{%- endfor %}
</td>
{%- endif %}
<td class="code">
<div class="container">
{%- for line in lines %}
<div class="line number{{ start_at + loop.index0 }} index{{ loop.index0 }} alt{{ 2 - loop.index0 % 2 }}"><code>{{ line }}</code></div>
{%- endfor %}
</div>
</td>
</tr>
</tbody>
</table>
</div>
"""


def load_template(path: Optional[str | Path] = None) -> Template:
    """Return the line-number template, read from path when given."""
    if path is None:
        return Environment(autoescape=False).from_string(LINE_NUMBER_TEMPLATE)
    path = Path(path)
    env = Environment(loader=FileSystemLoader(str(path.parent)), autoescape=False)
    return env.get_template(path.name)


def outdent(text: str) -> str:
    """Strip the tab indentation shared by every non-blank line.

    A blank first or last line is dropped; blank interior lines become a single
    space so the block keeps its height.
    """
    lines = text.split('\n')
    adjusted = []
    min_tabs = None

    for i, line in enumerate(lines):
        if not line.strip():
            if i not in (0, len(lines) - 1):
                adjusted.append(' ')
            continue
        match = LEADING_TABS_RE.match(line)
        tabs = len(match.group(0)) if match else 0
        min_tabs = tabs if min_tabs is None else min(min_tabs, tabs)
        adjusted.append(line)

    if min_tabs:
        prefix = '\t' * min_tabs
        adjusted = [line[min_tabs:] if line.startswith(prefix) else line for line in adjusted]

    return '\n'.join(adjusted)


def detect_language(name: Optional[str]) -> bool:
    """True if Pygments has a lexer registered under this alias."""
    if not name:
        return False
    try:
        get_lexer_by_name(name)
    except ClassNotFound:
        return False
    return True


def language_from_class(classes) -> str:
    """Return the first class naming a highlightable language, with any lang- or language- prefix removed."""
    if isinstance(classes, str):
        classes = classes.split()
    for cls in classes or []:
        name = LANG_PREFIX_RE.sub('', cls)
        if detect_language(name):
            return name
    return ''


def crude_markup_check(code: str) -> str:
    """'xml' when the code opens with an angle bracket, literal or entity-encoded."""
    first = code.strip()
    return 'xml' if first.startswith('<') or first.startswith('&lt;') else ''


def resolve_language(code: str, lang_attr: Optional[str], classes, default: str = 'javascript') -> str:
    """Pick the block language: data-lang, then class, then markup heuristic, then default."""
    if detect_language(lang_attr):
        return lang_attr
    return language_from_class(classes) or crude_markup_check(code) or default


def parse_line_numbers(attr: Optional[str]) -> tuple[int, bool]:
    """Return (start_line, gutter) for a data-linenum attribute value."""
    gutter = attr is not None
    if attr == 'true':
        return 1, gutter
    match = LINE_START_RE.match(attr or '')
    start = int(match.group(1)) if match else 0
    return start or 1, gutter


def highlight_source(language: str, code: str) -> str:
    """Run the Pygments lexer for language over code and return inline span markup."""
    lexer = get_lexer_by_name(language, stripnl=False)
    return pygments_highlight(code, lexer, HtmlFormatter(nowrap=True)).rstrip('\n')


def fix_markup(value: str, indent_unit: str = '  ') -> str:
    """Replace tabs in the leading tag/tab run of each line with indent_unit."""
    return LEADING_MARKUP_RE.sub(lambda m: m.group(1).replace('\t', indent_unit), value)


def split_multiline_spans(value: str) -> str:
    """Close and reopen any single span that crosses a newline, e.g. a /* ... */ comment."""
    def _split(match: re.Match) -> str:
        cls, body = match.group(1), match.group(2)
        return f'<span class="{cls}">' + body.replace('\n', f'</span>\n<span class="{cls}">') + '</span>'

    return MULTILINE_SPAN_RE.sub(_split, value)


def read_block(code: Tag, default_language: str = 'javascript') -> CodeBlock:
    """Decode and outdent a <code> element and resolve its language and numbering."""
    source = outdent(html.unescape(code.decode_contents()))
    start, gutter = parse_line_numbers(code.get('data-linenum'))
    return CodeBlock(
        source=source,
        language=resolve_language(source, code.get('data-lang'), code.get('class'), default_language),
        start_line=start,
        gutter=gutter,
    )


def render_block(block: CodeBlock, template: Template, indent_unit: str = '  ') -> str:
    """Highlight a CodeBlock and render it through the line-number template."""
    fixed = split_multiline_spans(fix_markup(highlight_source(block.language, block.source), indent_unit))
    return template.render(
        lines=fixed.split('\n'),
        start_at=block.start_line,
        gutter=block.gutter,
        lang=block.language,
    )


def highlight_code_blocks(
    content: str,
    default_language: str = 'javascript',
    indent_unit: str = '  ',
    template: Optional[Template] = None,
    ) -> str:
    """Replace every <pre><code> block in content with highlighted, line-numbered markup."""
    template = template or load_template()
    soup = BeautifulSoup(content, 'html.parser')

    for code in soup.select('pre > code'):
        block = read_block(code, default_language)
        fragment = BeautifulSoup(render_block(block, template, indent_unit), 'html.parser')
        code.parent.replace_with(*list(fragment.contents))

    return soup.decode(formatter=PAGE_FORMATTER)
