"""Partial inclusion: inline @partial(path) files as escaped html"""

import re
from pathlib import Path
from typing import Optional


PARTIAL_RE = re.compile(r'@partial\((.+)\)')
PLACEHOLDER_RE = re.compile(r'<!-- @placeholder-start\((.+?)\) -->[\s\S]+?@placeholder-end -->')

# '&' must come first so entities produced by later replacements are not re-escaped
ESCAPES = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&#039;'),
)


def escape_entities(text: str) -> str:
    for char, entity in ESCAPES:
        text = text.replace(char, entity)
    return text


def html_escape(text: str) -> str:
    """Collapse placeholder spans to a comment, then entity-escape the result."""
    return escape_entities(PLACEHOLDER_RE.sub(lambda m: f"<!-- {m.group(1)} -->", text))


def resolve_partial(name: str, base_dir: Optional[Path] = None) -> Path:
    path = Path(name)
    if path.is_absolute() or base_dir is None:
        return path
    return Path(base_dir) / path


def expand_partials(content: str, base_dir: Optional[Path] = None) -> str:
    """Replace every @partial(path) directive with the escaped file contents.

    Relative paths resolve against base_dir, or the working directory when unset.
    A missing file raises FileNotFoundError.
    """
    def _include(match: re.Match) -> str:
        return html_escape(resolve_partial(match.group(1), base_dir).read_text(encoding='utf-8'))

    return PARTIAL_RE.sub(_include, content)
