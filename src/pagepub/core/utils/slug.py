"""Slug generation for heading anchors"""

import re


NON_WORD_RE = re.compile(r'\W+')


def slugify(text: str) -> str:
    """Collapse non-word runs to '-', trim leading/trailing '-', and lowercase."""
    return NON_WORD_RE.sub('-', text).strip('-').lower()
