"""Front-matter extraction: YAML header blocks with a JSON header fallback"""

import json
from pathlib import Path
from typing import Any, Optional

import yaml

from pagepub.core.errors import FrontMatterError
from pagepub.log import LOG


YAML_DELIMITER = '---\n'
YAML_CLOSE = '\n---\n'
SCRIPT_OPEN = '<script>'
SCRIPT_CLOSE = '</script>'


def _as_mapping(data: Any, kind: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(f"Invalid {kind} metadata: expected a mapping, got {type(data).__name__}")
    return data


def split_yaml(text: str) -> tuple[dict[str, Any], str]:
    """Return (metadata, body) for text starting with a '---' YAML header."""
    # search from the opening newline so an empty header ('---\n---\n') still closes
    end = text.find(YAML_CLOSE, len(YAML_DELIMITER) - 1)
    if end == -1:
        raise FrontMatterError("Invalid YAML metadata: missing closing '---'")
    try:
        data = yaml.safe_load(text[len(YAML_DELIMITER):end])
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML metadata: {e}") from e
    return _as_mapping(data, 'YAML'), text[end + len(YAML_CLOSE):]


def split_json(text: str) -> tuple[dict[str, Any], str]:
    """Return (metadata, body) for a leading <script>{...}</script> block or bare JSON object."""
    if text.startswith(SCRIPT_OPEN):
        end = text.find(SCRIPT_CLOSE)
        if end == -1:
            raise FrontMatterError("Invalid JSON metadata: missing '</script>'")
        header, body = text[len(SCRIPT_OPEN):end], text[end + len(SCRIPT_CLOSE):]
        try:
            data = json.loads(header) if header.strip() else {}
        except json.JSONDecodeError as e:
            raise FrontMatterError(f"Invalid JSON metadata: {e}") from e
        return _as_mapping(data, 'JSON'), body.lstrip('\n')

    if text.lstrip().startswith('{'):
        start = len(text) - len(text.lstrip())
        try:
            data, end = json.JSONDecoder().raw_decode(text, start)
        except json.JSONDecodeError as e:
            raise FrontMatterError(f"Invalid JSON metadata: {e}") from e
        return _as_mapping(data, 'JSON'), text[end:].lstrip('\n')

    return {}, text


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Dispatch on the header prefix. Raises FrontMatterError on malformed metadata."""
    if text.startswith(YAML_DELIMITER):
        return split_yaml(text)
    return split_json(text)


def extract_frontmatter(text: str, path: Path | str) -> Optional[dict[str, Any]]:
    """Return the metadata record with the body under 'content', or None if the header is invalid."""
    try:
        metadata, body = split_frontmatter(text)
    except FrontMatterError as e:
        kind = 'YAML' if text.startswith(YAML_DELIMITER) else 'JSON'
        LOG.error("Invalid %s metadata for %s", kind, path)
        LOG.debug("%s", e)
        return None
    metadata['content'] = body
    return metadata
