"""Data models passed between the page build stages"""

import datetime
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Document:
    """A source document as read from disk."""
    path:     Path
    raw_text: str

    @property
    def file_type(self) -> str:
        return self.path.suffix.lstrip('.').lower()

    @classmethod
    def from_path(cls, path: Path) -> "Document":
        return cls(path=path, raw_text=path.read_text(encoding='utf-8'))


@dataclass
class Heading:
    """A heading found while rendering markdown, with its anchor id."""
    depth:    int
    text:     str               # inline html of the heading
    toc_text: str               # text with all tags stripped
    toc_id:   str


@dataclass
class CodeBlock:
    """Resolved settings for one <pre><code> block."""
    source:     str
    language:   str
    start_line: int = 1
    gutter:     bool = False


def _json_default(value: Any) -> Any:
    """Serialize YAML-decoded dates as ISO strings."""
    if isinstance(value, (datetime.date, datetime.datetime, datetime.time)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class PublishedPage:
    """Final metadata + content pair for one document."""
    source_path: Path
    target_path: Path
    metadata:    dict[str, Any]
    content:     str

    def render(self) -> str:
        """Return the page text: a <script> JSON metadata block followed by the content."""
        data = json.dumps(self.metadata, separators=(',', ':'), ensure_ascii=False, default=_json_default)
        return f"<script>{data}</script>\n{self.content}"

    def write(self) -> Path:
        self.target_path.parent.mkdir(parents=True, exist_ok=True)
        self.target_path.write_text(self.render(), encoding='utf-8')
        return self.target_path


@dataclass
class BuildContext:
    """Batch-scoped state shared by every document in one task run."""
    target_dir:  Path
    error_count: int = 0
    written:     list[Path] = field(default_factory=list)
