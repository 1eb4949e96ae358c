"""Page assembly: run one document through every build stage"""

from pathlib import Path
from typing import Any, Callable, Optional

from pagepub.config import Settings
from pagepub.core.frontmatter import extract_frontmatter
from pagepub.core.highlight import highlight_code_blocks, load_template
from pagepub.core.markdown import render_markdown
from pagepub.core.models import Document, PublishedPage
from pagepub.core.partials import expand_partials


Preprocess = Callable[[dict[str, Any], Path], None]


def relative_source(source: Path, root: Path) -> Path:
    """Return source relative to root, comparing resolved paths when one side is absolute.

    Outside root, a relative path loses its first component and an absolute one
    keeps only its file name.
    """
    for src, base in ((source, root), (source.resolve(), root.resolve())):
        try:
            rel = src.relative_to(base)
        except ValueError:
            continue
        return rel if rel != Path('.') else Path(source.name)
    if source.is_absolute():
        return Path(source.name)
    return Path(*(source.parts[1:] or source.parts))


def target_path(source: Path, source_dir: Path, target_dir: Path) -> Path:
    """Map a source file to target_dir, dropping the source directory prefix and extension."""
    return target_dir / relative_source(source, source_dir).with_suffix('.html')


def render_content(metadata: dict[str, Any], file_type: str, settings: Settings) -> str:
    """Pop the body from metadata and run markdown, partial and highlight stages over it."""
    content = metadata.pop('content')
    toc = bool(metadata.pop('toc', False))
    no_heading_links = bool(metadata.pop('noHeadingLinks', False))

    if file_type == 'md':
        content = render_markdown(
            content,
            generate_links=toc or not no_heading_links,
            generate_toc=toc,
            preset=settings.parser_config,
        )

    content = expand_partials(content, Path(settings.partials_dir) if settings.partials_dir else None)

    if settings.highlight:
        content = highlight_code_blocks(
            content,
            default_language=settings.default_language,
            indent_unit=settings.indent_unit,
            template=load_template(settings.linenum_template),
        )
    return content


def build_page(
    document: Document,
    settings: Settings,
    target_dir: Path,
    preprocess: Optional[Preprocess] = None,
    ) -> PublishedPage | None:
    """Build a PublishedPage, or return None when the document's metadata is invalid.

    Any other failure (missing partial, highlighter error, I/O) propagates.
    """
    metadata = extract_frontmatter(document.raw_text, document.path)
    if metadata is None:
        return None

    if preprocess is not None:
        preprocess(metadata, document.path)

    content = render_content(metadata, document.file_type, settings)

    custom_fields = metadata.get('customFields') or []
    custom_fields.append({"key": "source_path", "value": str(document.path)})
    metadata['customFields'] = custom_fields

    return PublishedPage(
        source_path=document.path,
        target_path=target_path(document.path, Path(settings.source_dir), target_dir),
        metadata=metadata,
        content=content,
    )
