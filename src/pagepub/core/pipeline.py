"""Batch tasks: discover sources, build pages and copy resources in order"""

import shutil
from pathlib import Path
from typing import Optional

from pagepub.config import Settings
from pagepub.core.assemble import Preprocess, build_page, relative_source
from pagepub.core.errors import TaskFailed
from pagepub.core.models import BuildContext, Document, PublishedPage
from pagepub.log import LOG


PAGE_EXTENSIONS = {'.md', '.html'}

BUILD_PAGES = "build-pages"
BUILD_RESOURCES = "build-resources"


def discover_files(path: Path, extensions: Optional[set[str]] = None) -> list[Path]:
    """Return sorted files under path, or [path] if a single file. Filters by extension when given."""
    def _match(p: Path) -> bool:
        return extensions is None or p.suffix in extensions

    if path.is_file():
        return [path] if _match(path) else []
    return sorted(p for p in path.rglob('*') if p.is_file() and _match(p))


def run_build_pages(
    files: list[Path],
    settings: Settings,
    context: BuildContext,
    preprocess: Optional[Preprocess] = None,
    ) -> list[PublishedPage]:
    """Build and write each page in order.

    Documents with invalid metadata are skipped and counted in context.error_count.
    Any other error stops the batch. Raises TaskFailed if anything went wrong;
    pages written before the failure are kept.
    """
    context.target_dir.mkdir(parents=True, exist_ok=True)
    pages = []
    for p in files:
        LOG.info("Processing %s...", p)
        try:
            page = build_page(Document.from_path(p), settings, context.target_dir, preprocess)
            if page is None:
                context.error_count += 1
                continue
            context.written.append(page.write())
            pages.append(page)
        except Exception as e:
            raise TaskFailed(BUILD_PAGES, f"{p}: {e}") from e

    if context.error_count:
        raise TaskFailed(BUILD_PAGES, f"{context.error_count} document(s) skipped")
    return pages


def resource_target(source: Path, source_dir: Path, target_dir: Path) -> Path:
    """Place source under target_dir relative to source_dir, or minus its first path component."""
    return target_dir / relative_source(source, source_dir)


def run_build_resources(files: list[Path], settings: Settings, context: BuildContext) -> list[Path]:
    """Copy each resource file into context.target_dir. Raises TaskFailed on the first error."""
    context.target_dir.mkdir(parents=True, exist_ok=True)
    for p in files:
        dest = resource_target(p, Path(settings.resources_dir), context.target_dir)
        LOG.info("Copying %s -> %s", p, dest)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(p, dest)
        except OSError as e:
            context.error_count += 1
            raise TaskFailed(BUILD_RESOURCES, f"{p}: {e}") from e
        context.written.append(dest)
    return context.written
