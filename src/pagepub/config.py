"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:         str = "pagepub"
    source_dir:       str = Field(default="pages",      description="Directory scanned for .md/.html pages")
    resources_dir:    str = Field(default="resources",  description="Directory copied by build-resources")
    output_dir:       str = Field(default="dist",       description="Root directory for published output")
    pages_subdir:     str = Field(default="posts/page", description="Pages are written to output_dir/pages_subdir")
    parser_config:    str = Field(default="gfm-like",   description="MarkdownIt parser preset name")
    highlight:        bool = Field(default=True,        description="Syntax highlight <pre><code> blocks")
    default_language: str = Field(default="javascript", description="Fallback language for code blocks")
    indent_unit:      str = Field(default="  ",         description="Replacement for leading tabs in highlighted code")
    linenum_template: Optional[str] = Field(default=None, description="Jinja2 template file for code blocks")
    partials_dir:     Optional[str] = Field(default=None, description="Base directory for relative @partial paths")

    @property
    def pages_dir(self) -> Path:
        return Path(self.output_dir) / self.pages_subdir

    @property
    def resources_target_dir(self) -> Path:
        return Path(self.output_dir) / "resources"


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then PAGEPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"PAGEPUB_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
