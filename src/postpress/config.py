"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "POSTPRESS_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    app_name:          str  = "postpress"
    output_dir:        str  = Field(default="site",     description="Directory for rendered HTML + sidecar JSON")
    parser_config:     str  = Field(default="gfm-like", description="MarkdownIt parser preset name")
    allow_html:        bool = Field(default=True,       description="Pass raw HTML blocks (iframes, embeds) through")
    excerpt_separator: str  = Field(default="\n\n",     description="Body text before this marker becomes the excerpt")
    include_drafts:    bool = Field(default=False,      description="Render documents marked 'published: false'")
    write_index:       bool = Field(default=True,       description="Write _index.json listing every rendered document")
    workers:           int  = Field(default=1, ge=1,    description="Documents rendered concurrently")
    log_level:         str  = Field(default="INFO",     description="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    log_format:        str  = Field(default="text", pattern="^(text|json)$", description="text or json")

    @field_validator("parser_config")
    @classmethod
    def _known_preset(cls, v: str) -> str:
        try:
            MarkdownIt(v)
        except KeyError as e:
            raise ValueError(f"unknown markdown-it preset '{v}'") from e
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level '{v}'; expected one of {', '.join(LOG_LEVELS)}")
        return level


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then POSTPRESS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def dump_config(settings: Settings) -> str:
    """Serialise settings as config.yaml text (app_name excluded)."""
    return yaml.safe_dump(
        settings.model_dump(exclude={"app_name"}), sort_keys=False, allow_unicode=True,
    )
