"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_THEME_DIR = Path(__file__).parent / "themes" / "default"


def normalize_root(root: str) -> str:
    """Return ``root`` with exactly one leading and one trailing slash."""
    root = root.strip()
    if not root.startswith("/"):
        root = "/" + root
    if not root.endswith("/"):
        root += "/"
    return root


class Settings(BaseSettings):
    """mdoc application settings."""

    model_config = SettingsConfigDict(
        env_prefix="MDOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    debug: bool = False

    # Paths
    content_dir: Path = Path(".")
    theme_dir: Path = DEFAULT_THEME_DIR

    # Mount prefix
    root: str = "/"

    # Markdown conversion
    markdown_engine: Literal["markdown", "pandoc"] = "markdown"
    pandoc_timeout: float = Field(default=10.0, gt=0)

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)

    @field_validator("root")
    @classmethod
    def _normalize_root(cls, value: str) -> str:
        return normalize_root(value)
