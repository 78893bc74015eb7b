"""
Runtime configuration.

Values come from the environment (prefix ``MINDMAP_``, nested sections split
with ``__``, e.g. ``MINDMAP_LAYOUT__CENTER_X=640``) or an optional ``.env``
file next to the working directory.
"""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = Path.cwd() / ".env"


class LayoutConfig(BaseModel):
    """Spacing constants for the layout engine, in canvas pixels."""
    model_config = ConfigDict(frozen=True)

    center_x: float = 500.0
    top_y: float = 100.0
    horizontal_spacing: float = 300.0
    level_spacing: float = 150.0
    leaf_columns: int = Field(default=4, ge=1)

    # Trivial layout used when the input can't be classified
    fallback_x: float = 100.0
    fallback_y: float = 100.0
    fallback_step: float = 250.0
    fallback_stagger: float = 50.0

    # Radial arrangement
    center_y: float = 300.0
    radius: float = 300.0
    detail_columns: int = Field(default=5, ge=1)


class HistoryConfig(BaseModel):
    """Undo/redo history behaviour."""
    model_config = ConfigDict(frozen=True)

    max_history: Optional[int] = Field(default=None, ge=1)  # None = unbounded
    skip_unchanged: bool = False
    enforce_references: bool = True


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MINDMAP_",
        env_nested_delimiter="__",
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    layout: LayoutConfig = LayoutConfig()
    history: HistoryConfig = HistoryConfig()

    host: str = "127.0.0.1"
    port: int = 8765
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]


settings = Settings()
