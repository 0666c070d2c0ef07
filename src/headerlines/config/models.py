"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, a settings file only contains
overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class EncoderConfig(BaseModel):
    """[encoder] section."""

    model_config = {"frozen": True}

    tag_key: str = Field(default="header", min_length=1)
    separator: str = ": "
    sort_mapping_keys: bool = False
