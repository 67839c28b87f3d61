"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, stowr.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class GenerateConfig(BaseModel):
    """[generate] section."""

    model_config = {"frozen": True}

    output_suffix: str = "_gen.py"
    header: bool = True
    template_dir: Path | None = None
