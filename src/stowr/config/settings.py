"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``STOWR_*`` prefix (``STOWR_GENERATE__HEADER=false``)
  3. TOML file    — ``stowr.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from stowr.config.models import GenerateConfig

CONFIG_FILENAME = "stowr.toml"
CONFIG_ENV_VAR = "STOWR_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the ``stowr.toml`` in effect for *start* (default: cwd), or None.

    ``STOWR_CONFIG`` names the file outright, and pointing it at a missing
    file disables config.  Otherwise the nearest ``stowr.toml`` in *start*
    or one of its parents wins, the way git finds ``.git``.
    """
    if override := os.environ.get(CONFIG_ENV_VAR):
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    candidates = (directory / CONFIG_FILENAME for directory in (here, *here.parents))
    return next((c for c in candidates if c.is_file()), None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``stowr.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class StowrSettings(BaseSettings):
    """Unified settings for the stowr CLI.

    Attributes:
        project_root: Directory of ``stowr.toml`` (or CWD if none found).
            Relative paths in the config resolve against it.
        config_path: The TOML file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STOWR_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    generate: GenerateConfig = Field(default_factory=GenerateConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> StowrSettings:
        """Construct settings from a CLI invocation.

        Discovers ``stowr.toml`` via walk-up (or explicit *config_path*) and
        merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def resolve_template_dir(self) -> Path | None:
        """Template override directory, absolute."""
        template_dir = self.generate.template_dir
        if template_dir is None:
            return None
        return template_dir if template_dir.is_absolute() else self.project_root / template_dir
