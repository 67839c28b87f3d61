"""BaseService — shared foundation for stowr services.

Every service receives the resolved :class:`StowrSettings` at construction
time and reads paths, template overrides, and output options from it.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stowr.config.settings import StowrSettings


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class GenerateService(BaseService):
            def generate(self, source: Path) -> ServiceResult:
                path = self._resolve(source)
                ...
    """

    def __init__(self, settings: StowrSettings) -> None:
        self._settings = settings

    def _resolve(self, path: Path) -> Path:
        """Make *path* absolute; relative paths are taken from the CWD."""
        return path if path.is_absolute() else Path.cwd() / path
