"""Route log records through structlog to stderr.

stdout belongs to command results (``--json`` output is piped), so every
log line goes to stderr: rendered for a terminal by default, or one JSON
object per line with ``--log-json``.  ``--verbose`` lowers only the
``stowr`` logger to DEBUG; Jinja2 and other libraries stay at WARNING.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

# Applied to structlog events and to records from stdlib loggers alike.
_PRE_CHAIN: tuple[Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


class StowrLogHandler(logging.StreamHandler):
    """The stderr handler stowr installs on the root logger.

    Its own class lets a second :func:`configure_logging` call find and
    replace it while leaving handlers installed by others alone.
    """

    def __init__(self, *, log_json: bool) -> None:
        super().__init__(sys.stderr)
        self.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=list(_PRE_CHAIN),
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    *_renderers(log_json),
                ],
            )
        )


def _renderers(log_json: bool) -> list[Processor]:
    if log_json:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install stowr's stderr handler and set logger levels.

    Safe to call once per CLI invocation; the previous stowr handler is
    replaced, not stacked.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, StowrLogHandler)]:
        root.removeHandler(handler)
    root.addHandler(StowrLogHandler(log_json=log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger("stowr").setLevel(logging.DEBUG if verbose else logging.WARNING)
