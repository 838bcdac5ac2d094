"""
Opt-in logging for editforge.

The matching engine and the file editor accept `logger=` and `log=` keyword
arguments. Without either, every log call goes to a NoopLogger, so a
library user sees nothing unless they ask:

    replace_text(content, old, new, log=True)          # "editforge.*" loggers
    edit_file(root, "app.py", old, new, logger=my_log)  # caller's logger

Records name the replacer that located the match, e.g.
"[line_trimmed] unique match at line 12".
"""
from __future__ import annotations

import logging


class NoopLogger:
    """Accepts the logging.Logger call surface and drops everything."""

    def debug(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        pass

    info = warning = error = exception = critical = debug


def _propagate_to_root(lg: logging.Logger) -> None:
    # Records reach whatever handlers the application set up on the root.
    lg.propagate = True


def resolve_logger(
    logger: logging.Logger | None = None,
    *,
    enabled: bool = False,
    name: str | None = None,
    level: int = logging.INFO,
) -> logging.Logger | NoopLogger:
    """
    Pick the logger for one editforge call.

    An explicit `logger` wins. With `enabled`, the named logger (default
    "editforge") is set to `level`. Otherwise calls are dropped.
    """
    if logger is not None:
        return logger
    if enabled:
        lg = logging.getLogger(name or "editforge")
        lg.setLevel(level)
        _propagate_to_root(lg)
        return lg
    return NoopLogger()
