"""
Opt-in logging for the diff engine.

Engine entry points take `logger=None, log=False` and resolve them once:

    from blockpatch._logging import resolve_logger

    def apply_blocks(content, blocks, *, logger=None, log: bool = False):
        log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)
        log.debug(f"Parsed {len(blocks)} block(s)")

The resolved object is passed down to helpers (`locate_block(..., log=log)`),
so one switch covers a whole apply call. Callers that never opt in get a
NoopLogger; the engine stays silent and never touches global logging
configuration.
"""
from __future__ import annotations

import logging

DEFAULT_LOGGER_NAME = "blockpatch"


class NoopLogger:
    """Accepts the `logging.Logger` call surface the engine uses and drops it."""

    def debug(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        pass

    info = warning = error = exception = critical = debug


def resolve_logger(
    logger: logging.Logger | NoopLogger | None = None,
    *,
    enabled: bool = False,
    name: str | None = None,
    level: int = logging.INFO,
) -> logging.Logger | NoopLogger:
    """
    Return a usable logger according to opt-in policy.

    - An explicit `logger` wins, including a NoopLogger handed down by a caller.
    - Else with `enabled`, the named logger (default "blockpatch") set to
      `level`; records propagate to the root so host handlers and pytest's
      caplog see them.
    - Else a NoopLogger.
    """
    if logger is not None:
        return logger
    if not enabled:
        return NoopLogger()
    lg = logging.getLogger(name or DEFAULT_LOGGER_NAME)
    lg.setLevel(level)
    lg.propagate = True
    return lg
