"""Server logging and tracing levels accepted by the admin commands."""

from __future__ import annotations

import enum


class LoggingLevel(enum.IntEnum):
    """Operation logging level sent with ``opLogging``."""

    OFF = 0
    WRITE = 1
    READ = 2
    READ_WRITE = 3


class TracingLevel(enum.IntEnum):
    """Trace level sent with ``traceAll`` and ``queryTraceLevel``."""

    OFF = 0
    SOME = 1
    ON = 2
