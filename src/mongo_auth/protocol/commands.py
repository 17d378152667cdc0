"""Command names and response conventions of the database wire protocol.

Every operation in this package is a single command document sent to a named
database.  The server answers with a document whose ``ok`` field reports
success; failures are never signalled any other way at this layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

GETNONCE = "getnonce"
AUTHENTICATE = "authenticate"
LOGOUT = "logout"
LIST_DATABASES = "listDatabases"
SHUTDOWN = "shutdown"
LOGGING = "opLogging"
TRACING = "traceAll"
QUERY_TRACING = "queryTraceLevel"

ADMIN_DATABASE = "admin"

LOGIN_FAILED_MESSAGE = "couldn't log in"
LOGIN_FAILED_CODE = -3


def command_succeeded(response: Any) -> bool:
    """Return True when *response* carries a non-zero numeric ``ok`` field.

    A missing field, ``ok: 0``, a string such as ``"0"`` or a response that
    is not a mapping all count as failure.
    """
    if not isinstance(response, Mapping):
        return False
    ok = response.get("ok")
    return isinstance(ok, (bool, int, float)) and bool(ok)
