"""The command channel the authentication layer talks through.

Pattern: Structural Collaborator
---------------------------------
Sessions never open sockets or encode documents themselves.  They are handed
something that can ``connect`` to an address and ``run_command`` against a
database, and they only ever read the returned response mapping.  Any object
with these two methods works, which is what lets the tests drive a full login
against a scripted in-memory channel.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class CommandChannel(Protocol):
    """Sends named commands to a database server."""

    def connect(self, address: str, auto_reconnect: bool) -> Any:
        """Open a connection to ``host:port`` and return its handle."""
        ...

    def run_command(
        self,
        connection: Any,
        command: Mapping[str, Any],
        database: str,
    ) -> dict[str, Any]:
        """Run *command* on *database* and return the server's response.

        Failure is reported through the response's ``ok`` field, not raised.
        """
        ...

    def close(self, connection: Any) -> None:
        """Release the resources held by *connection*."""
        ...
