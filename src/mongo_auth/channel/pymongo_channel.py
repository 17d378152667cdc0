"""``CommandChannel`` backed by pymongo.

pymongo owns the socket, the pool and the wire encoding; this adapter only
maps the channel contract onto ``MongoClient`` and ``Database.command``.
Commands run with ``check=False`` so a server-side refusal comes back as an
``ok: 0`` document.  Driver errors (network failures, timeouts, the server
dropping the connection on shutdown) are turned into the same shape so that
no failure escapes as an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pymongo
import pymongo.errors
from bson.son import SON

logger = logging.getLogger(__name__)


class PyMongoChannel:
    """Runs commands through ``pymongo.MongoClient`` connections."""

    def __init__(self, **client_options: Any) -> None:
        self._client_options = client_options

    def connect(self, address: str, auto_reconnect: bool) -> pymongo.MongoClient:
        """Create a client for *address*.

        pymongo connects lazily, so a bad host only surfaces on the first
        command.  *auto_reconnect* maps onto the driver's retryable reads and
        writes.
        """
        logger.debug("Opening client for %s (auto_reconnect=%s)", address, auto_reconnect)
        return pymongo.MongoClient(
            address,
            retryReads=auto_reconnect,
            retryWrites=auto_reconnect,
            **self._client_options,
        )

    def run_command(
        self,
        connection: pymongo.MongoClient,
        command: Mapping[str, Any],
        database: str,
    ) -> dict[str, Any]:
        # The command name must be the first key on the wire.
        document = SON(list(command.items()))
        try:
            response = connection[database].command(document, check=False)
        except pymongo.errors.ConfigurationError:
            raise
        except pymongo.errors.PyMongoError as exc:
            logger.warning(
                "Command %s on database %s failed: %s",
                next(iter(command), "?"),
                database,
                exc,
            )
            return {"ok": 0, "errmsg": str(exc)}
        return dict(response)

    def close(self, connection: pymongo.MongoClient) -> None:
        """Close the client and stop its background monitor threads."""
        connection.close()
