"""Privileged server management through the ``admin`` database.

Pattern: Composition over Inheritance
--------------------------------------
``AdminSession`` wraps a ``Session`` logged into the admin database instead
of subclassing it.  The login, logout and state all live on the inner
session; this class only adds the server-management commands.

Every command below requires a successful login.  On an unauthenticated
session the command is not sent at all and the failure value is returned
(``None`` for ``list_databases``, ``False`` for the rest).  A command the
server refuses yields the same value; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any

from mongo_auth.admin.levels import LoggingLevel, TracingLevel
from mongo_auth.auth.digest import DEFAULT_SCHEME, DigestScheme
from mongo_auth.auth.session import Session
from mongo_auth.channel.base import CommandChannel
from mongo_auth.protocol import commands
from mongo_auth.settings import ClientSettings

logger = logging.getLogger(__name__)


class AdminSession:
    """A session on the admin database plus server-management commands."""

    def __init__(self, session: Session) -> None:
        if session.database != commands.ADMIN_DATABASE:
            raise ValueError(
                f"AdminSession requires a session on '{commands.ADMIN_DATABASE}', "
                f"got '{session.database}'"
            )
        self._session = session

    @classmethod
    def login(
        cls,
        host: str | None,
        port: int | None,
        username: str,
        secret: str,
        plaintext: bool = True,
        *,
        channel: CommandChannel | None = None,
        settings: ClientSettings | None = None,
        scheme: DigestScheme = DEFAULT_SCHEME,
    ) -> AdminSession:
        """Log *username* into the admin database."""
        session = Session.login(
            host,
            port,
            commands.ADMIN_DATABASE,
            username,
            secret,
            plaintext,
            channel=channel,
            settings=settings,
            scheme=scheme,
        )
        return cls(session)

    # -- delegated state -----------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def database(self) -> str:
        return self._session.database

    @property
    def authenticated(self) -> bool:
        return self._session.authenticated

    @property
    def error(self) -> str | None:
        return self._session.error

    @property
    def error_code(self) -> int | None:
        return self._session.error_code

    def logout(self) -> bool:
        return self._session.logout()

    def describe(self) -> str:
        return self._session.describe()

    def __str__(self) -> str:
        return self.describe()

    # -- admin commands ------------------------------------------------------

    def list_databases(self) -> list[dict[str, Any]] | None:
        """Return one record per database (``name``, ``sizeOnDisk``, ...).

        Returns ``None`` when not logged in, when the command fails, or when
        the reply has no ``databases`` list.
        """
        response = self._run(commands.LIST_DATABASES, 1)
        if response is None:
            return None
        databases = response.get("databases")
        if not isinstance(databases, list):
            logger.warning("listDatabases reply on %s carried no database list", self._session.address)
            return None
        return list(databases)

    def shutdown(self) -> bool:
        """Ask the server to shut down; True if it acknowledged."""
        return self._run(commands.SHUTDOWN, 1) is not None

    def set_logging_level(self, level: LoggingLevel) -> bool:
        return self._set_level(commands.LOGGING, LoggingLevel(level))

    def set_tracing_level(self, level: TracingLevel) -> bool:
        return self._set_level(commands.TRACING, TracingLevel(level))

    def set_query_tracing_level(self, level: TracingLevel) -> bool:
        return self._set_level(commands.QUERY_TRACING, TracingLevel(level))

    # -- private helpers -----------------------------------------------------

    def _set_level(self, name: str, level: LoggingLevel | TracingLevel) -> bool:
        if self._run(name, int(level)) is None:
            return False
        logger.info("Set %s to %s on %s", name, level.name, self._session.address)
        return True

    def _run(self, name: str, value: int) -> dict[str, Any] | None:
        """Send ``{name: value}``; return the response only if it succeeded."""
        if not self._session.authenticated:
            logger.warning("Refusing %s: session on %s is not authenticated", name, self._session.address)
            return None
        response = self._session._run_command({name: value})
        if not commands.command_succeeded(response):
            logger.warning(
                "Admin command %s on %s failed: %s",
                name,
                self._session.address,
                response.get("errmsg", "no error message") if isinstance(response, dict) else response,
            )
            return None
        return response
