"""Authenticated session on a single database.

Pattern: Failure as State
--------------------------
``Session.login`` always returns a ``Session``.  A rejected login is an
ordinary outcome, recorded as ``authenticated == False`` together with
``error`` and ``error_code``; it is never raised.  Callers check
``authenticated`` before trusting the session with privileged work.

A typical flow persists the credential digest after the first login so the
plaintext secret is not needed again::

    session = Session.login("localhost", 27017, "app", "joe", "mypass")
    if not session.authenticated:
        return session.error
    cookie = compute_credential_digest("joe", "mypass")
    ...
    session = Session.login("localhost", 27017, "app", "joe", cookie, plaintext=False)

The session owns its connection handle exclusively; the handle and the
database name never change for the lifetime of the object.
"""

from __future__ import annotations

import logging
from typing import Any

from mongo_auth.auth.authenticator import AuthResult, ChallengeResponseAuthenticator
from mongo_auth.auth.digest import DEFAULT_SCHEME, DigestScheme
from mongo_auth.channel.base import CommandChannel
from mongo_auth.channel.pymongo_channel import PyMongoChannel
from mongo_auth.protocol import commands
from mongo_auth.settings import ClientSettings, load_settings

logger = logging.getLogger(__name__)


class Session:
    """A connection handle bound to one database and one login outcome."""

    def __init__(
        self,
        channel: CommandChannel,
        connection: Any,
        database: str,
        address: str,
        result: AuthResult,
    ) -> None:
        self._channel = channel
        self._connection = connection
        self._database = database
        self._address = address
        self._result = result

    @classmethod
    def login(
        cls,
        host: str | None,
        port: int | None,
        database: str,
        username: str,
        secret: str,
        plaintext: bool = True,
        *,
        channel: CommandChannel | None = None,
        settings: ClientSettings | None = None,
        scheme: DigestScheme = DEFAULT_SCHEME,
    ) -> Session:
        """Connect and run the nonce handshake, returning the resulting session.

        Empty *host* / *port* are filled from *settings* (or ``load_settings()``).
        *database* and *username* are passed to the server unchecked; an empty
        value is rejected by the server like any other bad login.
        An out-of-range port raises ``SettingsError`` before anything is sent.
        """
        if settings is None:
            settings = load_settings()
        if channel is None:
            channel = PyMongoChannel()

        address = settings.resolve_address(host, port)
        connection = channel.connect(address, settings.auto_reconnect)

        authenticator = ChallengeResponseAuthenticator(scheme)
        result = authenticator.authenticate(
            channel, connection, database, username, secret, plaintext
        )
        return cls(channel, connection, database, address, result)

    # -- state ---------------------------------------------------------------

    @property
    def channel(self) -> CommandChannel:
        return self._channel

    @property
    def connection(self) -> Any:
        return self._connection

    @property
    def database(self) -> str:
        return self._database

    @property
    def address(self) -> str:
        return self._address

    @property
    def result(self) -> AuthResult:
        return self._result

    @property
    def authenticated(self) -> bool:
        return self._result.authenticated

    @property
    def error(self) -> str | None:
        return self._result.error

    @property
    def error_code(self) -> int | None:
        return self._result.error_code

    # -- operations ----------------------------------------------------------

    def _run_command(self, command: dict[str, Any]) -> dict[str, Any]:
        """Send *command* to this session's database over its own connection."""
        logger.debug("Running %s on database %s", next(iter(command), "?"), self._database)
        return self._channel.run_command(self._connection, command, self._database)

    def logout(self) -> bool:
        """Ask the server to end the login; True iff it reports success.

        A refused logout leaves ``authenticated`` untouched.  The server may
        still consider the user logged in, and retrying is not known to help.
        """
        response = self._run_command({commands.LOGOUT: 1})
        if not commands.command_succeeded(response):
            logger.warning("Logout on %s (database %s) was refused", self._address, self._database)
            return False
        logger.info("Logged out of %s (database %s)", self._address, self._database)
        return True

    def describe(self) -> str:
        """Return the server address when logged in, otherwise the error."""
        if self.authenticated:
            return self._address
        return self.error or ""

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return (
            f"Session(address={self._address!r}, database={self._database!r}, "
            f"authenticated={self.authenticated})"
        )
