"""Nonce-based challenge-response login.

Pattern: Two-Round Handshake
-----------------------------
A login is two command round-trips on the target database:

  1. ``{getnonce: 1}`` asks the server for a fresh, single-use nonce.
  2. ``{authenticate: 1, user, nonce, key}`` proves knowledge of the secret,
     where ``key`` is the session digest of nonce, username and credential
     digest.

A nonce is requested anew for every attempt and never cached, so a captured
``key`` cannot be replayed.  Nothing is retried: a failed round ends the
attempt and the caller may start a whole new handshake.

Both failure modes report the same ``"couldn't log in"`` / ``-3`` result.  The
caller is deliberately not told whether the nonce or the credentials were the
problem.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from mongo_auth.auth.digest import DEFAULT_SCHEME, DigestScheme
from mongo_auth.channel.base import CommandChannel
from mongo_auth.protocol import commands

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class AuthResult:
    """Outcome of one handshake attempt.

    The flag and the error travel together so a session never exposes a
    half-updated state.

    Attributes:
        authenticated: True when the server accepted the proof.
        error:         Failure message, ``None`` on success.
        error_code:    Failure code, ``None`` on success.
    """

    authenticated: bool
    error: str | None = None
    error_code: int | None = None

    @classmethod
    def success(cls) -> AuthResult:
        return cls(authenticated=True)

    @classmethod
    def failure(
        cls,
        error: str = commands.LOGIN_FAILED_MESSAGE,
        error_code: int = commands.LOGIN_FAILED_CODE,
    ) -> AuthResult:
        return cls(authenticated=False, error=error, error_code=error_code)

    def __bool__(self) -> bool:
        return self.authenticated


class ChallengeResponseAuthenticator:
    """Runs the getnonce / authenticate exchange over a ``CommandChannel``."""

    def __init__(self, scheme: DigestScheme = DEFAULT_SCHEME) -> None:
        self._scheme = scheme

    @property
    def scheme(self) -> DigestScheme:
        return self._scheme

    def authenticate(
        self,
        channel: CommandChannel,
        connection: Any,
        database: str,
        username: str,
        secret: str,
        plaintext: bool = True,
    ) -> AuthResult:
        """Log *username* into *database* and return the outcome.

        *secret* is the plaintext secret when *plaintext* is true, otherwise a
        credential digest previously obtained from ``compute_credential_digest``.
        Never raises for a rejected login.
        """
        if plaintext:
            credential = self._scheme.credential_digest(username, secret)
        else:
            credential = secret

        logger.debug("Requesting nonce on database %s", database)
        nonce_response = channel.run_command(connection, {commands.GETNONCE: 1}, database)
        if not commands.command_succeeded(nonce_response):
            logger.warning("Nonce request for user %s on %s was refused", username, database)
            return AuthResult.failure()
        nonce = str(nonce_response.get("nonce", ""))

        key = self._scheme.session_digest(nonce, username, credential)
        command = {
            commands.AUTHENTICATE: 1,
            "user": username,
            "nonce": nonce,
            "key": key,
        }
        logger.debug("Submitting authenticate for user %s on database %s", username, database)
        response = channel.run_command(connection, command, database)
        if not _affirmed(response):
            logger.warning("Authentication rejected for user %s on %s", username, database)
            return AuthResult.failure()

        logger.info("User %s authenticated on database %s", username, database)
        return AuthResult.success()


def _affirmed(response: Any) -> bool:
    # Only an explicit ok == 1 counts; a truthy string or other value does not.
    if not isinstance(response, Mapping):
        return False
    ok = response.get("ok")
    return isinstance(ok, (bool, int, float)) and ok == 1
