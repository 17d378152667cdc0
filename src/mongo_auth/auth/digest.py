"""Credential and session digests for the nonce handshake.

Pattern: Pluggable Digest Scheme
---------------------------------
The handshake needs exactly two hashes:

  1. A *credential digest* of username and secret.  It is stable, so callers
     may persist it (a cookie, a keyring entry) and log in later without ever
     holding the plaintext secret again.
  2. A *session digest* of the server's nonce, the username and the
     credential digest.  This is what actually goes over the wire.

``LegacyMd5Scheme`` reproduces the historical MD5 construction and is the only
scheme a standard server accepts.  MD5 is collision-prone and Python's
``hashlib`` does not hash in constant time, so this scheme is a compatibility
default, not a security recommendation.  Servers that speak the same
two-round shape with a stronger hash can be targeted by passing another
``DigestScheme`` such as ``Blake2bScheme``.
"""

from __future__ import annotations

import hashlib
from typing import Protocol


class DigestScheme(Protocol):
    """The two hashes the challenge-response handshake depends on."""

    def credential_digest(self, username: str, secret: str) -> str: ...

    def session_digest(self, nonce: str, username: str, credential_digest: str) -> str: ...


def _md5_hex(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


class LegacyMd5Scheme:
    """``md5("user:mongo:secret")`` credentials, ``md5(nonce + user + cred)`` keys."""

    def credential_digest(self, username: str, secret: str) -> str:
        return _md5_hex(f"{username}:mongo:{secret}")

    def session_digest(self, nonce: str, username: str, credential_digest: str) -> str:
        return _md5_hex(f"{nonce}{username}{credential_digest}")


class Blake2bScheme:
    """Same construction as the legacy scheme, hashed with BLAKE2b-256."""

    def __init__(self, digest_size: int = 32) -> None:
        self._digest_size = digest_size

    def _hex(self, text: str) -> str:
        return hashlib.blake2b(text.encode("utf-8"), digest_size=self._digest_size).hexdigest()

    def credential_digest(self, username: str, secret: str) -> str:
        return self._hex(f"{username}:mongo:{secret}")

    def session_digest(self, nonce: str, username: str, credential_digest: str) -> str:
        return self._hex(f"{nonce}{username}{credential_digest}")


DEFAULT_SCHEME: DigestScheme = LegacyMd5Scheme()


def compute_credential_digest(
    username: str,
    secret: str,
    scheme: DigestScheme = DEFAULT_SCHEME,
) -> str:
    """Return the persistable credential digest for *username* / *secret*.

    The result can be passed back as the secret of a later login with
    ``plaintext=False``.
    """
    return scheme.credential_digest(username, secret)
