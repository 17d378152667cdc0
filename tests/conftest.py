"""Shared fixtures for tests."""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from typing import Any

import pytest

from mongo_auth.settings import ClientSettings


class FakeChannel:
    """In-memory ``CommandChannel`` with scripted responses.

    *responses* maps a command name to either one response or a list consumed
    in order.  Unscripted commands answer ``{"ok": 1}``.
    """

    def __init__(self, responses: Mapping[str, Any] | None = None) -> None:
        self._responses = {
            name: list(value) if isinstance(value, list) else [value]
            for name, value in (responses or {}).items()
        }
        self.connects: list[tuple[str, bool]] = []
        self.calls: list[tuple[Any, dict[str, Any], str]] = []
        self.closed: list[Any] = []

    def connect(self, address: str, auto_reconnect: bool) -> str:
        self.connects.append((address, auto_reconnect))
        return f"conn-{len(self.connects)}"

    def run_command(self, connection: Any, command: Mapping[str, Any], database: str) -> Any:
        self.calls.append((connection, dict(command), database))
        name = next(iter(command))
        queue = self._responses.get(name)
        if not queue:
            return {"ok": 1}
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def close(self, connection: Any) -> None:
        self.closed.append(connection)

    @property
    def command_names(self) -> list[str]:
        return [next(iter(cmd)) for _, cmd, _ in self.calls]

    def sent(self, name: str) -> dict[str, Any]:
        """Return the last command document sent under *name*."""
        for _, cmd, _ in reversed(self.calls):
            if next(iter(cmd)) == name:
                return cmd
        raise AssertionError(f"{name} was never sent")


def md5_hex(text: str) -> str:
    return hashlib.md5(text.encode()).hexdigest()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(default_host="db.test", default_port=27017, auto_reconnect=True)


@pytest.fixture
def channel() -> FakeChannel:
    """A channel whose handshake succeeds with nonce ``abc123``."""
    return FakeChannel({
        "getnonce": {"ok": 1, "nonce": "abc123"},
        "authenticate": {"ok": 1},
    })


@pytest.fixture
def rejecting_channel() -> FakeChannel:
    """A channel that issues a nonce but refuses the credentials."""
    return FakeChannel({
        "getnonce": {"ok": 1, "nonce": "abc123"},
        "authenticate": {"ok": 0, "errmsg": "auth fails"},
    })
