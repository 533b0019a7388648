"""Runtime environment stores.

All reads/writes of environment variables go through an ``EnvStore``.

- ``ProcessEnvStore`` is the real thing: a thin wrapper around os.environ,
  shared with the whole process and inherited by child processes.
- ``InMemoryEnvStore`` is an isolated dict so tests (and callers that want a
  scratch environment) never touch process state.
"""

from __future__ import annotations

import os
from typing import Protocol

from typedenv.errors import InvalidKeyError, InvalidValueError


class EnvStore(Protocol):
    """Key-value string store the typed accessor and .env loader use."""

    def get(self, key: str, default: str | None = None) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class ProcessEnvStore:
    """Small wrapper around os.environ for runtime env mutation.

    ``unset`` and ``items`` are not used by the accessor; they are there for
    callers (and tests) that clean up or inspect what was written.
    """

    def get(self, key: str, default: str | None = None) -> str | None:
        return os.environ.get(key, default)

    def set(self, key: str, value: str) -> None:
        # os.environ rejects these with ValueError/OSError; report them the
        # same way as the accessor's own checks.
        if "=" in key or "\x00" in key:
            raise InvalidKeyError(key, "environment keys cannot contain '=' or NUL")
        if "\x00" in value:
            raise InvalidValueError(key, "environment values cannot contain NUL")
        os.environ[str(key)] = str(value)

    def unset(self, key: str) -> None:
        os.environ.pop(str(key), None)

    def items(self) -> list[tuple[str, str]]:
        return list(os.environ.items())


class InMemoryEnvStore:
    """An isolated key-value store for environment variables.

    Each instance is independent; modifying one does not affect any other
    or the process environment. Beyond ``get``/``set``, the helpers
    (``unset``, ``items``, ``copy``, ``len``, ``in``) are test-support API for
    preparing and inspecting scratch environments.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Create a store, optionally pre-populated.

        Args:
            initial: Starting variables (copied, not referenced).
        """
        self._vars: dict[str, str] = dict(initial) if initial else {}

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._vars.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._vars[key] = value

    def unset(self, key: str) -> None:
        self._vars.pop(key, None)

    def items(self) -> list[tuple[str, str]]:
        return list(self._vars.items())

    def copy(self) -> InMemoryEnvStore:
        """Return an independent copy of this store."""
        return InMemoryEnvStore(initial=self._vars)

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __len__(self) -> int:
        return len(self._vars)
