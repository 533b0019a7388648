"""Typed accessors for environment variables.

The module-level functions operate on the real process environment:

    >>> import typedenv
    >>> typedenv.set_int("PORT", 8080)
    >>> typedenv.get_int("PORT", 0)
    8080

Use ``TypedEnvAccessor(InMemoryEnvStore())`` for an isolated environment.
"""

from __future__ import annotations

from typedenv.accessor import DEFAULT_FLOAT_PRECISION, TypedEnvAccessor, to_float32
from typedenv.config import EnvFileSettings, load_env_file
from typedenv.errors import EnvValidationError, InvalidKeyError, InvalidValueError
from typedenv.runtime_env import EnvStore, InMemoryEnvStore, ProcessEnvStore

_default_accessor = TypedEnvAccessor(ProcessEnvStore())


def default_accessor() -> TypedEnvAccessor:
    """Return the accessor bound to the process environment."""
    return _default_accessor


def get_string(key: str, fallback: str) -> str:
    return _default_accessor.get_string(key, fallback)


def get_int(key: str, fallback: int) -> int:
    return _default_accessor.get_int(key, fallback)


def get_bool(key: str, fallback: bool) -> bool:
    return _default_accessor.get_bool(key, fallback)


def get_float32(key: str, fallback: float) -> float:
    return _default_accessor.get_float32(key, fallback)


def set_string(key: str, value: str) -> None:
    _default_accessor.set_string(key, value)


def set_int(key: str, value: int) -> None:
    _default_accessor.set_int(key, value)


def set_bool(key: str, value: bool) -> None:
    _default_accessor.set_bool(key, value)


def set_float32(key: str, value: float, precision: int = DEFAULT_FLOAT_PRECISION) -> None:
    _default_accessor.set_float32(key, value, precision)


__all__ = [
    "DEFAULT_FLOAT_PRECISION",
    "EnvFileSettings",
    "EnvStore",
    "EnvValidationError",
    "InMemoryEnvStore",
    "InvalidKeyError",
    "InvalidValueError",
    "ProcessEnvStore",
    "TypedEnvAccessor",
    "default_accessor",
    "get_bool",
    "get_float32",
    "get_int",
    "get_string",
    "load_env_file",
    "set_bool",
    "set_float32",
    "set_int",
    "set_string",
    "to_float32",
]
