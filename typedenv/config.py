"""Settings for loading a ``.env`` file into the environment.

Loading is opt-in: nothing here runs on import. Call ``load_env_file()`` once
at startup, before the typed accessors are used, to seed the environment from
a local KEY=VALUE file.

Settings are read from TYPEDENV_* variables, e.g.
``TYPEDENV_ENV_FILE=config/dev.env``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from typedenv.errors import EnvValidationError
from typedenv.runtime_env import EnvStore, ProcessEnvStore

logger = logging.getLogger(__name__)


class EnvFileSettings(BaseSettings):
    """Where the ``.env`` file lives and how it is applied.

    Prefix: TYPEDENV_ (e.g., TYPEDENV_OVERRIDE=true)
    """

    model_config = SettingsConfigDict(
        env_prefix="TYPEDENV_",
        extra="ignore",
    )

    env_file: Path = Field(default=Path(".env"))
    encoding: str = Field(default="utf-8")
    override: bool = Field(
        default=False,
        description=(
            "If true, values from the file replace variables that are already "
            "set. By default the existing environment wins."
        ),
    )


def load_env_file(
    settings: EnvFileSettings | None = None,
    *,
    store: EnvStore | None = None,
) -> bool:
    """Load KEY=VALUE pairs from the configured file into *store*.

    A missing file is not an error: it is logged and the environment is left
    as it is. Pairs the store rejects (e.g. NUL bytes for the process
    environment) are logged and skipped; the remaining pairs still load.

    Args:
        settings: Loader settings; read from TYPEDENV_* variables if omitted.
        store: Target store (default: the process environment).

    Returns:
        True if the file was found and read, False otherwise.
    """
    settings = settings or EnvFileSettings()
    store = store if store is not None else ProcessEnvStore()

    path = settings.env_file.expanduser()
    if not path.is_file():
        logger.warning(f"no environment variable file(s) was found at {path}")
        return False

    values = dotenv_values(path, encoding=settings.encoding)

    loaded = 0
    skipped = 0
    for key, value in values.items():
        # "KEY" with no "=" parses to None
        if value is None:
            continue
        if not settings.override and store.get(key) is not None:
            continue
        try:
            store.set(key, value)
        except EnvValidationError as e:
            logger.warning(f"Skipping {key!r} from {path}: {e.reason}")
            skipped += 1
            continue
        loaded += 1

    logger.info(f"Loaded {loaded} environment variable(s) from {path} ({skipped} skipped)")
    return True
