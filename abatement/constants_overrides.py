"""Resolution of abatement constants against environment and run-config overrides.

A constant ``NAME`` is looked up, in order, as the ``GHGMAC_NAME`` environment
variable, then as a key of the ``[abatement.constants]`` table of the run
configuration (the one selected with ``run_config_overrides``, else
``GHGMAC_RUN_CONFIG`` or ``src/common/run_config.toml``), and
finally falls back to the compiled default.
"""

from __future__ import annotations

import importlib
import logging
import os
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, TypeVar, cast

try:  # pragma: no cover - Python < 3.11 fallback
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - dependency fallback
    import tomli as tomllib  # type: ignore[import-not-found]


LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "GHGMAC_"
RUN_CONFIG_ENV = "GHGMAC_RUN_CONFIG"
CONSTANTS_TABLE = ("abatement", "constants")

T = TypeVar("T")

# name -> "env" | "run_config" | "default", filled as constants are resolved
_SOURCES: dict[str, str] = {}

# set only inside ``run_config_overrides``; takes precedence over RUN_CONFIG_ENV
_ACTIVE_RUN_CONFIG: Path | None = None


def default_run_config_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    return repo_root / "src" / "common" / "run_config.toml"


def active_run_config_path() -> Path:
    """Return the run configuration constant overrides are currently read from."""

    if _ACTIVE_RUN_CONFIG is not None:
        return _ACTIVE_RUN_CONFIG
    env_value = os.environ.get(RUN_CONFIG_ENV)
    return Path(env_value).expanduser() if env_value else default_run_config_path()


def constants_table(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return the ``[abatement.constants]`` table of a parsed run config, upper-cased."""

    cursor: Any = data
    for key in CONSTANTS_TABLE:
        if not isinstance(cursor, Mapping):
            return {}
        cursor = cursor.get(key)
    if not isinstance(cursor, Mapping):
        return {}
    return {str(key).upper(): value for key, value in cursor.items()}


@lru_cache(maxsize=1)
def _run_config_constants() -> dict[str, Any]:
    path = active_run_config_path()
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        LOGGER.debug("Unable to read constant overrides from %s: %s", path, exc)
        return {}
    return constants_table(data)


def get_constant(name: str, default: T, cast_func: Callable[[Any], T] | None = None) -> T:
    """Return ``name`` resolved against overrides falling back to ``default``."""

    key = name.upper()
    env_key = f"{ENV_PREFIX}{key}"
    if env_key in os.environ:
        raw, source = os.environ[env_key], "env"
    else:
        raw, source = _run_config_constants().get(key), "run_config"

    if raw is None:
        _SOURCES[key] = "default"
        return default

    converter = cast_func if cast_func is not None else cast(Callable[[Any], T], type(default))
    try:
        value = converter(raw)
    except (TypeError, ValueError) as exc:
        LOGGER.warning("Invalid override for %s=%r (%s): %s", key, raw, source, exc)
        _SOURCES[key] = "default"
        return default

    _SOURCES[key] = source
    return value


def constant_sources() -> dict[str, str]:
    """Return where each resolved constant came from."""

    return dict(sorted(_SOURCES.items()))


def clear_cache() -> None:
    """Reset cached override state (primarily for use in tests)."""

    _run_config_constants.cache_clear()
    _SOURCES.clear()


def _resolve_constants() -> dict[str, str]:
    clear_cache()
    importlib.reload(importlib.import_module("abatement.constants"))
    return constant_sources()


@contextmanager
def run_config_overrides(path: Path | str) -> Iterator[dict[str, str]]:
    """Resolve ``abatement.constants`` against ``path`` for the duration of the block.

    Yields the source of each constant. On exit the previously active run
    configuration is restored and the constants are resolved against it again.
    The process environment is never modified.
    """

    global _ACTIVE_RUN_CONFIG
    previous = _ACTIVE_RUN_CONFIG
    _ACTIVE_RUN_CONFIG = Path(path).expanduser()
    try:
        yield _resolve_constants()
    finally:
        _ACTIVE_RUN_CONFIG = previous
        _resolve_constants()


__all__ = [
    "ENV_PREFIX",
    "RUN_CONFIG_ENV",
    "active_run_config_path",
    "clear_cache",
    "constant_sources",
    "constants_table",
    "default_run_config_path",
    "get_constant",
    "run_config_overrides",
]
