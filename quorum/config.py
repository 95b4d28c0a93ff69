"""Runtime configuration for Quorum.

Settings come from ``QUORUM_*`` environment variables. ``LOG_LEVEL`` is
read once at import; :meth:`SearchConfig.from_env` re-reads
the environment on every call so a long-lived process (or a test) can
change settings between sessions.

Environment:
    QUORUM_SEARCH_DEPTH: plies searched by ``best-move`` (default 2)
    QUORUM_BOARD_SIZE: board size for new games (default 9)
    QUORUM_HEURISTIC_PROFILE: heuristic weight profile id
        (default ``quorum_v1_balanced``)
    QUORUM_RESET_TABLE_PER_SEARCH: clear the transposition table at the
        start of every search session (default true)
    QUORUM_TT_BUCKETS: transposition table bucket count (default 2**20)
    QUORUM_LOG_LEVEL: root log level for the CLI (default INFO)
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

DEFAULT_SEARCH_DEPTH = 2
DEFAULT_BOARD_SIZE = 9
DEFAULT_HEURISTIC_PROFILE = "quorum_v1_balanced"
DEFAULT_TT_BUCKETS = 1 << 20

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no")


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{key} must be an integer, got {raw!r}", key=key
        ) from None


def _env_flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"{key} must be one of {_TRUE_VALUES + _FALSE_VALUES}, got {raw!r}",
        key=key,
    )


LOG_LEVEL = os.getenv("QUORUM_LOG_LEVEL", "INFO").upper()


class SearchConfig(BaseModel):
    """Settings for one search session."""

    model_config = ConfigDict(frozen=True)

    depth: int = Field(DEFAULT_SEARCH_DEPTH, ge=1, le=8)
    board_size: int = Field(DEFAULT_BOARD_SIZE, ge=8, le=19)
    profile: str = DEFAULT_HEURISTIC_PROFILE
    reset_table_per_search: bool = True
    tt_buckets: int = Field(DEFAULT_TT_BUCKETS, ge=1)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SearchConfig":
        """Build a config from ``QUORUM_*`` variables.

        Raises:
            ConfigurationError: if a value is malformed or out of range.
        """
        env = os.environ if env is None else env
        values = {
            "depth": _env_int(env, "QUORUM_SEARCH_DEPTH", DEFAULT_SEARCH_DEPTH),
            "board_size": _env_int(env, "QUORUM_BOARD_SIZE", DEFAULT_BOARD_SIZE),
            "profile": env.get("QUORUM_HEURISTIC_PROFILE") or DEFAULT_HEURISTIC_PROFILE,
            "reset_table_per_search": _env_flag(
                env, "QUORUM_RESET_TABLE_PER_SEARCH", True
            ),
            "tt_buckets": _env_int(env, "QUORUM_TT_BUCKETS", DEFAULT_TT_BUCKETS),
        }
        return cls._validated(values)

    def with_overrides(self, **overrides) -> "SearchConfig":
        """Copy with the non-None ``overrides`` applied and re-validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return self._validated(values)

    @classmethod
    def _validated(cls, values: dict) -> "SearchConfig":
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            field_name = str(first["loc"][0]) if first.get("loc") else None
            raise ConfigurationError(
                f"Invalid search configuration: {first['msg']}",
                key=field_name,
                context={"values": values},
            ) from e


__all__ = [
    "DEFAULT_BOARD_SIZE",
    "DEFAULT_HEURISTIC_PROFILE",
    "DEFAULT_SEARCH_DEPTH",
    "DEFAULT_TT_BUCKETS",
    "LOG_LEVEL",
    "SearchConfig",
]
