from __future__ import annotations

import logging
import os
from collections.abc import Mapping

import chz

_ENV_PREFIX = "JDX_"


@chz.chz
class JdxConfig:
    schema_max_samples: int = chz.field(
        default=10, doc="Array elements sampled when inferring a schema."
    )
    string_sample_chars: int = chz.field(
        default=30, doc="Characters kept as the sample of a string schema."
    )
    log_level: str = chz.field(default="WARNING", doc="Level for the jdx logger.")
    indent: int = chz.field(default=2, doc="Indent used when pretty-printing JSON.")


JDX_CONFIG = JdxConfig()


def get_config() -> JdxConfig:
    return JDX_CONFIG


def set_config(config: JdxConfig) -> JdxConfig:
    """Install ``config`` as the active configuration, returning the old one."""

    global JDX_CONFIG
    previous = JDX_CONFIG
    JDX_CONFIG = config
    return previous


def load_config(environ: Mapping[str, str] | None = None) -> JdxConfig:
    """Build a ``JdxConfig`` from ``JDX_*`` environment variables."""

    env = os.environ if environ is None else environ
    changes: dict[str, object] = {}

    for name in ("schema_max_samples", "string_sample_chars", "indent"):
        raw = env.get(f"{_ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        changes[name] = _positive_int(name, raw)

    raw_level = env.get(f"{_ENV_PREFIX}LOG_LEVEL")
    if raw_level is not None:
        level = raw_level.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"config: unknown log level {raw_level!r}")
        changes["log_level"] = level

    return chz.replace(JdxConfig(), **changes)


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(
            f"config: {_ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}"
        ) from None
    if value <= 0:
        raise ValueError(
            f"config: {_ENV_PREFIX}{name.upper()} must be positive, got {value}"
        )
    return value


__all__ = ["JDX_CONFIG", "JdxConfig", "get_config", "load_config", "set_config"]
