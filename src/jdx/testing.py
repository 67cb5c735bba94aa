from collections.abc import Generator
from contextlib import contextmanager

import chz
import pytest

from .config import JdxConfig, set_config


@contextmanager
def override_config(**changes: object) -> Generator[JdxConfig, None, None]:
    """Install a config with ``changes`` applied, restoring the old one on exit."""

    config = chz.replace(JdxConfig(), **changes)
    previous = set_config(config)
    try:
        yield config
    finally:
        set_config(previous)


@pytest.fixture()
def jdx_config() -> Generator[JdxConfig, None, None]:
    """Run the test against the default configuration."""
    with override_config() as config:
        yield config
