"""
Pytest fixtures for the contract, its host shims and the CLI.

- Every test starts from a clean configuration: OSCRIPT_PRICE_* variables are
  removed from the environment and the cached config is dropped.
- `deps` is a fresh mock host (MemoryBackend + MockApi).
- `initialized` is the same host after init by "creator" with the reference
  values datasource_eth / testcase_price.

Usage (inside a test file):
    def test_owner_update(initialized, env):
        handle(initialized, env, mock_info("creator"), UpdateDatasource(name="x"))
"""
from __future__ import annotations

import logging
import os

import pytest
import structlog

from oscript_price.config import load_config
from oscript_price.contract import init
from oscript_price.msg import InitMsg
from oscript_price.runtime.context import coins
from oscript_price.runtime.deps import Deps
from oscript_price.runtime.testing import mock_dependencies, mock_env, mock_info

CREATOR = "creator"
STRANGER = "anyone"


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch: pytest.MonkeyPatch):
    for name in list(os.environ):
        if name.startswith("OSCRIPT_PRICE_"):
            monkeypatch.delenv(name, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(h)
    root.setLevel(logging.WARNING)


@pytest.fixture
def deps() -> Deps:
    return mock_dependencies()


@pytest.fixture
def env():
    return mock_env()


@pytest.fixture
def initialized(deps: Deps, env) -> Deps:
    msg = InitMsg(data_source="datasource_eth", test_case="testcase_price")
    init(deps, env, mock_info(CREATOR, coins(1000, "earth")), msg)
    return deps
