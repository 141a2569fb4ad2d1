"""
oscript_price.runtime.testing — deterministic test doubles for the host.

    deps = mock_dependencies()
    info = mock_info("creator", coins(1000, "earth"))
    init(deps, mock_env(), info, InitMsg(data_source="datasource_eth", test_case="testcase_price"))

mock_dependencies() uses MockApi, so readable names like "creator" are valid
senders regardless of OSCRIPT_PRICE_ADDRESS_FORMAT.
"""
from __future__ import annotations

from typing import Iterable

from .address_api import MockApi
from .context import BlockInfo, Coin, ContractInfo, Env, MessageInfo
from .deps import Deps
from .storage_api import MemoryBackend

MOCK_CHAIN_ID = "oscript-testing"
MOCK_CONTRACT_ADDR = "cosmos2contract"
MOCK_HEIGHT = 12_345
MOCK_TIME = 1_571_797_419


def mock_dependencies() -> Deps:
    return Deps(storage=MemoryBackend(), api=MockApi())


def mock_env() -> Env:
    return Env(
        block=BlockInfo(height=MOCK_HEIGHT, time=MOCK_TIME, chain_id=MOCK_CHAIN_ID),
        contract=ContractInfo(address=MOCK_CONTRACT_ADDR),
    )


def mock_info(sender: str, sent_funds: Iterable[Coin] = ()) -> MessageInfo:
    return MessageInfo(sender=sender, sent_funds=tuple(sent_funds))


__all__ = [
    "mock_dependencies",
    "mock_env",
    "mock_info",
    "MOCK_CHAIN_ID",
    "MOCK_CONTRACT_ADDR",
]
