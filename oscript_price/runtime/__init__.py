"""
oscript_price.runtime — host collaborators the contract runs against.

Submodules
----------
- storage_api : key/value backends and Singleton access
- address_api : address canonicalization (hex / mock)
- codec       : canonical-CBOR to_binary / from_binary
- context     : Env, MessageInfo, Coin
- response    : InitResponse / HandleResponse
- deps        : Deps bundle (storage + api)
- testing     : mock_dependencies / mock_env / mock_info
"""

from __future__ import annotations

from .address_api import AddressApi, HexAddressApi, MockApi, default_api
from .codec import from_binary, to_binary
from .context import BlockInfo, Coin, ContractInfo, Env, MessageInfo, coins
from .deps import Deps
from .response import HandleResponse, InitResponse, Response
from .storage_api import FileBackend, MemoryBackend, ReadonlySingleton, Singleton, StorageBackend

__all__ = [
    "AddressApi",
    "HexAddressApi",
    "MockApi",
    "default_api",
    "to_binary",
    "from_binary",
    "BlockInfo",
    "Coin",
    "ContractInfo",
    "Env",
    "MessageInfo",
    "coins",
    "Deps",
    "Response",
    "InitResponse",
    "HandleResponse",
    "StorageBackend",
    "MemoryBackend",
    "FileBackend",
    "Singleton",
    "ReadonlySingleton",
]
