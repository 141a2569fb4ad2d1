"""
oscript-price — price-feed configuration contract and quote aggregation.

This package exposes a small, stable façade:

- init / handle / query
    Contract entry points (see oscript_price.contract).
- aggregate(results) -> str
    Average decimal price strings (see oscript_price.aggregate).
- ConfigRecord
    The single persisted record (see oscript_price.state).

Host collaborators (storage backends, address APIs, codec, test doubles) live
in oscript_price.runtime.
"""

from __future__ import annotations

from .version import __version__
from .aggregate import aggregate
from .contract import handle, init, query
from .errors import ContractError, EmptyInput, NotFound, ParseError, Unauthorized
from .state import ConfigRecord


def version() -> str:
    """Return the oscript_price semantic version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "aggregate",
    "init",
    "handle",
    "query",
    "ConfigRecord",
    "ContractError",
    "NotFound",
    "Unauthorized",
    "ParseError",
    "EmptyInput",
]
