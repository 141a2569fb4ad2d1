"""oscript_price.version — package version string.

Resolved once at import: OSCRIPT_PRICE_VERSION if set, else the installed
distribution's metadata, else BASE_VERSION with a "+dev" local tag (source
checkouts that were never installed).
"""

from __future__ import annotations

import os
from importlib import metadata as importlib_metadata
from typing import Optional

# Bump when the persisted record layout or the aggregation output changes.
BASE_VERSION = "0.1.0"

DIST_NAME = "oscript-price"


def _installed_version() -> Optional[str]:
    try:
        return importlib_metadata.version(DIST_NAME)
    except importlib_metadata.PackageNotFoundError:
        return None


def compute_version() -> str:
    return os.getenv("OSCRIPT_PRICE_VERSION") or _installed_version() or f"{BASE_VERSION}+dev"


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "DIST_NAME", "compute_version"]
