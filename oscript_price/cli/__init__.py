"""
oscript_price.cli — command-line runner.

    python -m oscript_price.cli.main --help
    oscript-price --help            (console script)
"""

from __future__ import annotations

from .main import app, main

__all__ = ["app", "main"]
