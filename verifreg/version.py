"""
Version of the verifreg codec package.

It can be overridden at build time with the env var VERIFREG_VERSION.
"""

from __future__ import annotations

import os

__version__ = os.getenv("VERIFREG_VERSION", "0.1.0")

__all__ = ["__version__"]
