"""Kitty registry package.

This package contains:
- config: Configuration loading and management
- kitties: Kitty records, ownership, breeding and the runtime host
"""

from __future__ import annotations

__all__: list[str] = []
