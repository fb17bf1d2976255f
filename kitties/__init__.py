"""Kitties source package.

This package contains the kitties runtime components:
- config: Configuration loading and management
- runtime: Registry, ownership index, breeding and marketplace
"""

from __future__ import annotations

__all__: list[str] = []
