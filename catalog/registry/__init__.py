"""
Item Registry Module.

Single source of truth for catalog items and their review lists.
"""

from catalog.registry.item_registry import ItemRegistry

__all__ = ["ItemRegistry"]
