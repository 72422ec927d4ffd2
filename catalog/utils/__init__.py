"""
Utility modules for the catalog.

Cross-cutting concerns:
- Codec: Text record encoding for items and reviews
- Formatter: Locale-specific rendering of items, reviews and amounts
- Storage: File I/O helpers for data, reports and snapshots
"""
