"""Store adapters for orders and the catalog.

Implementations:
- SQLite (zero-config, single-file) via aiosqlite
"""
