"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeOrderStorePort: In-memory order unit of work with call tracking
- FakeCatalogStorePort: Ranked album listing with call tracking and gating
"""

from .catalog import FakeCatalogStorePort
from .order_store import FakeOrderStorePort

__all__ = [
    "FakeCatalogStorePort",
    "FakeOrderStorePort",
]
