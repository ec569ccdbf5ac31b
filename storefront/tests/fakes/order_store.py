"""Fake OrderStorePort implementation for testing."""

from storefront.core.models import Order
from storefront.core.ports import OrderStorePort


class FakeOrderStorePort(OrderStorePort):
    """In-memory order store for testing.

    Staged orders are visible to get_by_id() before save(), matching the
    read-your-writes contract. Every call is recorded for assertions.
    """

    def __init__(self, next_id: int = 1):
        """Initialize with an empty store."""
        self.orders: dict[int, Order] = {}
        self.staged: dict[int, Order] = {}
        self.create_calls: list[Order] = []
        self.get_by_id_calls: list[int] = []
        self.save_call_count = 0
        self.discard_call_count = 0
        self.next_id = next_id
        self.error: Exception | None = None

    @property
    def write_call_count(self) -> int:
        return len(self.create_calls) + self.save_call_count

    def seed(self, order: Order) -> None:
        """Store an order as if it had been saved earlier."""
        if order.order_id is None:
            raise ValueError("seeded orders need an order_id")
        self.orders[order.order_id] = order

    async def create(self, order: Order) -> int:
        self.create_calls.append(order)
        if self.error is not None:
            raise self.error
        if order.order_id is not None:
            order_id = order.order_id
        else:
            order_id = self.next_id
            self.next_id += 1
        self.staged[order_id] = order
        return order_id

    async def get_by_id(self, order_id: int) -> Order | None:
        self.get_by_id_calls.append(order_id)
        if self.error is not None:
            raise self.error
        if order_id in self.staged:
            return self.staged[order_id]
        return self.orders.get(order_id)

    async def save(self) -> None:
        self.save_call_count += 1
        if self.error is not None:
            raise self.error
        self.orders.update(self.staged)
        self.staged.clear()

    async def discard(self) -> None:
        self.discard_call_count += 1
        self.staged.clear()
