"""Port interfaces for the storefront core.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - OrderStorePort: Stage, flush and look up orders
   - CatalogStorePort: Ranked album queries
   - IdentityPort: Authenticated principal of the current request
   - FormDataPort: Raw submitted form fields

2. **Driving Ports** (adapters/external systems call into core)
   - CheckoutPort: Address/payment capture and order completion
   - StorefrontPort: Home page, error and status code pages
"""

from abc import ABC, abstractmethod

from .cancellation import CancellationToken
from .models import Album, CheckoutOutcome, HomeOutcome, Order


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class OrderStorePort(ABC):
    """Port for durable order records keyed by order identifier.

    A store instance acts as a unit of work for one request: writes staged
    with create() are visible to get_by_id() on the same instance
    (read-your-writes) and become durable on save().
    """

    @abstractmethod
    async def create(self, order: Order) -> int:
        """Stage a new order for persistence.

        Args:
            order: Order to persist. If order_id is set, the store uses it
                (seed/test scenarios); otherwise it assigns one.

        Returns:
            The order identifier.

        Raises:
            DataAccessError: If the store is unreachable or the id is taken.
        """

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Order | None:
        """Retrieve an order by identifier.

        Returns:
            Order if found, None otherwise.

        Raises:
            DataAccessError: If the store is unreachable.
        """

    @abstractmethod
    async def save(self) -> None:
        """Flush staged writes.

        Raises:
            DataAccessError: If the store is unreachable.
        """

    @abstractmethod
    async def discard(self) -> None:
        """Drop staged writes that have not been saved."""


class CatalogStorePort(ABC):
    """Port for catalog queries."""

    @abstractmethod
    async def list_albums_ranked_by_sales(self, limit: int) -> list[Album]:
        """Return the best-selling albums.

        Only albums whose artist and genre exist are returned, each with
        both references resolved.

        Args:
            limit: Maximum number of albums to return.

        Returns:
            Albums ordered by descending order count, ties by ascending
            album_id. Fewer than limit if the catalog is smaller.

        Raises:
            DataAccessError: If the store is unreachable.
        """


class IdentityPort(ABC):
    """Port for the authenticated principal of the current request."""

    @abstractmethod
    def current_principal_name(self) -> str | None:
        """Return the signed-in username, or None for anonymous requests."""


class FormDataPort(ABC):
    """Port for submitted form fields."""

    @abstractmethod
    def get_field(self, name: str) -> str | None:
        """Return the submitted value of a field, or None if absent."""


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class CheckoutPort(ABC):
    """Port for the two-step checkout workflow.

    Implementations live in the core (checkout_service.py).
    """

    @abstractmethod
    def address_and_payment_form(self) -> CheckoutOutcome:
        """Return the empty address and payment form."""

    @abstractmethod
    async def submit_address_and_payment(
        self,
        order: Order,
        promo_code: str | None,
        cancellation: CancellationToken,
        principal_name: str | None = None,
    ) -> CheckoutOutcome:
        """Validate and record a submitted address and payment form.

        Returns:
            Cancelled, Redisplay, ErrorView or Accepted.

        Raises:
            DataAccessError: If the order store is unreachable.
        """

    @abstractmethod
    async def complete(
        self, order_id: int, principal_name: str | None
    ) -> CheckoutOutcome:
        """Show the confirmation for an order owned by the caller.

        Returns:
            Completed(order_id) or ErrorView.

        Raises:
            DataAccessError: If the order store is unreachable.
        """


class StorefrontPort(ABC):
    """Port for the storefront home read path."""

    @abstractmethod
    async def index(self) -> HomeOutcome:
        """Return the home page with the best-seller listing.

        Raises:
            DataAccessError: If the catalog store is unreachable on a miss.
        """

    @abstractmethod
    def error(self) -> HomeOutcome:
        """Return the shared error page."""

    @abstractmethod
    def status_code_page(self) -> HomeOutcome:
        """Return the shared status code page."""
