"""Domain models for the storefront checkout and catalog core.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TypeAlias


@dataclass(frozen=True)
class Artist:
    """A recording artist in the catalog."""

    artist_id: int
    name: str


@dataclass(frozen=True)
class Genre:
    """A catalog genre."""

    genre_id: int
    name: str
    description: str = ""


@dataclass(frozen=True)
class Album:
    """An album in the catalog.

    Holds the artist and genre identifiers, plus the resolved references
    when the store has loaded them. Only fully linked albums are eligible
    for the best-seller listing.
    """

    album_id: int
    title: str
    artist_id: int
    genre_id: int
    price: Decimal = Decimal("0")
    album_art_url: str = ""
    artist: Artist | None = None
    genre: Genre | None = None

    def __post_init__(self) -> None:
        """Validate album invariants on creation."""
        if self.price < 0:
            raise ValueError(f"price must be non-negative, got {self.price}")
        if self.artist is not None and self.artist.artist_id != self.artist_id:
            raise ValueError(
                f"artist reference {self.artist.artist_id} does not match "
                f"artist_id {self.artist_id}"
            )
        if self.genre is not None and self.genre.genre_id != self.genre_id:
            raise ValueError(
                f"genre reference {self.genre.genre_id} does not match "
                f"genre_id {self.genre_id}"
            )

    @property
    def is_fully_linked(self) -> bool:
        """True when both the artist and the genre are resolved."""
        return self.artist is not None and self.genre is not None


@dataclass(eq=False)
class Order:
    """A customer order captured by the checkout form.

    Mutable while the customer fills in the address and payment step.
    Compared by identity: the same instance travels from the form binding
    step through the checkout outcome back to the re-displayed form.

    Ownership:
        An order is claimed by exactly one username. Once claimed, the
        owner can not be changed (see assign_owner).
    """

    order_id: int | None = None
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    phone: str = ""
    email: str = ""
    promo_code: str | None = None
    total: Decimal = Decimal("0")
    order_date: datetime | None = None
    validation_errors: dict[str, str] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        """True when form binding attached at least one validation error."""
        return bool(self.validation_errors)

    def add_error(self, field_name: str, message: str) -> None:
        """Attach a field-level validation error."""
        self.validation_errors[field_name] = message

    def assign_owner(self, username: str) -> None:
        """Claim the order for a user.

        Raises:
            ValueError: If username is empty or the order already belongs
                to a different user.
        """
        if not username:
            raise ValueError("username must be a non-empty string")
        if self.username and self.username != username:
            raise ValueError(
                f"Order {self.order_id} is already owned by another user"
            )
        self.username = username

    def is_owned_by(self, principal_name: str | None) -> bool:
        """Exact, case-sensitive ownership check. Anonymous never matches."""
        if not principal_name or not self.username:
            return False
        return self.username == principal_name


# ============================================================================
# Outcomes (render instructions)
# ============================================================================


class RedisplayReason(Enum):
    """Why the address and payment form is shown again."""

    VALIDATION = "validation"
    PROMO_CODE = "promo_code"


ADDRESS_AND_PAYMENT_VIEW = "AddressAndPayment"
COMPLETE_VIEW = "Complete"
ERROR_VIEW = "Error"
SHARED_ERROR_VIEW = "~/Views/Shared/Error.cshtml"
STATUS_CODE_PAGE_VIEW = "~/Views/Shared/StatusCodePage.cshtml"
INDEX_VIEW = "Index"


@dataclass(frozen=True)
class FormView:
    """Empty address and payment form."""

    view: str = ADDRESS_AND_PAYMENT_VIEW

    @property
    def model(self) -> None:
        return None


@dataclass(frozen=True)
class Redisplay:
    """Show the form again with the submitted order intact."""

    order: Order
    reason: RedisplayReason
    view: str = ADDRESS_AND_PAYMENT_VIEW

    @property
    def model(self) -> Order:
        return self.order


@dataclass(frozen=True)
class Cancelled:
    """The caller aborted the submission; the form is shown again."""

    order: Order
    view: str = ADDRESS_AND_PAYMENT_VIEW

    @property
    def model(self) -> Order:
        return self.order


@dataclass(frozen=True)
class Accepted:
    """Order persisted; continue to the completion page."""

    order_id: int
    view: str = COMPLETE_VIEW

    @property
    def model(self) -> int:
        return self.order_id


@dataclass(frozen=True)
class Completed:
    """Confirmation for an order owned by the caller."""

    order_id: int
    view: str = COMPLETE_VIEW

    @property
    def model(self) -> int:
        return self.order_id


@dataclass(frozen=True)
class ErrorView:
    """Generic error page. Never says why."""

    view: str = ERROR_VIEW

    @property
    def model(self) -> None:
        return None


@dataclass(frozen=True)
class TopAlbumsView:
    """Home page with the best-seller listing."""

    albums: tuple[Album, ...]
    view: str = INDEX_VIEW

    @property
    def model(self) -> tuple[Album, ...]:
        return self.albums


@dataclass(frozen=True)
class StatusCodePageView:
    """Shared status code page."""

    view: str = STATUS_CODE_PAGE_VIEW

    @property
    def model(self) -> None:
        return None


CheckoutOutcome: TypeAlias = (
    FormView | Redisplay | Cancelled | Accepted | Completed | ErrorView
)
HomeOutcome: TypeAlias = TopAlbumsView | ErrorView | StatusCodePageView
Outcome: TypeAlias = CheckoutOutcome | HomeOutcome
