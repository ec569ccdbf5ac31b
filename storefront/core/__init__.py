"""Core domain logic for the storefront checkout and catalog.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .cancellation import CancellationToken
from .errors import DataAccessError
from .models import (
    Accepted,
    Album,
    Artist,
    Cancelled,
    CheckoutOutcome,
    Completed,
    ErrorView,
    FormView,
    Genre,
    HomeOutcome,
    Order,
    Redisplay,
    RedisplayReason,
    StatusCodePageView,
    TopAlbumsView,
)

__all__ = [
    "Accepted",
    "Album",
    "Artist",
    "CancellationToken",
    "Cancelled",
    "CheckoutOutcome",
    "Completed",
    "DataAccessError",
    "ErrorView",
    "FormView",
    "Genre",
    "HomeOutcome",
    "Order",
    "Redisplay",
    "RedisplayReason",
    "StatusCodePageView",
    "TopAlbumsView",
]
