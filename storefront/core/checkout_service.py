"""Checkout service: implements CheckoutPort.

Decides what happens to a submitted address and payment form and who may
see a completed order. Persistence happens only on the accepted path;
every other outcome leaves the order store untouched.
"""

import logging
from datetime import UTC, datetime

from .cancellation import CancellationToken
from .models import (
    Accepted,
    Cancelled,
    CheckoutOutcome,
    Completed,
    ErrorView,
    FormView,
    Order,
    Redisplay,
    RedisplayReason,
)
from .ports import CheckoutPort, OrderStorePort

logger = logging.getLogger(__name__)

DEFAULT_PROMO_CODE = "FREE"


class CheckoutService(CheckoutPort):
    """Core implementation of CheckoutPort.

    State machine for one submission:
        AwaitingInput -> Cancelled | Redisplay | Accepted
        Accepted -> Completed | Error (on completion)

    Cancelled and Redisplay send the customer back to the form; Completed
    and Error are terminal.
    """

    def __init__(
        self,
        orders: OrderStorePort,
        promo_code: str = DEFAULT_PROMO_CODE,
    ):
        """Initialize the checkout service.

        Args:
            orders: OrderStorePort implementation for persistence.
            promo_code: Code a customer must enter to place an order.
        """
        if not promo_code:
            raise ValueError("promo_code must be a non-empty string")
        self.orders = orders
        self.promo_code = promo_code

    def address_and_payment_form(self) -> CheckoutOutcome:
        return FormView()

    def is_valid_promo_code(self, promo_code: str | None) -> bool:
        """Case-insensitive match against the configured promo code."""
        if not promo_code:
            return False
        return promo_code.strip().casefold() == self.promo_code.casefold()

    async def submit_address_and_payment(
        self,
        order: Order,
        promo_code: str | None,
        cancellation: CancellationToken,
        principal_name: str | None = None,
    ) -> CheckoutOutcome:
        """Validate and record a submitted address and payment form.

        First matching rule wins:
        1. Cancellation already signalled -> Cancelled
        2. Order carries validation errors -> Redisplay
        3. Promo code absent or wrong -> Redisplay
        4. Anonymous principal, or an order owned by someone else -> ErrorView
        5. Otherwise stage, re-check cancellation, flush -> Accepted

        The returned Cancelled/Redisplay outcomes carry the submitted order
        instance itself so entered values round-trip to the form.

        Raises:
            DataAccessError: If the order store is unreachable.
        """
        if cancellation.is_cancelled:
            logger.info("Checkout cancelled before processing")
            return Cancelled(order)

        if order.has_errors:
            logger.info(
                "Checkout form has validation errors",
                extra={"fields": sorted(order.validation_errors)},
            )
            return Redisplay(order, RedisplayReason.VALIDATION)

        if not self.is_valid_promo_code(promo_code):
            logger.info("Checkout rejected: missing or invalid promo code")
            return Redisplay(order, RedisplayReason.PROMO_CODE)

        if not principal_name:
            logger.warning("Checkout submitted without an authenticated user")
            return ErrorView()

        if order.username and order.username != principal_name:
            logger.warning(
                "Checkout submitted for an order owned by another user",
                extra={"username": principal_name},
            )
            return ErrorView()

        previous = (order.username, order.promo_code, order.order_date)
        order.assign_owner(principal_name)
        order.promo_code = (promo_code or "").strip()
        order.order_date = datetime.now(UTC)

        try:
            order_id = await self.orders.create(order)

            # The cancellation may have arrived while create() was suspended
            cancelled = cancellation.is_cancelled
            if cancelled:
                await self.orders.discard()
            else:
                await self.orders.save()
        except BaseException:
            order.username, order.promo_code, order.order_date = previous
            raise

        if cancelled:
            order.username, order.promo_code, order.order_date = previous
            logger.info(
                "Checkout cancelled before save, staged order discarded",
                extra={"username": principal_name},
            )
            return Cancelled(order)

        order.order_id = order_id

        logger.info(
            f"Order {order_id} placed",
            extra={"order_id": order_id, "username": principal_name},
        )
        return Accepted(order_id)

    async def complete(
        self, order_id: int, principal_name: str | None
    ) -> CheckoutOutcome:
        """Show the confirmation for an order owned by the caller.

        Missing orders and orders owned by someone else produce the same
        ErrorView so identifiers can not be guessed.

        Raises:
            DataAccessError: If the order store is unreachable.
        """
        order = await self.orders.get_by_id(order_id)

        if order is None or not order.is_owned_by(principal_name):
            logger.warning(
                f"Rejected completion request for order {order_id}",
                extra={
                    "order_id": order_id,
                    "found": order is not None,
                    "username": principal_name,
                },
            )
            return ErrorView()

        logger.debug(
            f"Order {order_id} completed",
            extra={"order_id": order_id, "username": principal_name},
        )
        return Completed(order_id)
