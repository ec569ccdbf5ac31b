"""CLI command implementations for the storefront.

Maps CLI commands (home, checkout, complete, sign-in, ...) to the driving
ports and renders each outcome into a JSON-friendly dictionary. This is
the render sink: the core decides the view and payload, this adapter only
formats them.
"""

import logging
from collections.abc import Callable, Mapping
from contextlib import AbstractAsyncContextManager
from dataclasses import asdict, is_dataclass
from typing import Any

from storefront.adapters.cli.forms import MappingFormData
from storefront.adapters.identity.static import StaticIdentityProvider
from storefront.core.cancellation import CancellationToken
from storefront.core.catalog_cache import CatalogCache
from storefront.core.errors import DataAccessError
from storefront.core.models import Order, Outcome, Redisplay
from storefront.core.ports import CheckoutPort, StorefrontPort
from storefront.core.validation import PROMO_CODE_FIELD, bind_order

logger = logging.getLogger(__name__)

CheckoutSession = Callable[[], AbstractAsyncContextManager[CheckoutPort]]


def _serialize(model: Any) -> Any:
    if isinstance(model, Order):
        data = asdict(model)
        data.pop("validation_errors")
        return data
    if is_dataclass(model) and not isinstance(model, type):
        return asdict(model)
    if isinstance(model, tuple):
        return [_serialize(item) for item in model]
    return model


def render_outcome(outcome: Outcome) -> dict[str, Any]:
    """Turn an outcome into a view/model dictionary."""
    result: dict[str, Any] = {
        "status": "success",
        "outcome": type(outcome).__name__,
        "view": outcome.view,
        "model": _serialize(outcome.model),
    }
    if isinstance(outcome, Redisplay):
        result["reason"] = outcome.reason.value
        result["errors"] = dict(outcome.order.validation_errors)
    return result


class CLICommandHandler:
    """Handles CLI commands by delegating to the driving ports.

    Checkout commands each run in their own session (one order store unit
    of work); home commands share the long-lived catalog cache.
    """

    def __init__(
        self,
        checkout_session: CheckoutSession,
        storefront: StorefrontPort,
        cache: CatalogCache,
        identity: StaticIdentityProvider,
    ):
        """Initialize the CLI command handler.

        Args:
            checkout_session: Factory returning an async context manager
                that yields a CheckoutPort bound to a fresh order store.
            storefront: StorefrontPort implementation for home pages.
            cache: Shared best-seller cache, for invalidation.
            identity: Identity provider for the interactive session.
        """
        self.checkout_session = checkout_session
        self.storefront = storefront
        self.cache = cache
        self.identity = identity

    async def home(self) -> dict[str, Any]:
        try:
            outcome = await self.storefront.index()
        except DataAccessError as e:
            logger.error(f"Failed to load home page: {e}", exc_info=True)
            return {"status": "error", "operation": "home", "message": str(e)}
        return render_outcome(outcome)

    def error_page(self) -> dict[str, Any]:
        return render_outcome(self.storefront.error())

    def status_code_page(self) -> dict[str, Any]:
        return render_outcome(self.storefront.status_code_page())

    async def checkout_form(self) -> dict[str, Any]:
        async with self.checkout_session() as checkout:
            return render_outcome(checkout.address_and_payment_form())

    async def checkout(
        self,
        fields: Mapping[str, Any],
        cancellation: CancellationToken | None = None,
    ) -> dict[str, Any]:
        """Submit the address and payment form as the signed-in user.

        Args:
            fields: Submitted form fields, including PromoCode.
            cancellation: Token for the request. A fresh one if omitted.

        Returns:
            Rendered outcome, or an error dictionary on data access failure.
        """
        form = MappingFormData(fields)
        order = bind_order(form)
        token = cancellation or CancellationToken()
        principal = self.identity.current_principal_name()

        try:
            async with self.checkout_session() as checkout:
                outcome = await checkout.submit_address_and_payment(
                    order,
                    form.get_field(PROMO_CODE_FIELD),
                    token,
                    principal_name=principal,
                )
        except DataAccessError as e:
            logger.error(f"Checkout failed: {e}", exc_info=True)
            return {"status": "error", "operation": "checkout", "message": str(e)}

        return render_outcome(outcome)

    async def complete(self, order_id: int) -> dict[str, Any]:
        principal = self.identity.current_principal_name()
        try:
            async with self.checkout_session() as checkout:
                outcome = await checkout.complete(order_id, principal)
        except DataAccessError as e:
            logger.error(f"Order completion failed: {e}", exc_info=True)
            return {"status": "error", "operation": "complete", "message": str(e)}
        return render_outcome(outcome)

    def sign_in(self, username: str) -> dict[str, Any]:
        try:
            self.identity.sign_in(username)
        except ValueError as e:
            return {"status": "error", "operation": "sign-in", "message": str(e)}
        return {
            "status": "success",
            "operation": "sign-in",
            "username": username,
            "message": f"Signed in as {username}",
        }

    def sign_out(self) -> dict[str, Any]:
        self.identity.sign_out()
        return {"status": "success", "operation": "sign-out", "message": "Signed out"}

    def invalidate(self) -> dict[str, Any]:
        self.cache.invalidate()
        return {
            "status": "success",
            "operation": "invalidate",
            "message": "Best-seller cache invalidated",
        }
