"""Page objects for creating and inspecting orders."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from eventual_e2e.driver import Locator
from eventual_e2e.pages.base import BasePage
from eventual_e2e.polling import Observation, PollOptions, wait_until
from eventual_e2e.waits import (
    ORDER_URL_PATTERN,
    entity_locator,
    wait_for_entity_appearance,
    wait_for_text_value,
    wait_for_url,
)

log = logging.getLogger(__name__)

type Banner = Literal["processing", "cancelled", "reservation-failed"]

RESERVATION_LABELS: Mapping[str, str] = {
    "pending": "Reservation Pending",
    "confirmed": "Stock Reserved",
    "released": "Stock Released",
    "expired": "Reservation Expired",
    "failed": "Reservation Failed",
}


@dataclass(frozen=True, kw_only=True)
class OrderCreatePage(BasePage):
    """Product catalog and cart at ``/orders/new``."""

    path: str = "/orders/new"

    @property
    def heading(self) -> Locator:
        return self.page.get_by_role("heading", name="Create Order")

    @property
    def catalog(self) -> Locator:
        return self.get_by_test_id("product-catalog")

    @property
    def cart_items(self) -> Locator:
        return self.get_by_test_id("cart-items")

    @property
    def cart_total(self) -> Locator:
        return self.get_by_test_id("cart-total")

    @property
    def submit_button(self) -> Locator:
        return self.get_by_test_id("order-submit-button")

    async def open(self) -> None:
        await self.goto()
        await self.expect_visible(self.heading)

    async def wait_for_products(self, *names: str) -> None:
        """Wait until every named product is offered in the catalog."""
        for name in names:
            await wait_for_entity_appearance(self.catalog, name, options=self.options)

    async def add_to_cart(self, name: str, quantity: int = 1) -> None:
        """Add a product to the cart, then set its quantity.

        The first click on a card adds one unit.
        """
        await wait_for_entity_appearance(self.catalog, name, options=self.options)
        await entity_locator(self.catalog, name).first.click()
        if quantity > 1:
            row = self.cart_items.locator("div").filter(has_text=name)
            await row.locator('input[type="number"]').first.fill(str(quantity))
        log.info("Added %d x %r to cart", quantity, name)

    async def submit(self) -> str:
        """Submit the order and return the order detail URL."""
        await self.submit_button.click()
        return await wait_for_url(self.page, ORDER_URL_PATTERN, options=self.options)


@dataclass(frozen=True, kw_only=True)
class OrderDetailPage(BasePage):
    """Order status, reservation status and actions at ``/orders/<id>``."""

    saga_options: PollOptions

    @property
    def status_badge(self) -> Locator:
        return self.get_by_test_id("order-status-badge")

    @property
    def reservation_badge(self) -> Locator:
        return self.get_by_test_id("reservation-status-badge")

    @property
    def back_link(self) -> Locator:
        return self.get_by_test_id("back-to-orders-link")

    @property
    def cancel_button(self) -> Locator:
        return self.get_by_test_id("cancel-order-button")

    def banner(self, kind: Banner) -> Locator:
        """Status banner shown above the order details."""
        if kind == "reservation-failed":
            return self.get_by_test_id("reservation-failed-banner")
        return self.get_by_test_id(f"order-{kind}-banner")

    async def wait_loaded(self) -> str:
        """Wait for the order detail URL and the order's projection."""
        url = await wait_for_url(self.page, ORDER_URL_PATTERN, options=self.options)
        await self.expect_visible(self.back_link)
        await self.expect_visible(self.status_badge)
        return url

    async def wait_for_status(self, status: str) -> str:
        """Wait for the order status reached at the end of the order saga."""
        return await wait_for_text_value(
            self.status_badge,
            status,
            options=self.saga_options,
            description=f"Order status to become {status!r}",
        )

    async def wait_for_reservation(self, status: str) -> str:
        """Wait for the reservation badge to mention ``status``.

        Accepts either a label ("Stock Reserved") or a status key
        ("confirmed").
        """
        label = RESERVATION_LABELS.get(status.lower(), status)

        async def observe() -> Observation:
            if not await self.reservation_badge.is_visible():
                return Observation(ok=False, value=None)
            text = await self.reservation_badge.text_content()
            return Observation(ok=text is not None and label in text, value=text)

        outcome = await wait_until(
            observe,
            self.options,
            description=f"Reservation status to become {label!r}",
        )
        return str(outcome.value)

    async def cancel(self) -> None:
        """Cancel the order through the confirmation dialog."""
        await self.cancel_button.click()
        await self.page.get_by_role("button", name="Yes, Cancel Order").click()
