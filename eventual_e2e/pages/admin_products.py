"""Page object for the admin products page."""

import logging
from dataclasses import dataclass

from eventual_e2e.driver import Locator
from eventual_e2e.pages.base import BasePage
from eventual_e2e.waits import (
    entity_locator,
    probe_loaded,
    select_option_when_available,
    wait_for_entity_appearance,
    wait_for_form_ready,
    wait_for_numeric_value,
    wait_for_visible_text,
)

log = logging.getLogger(__name__)

TAB_TEST_IDS = {
    "Create Product": "tab-create-product",
    "Add Stock": "tab-add-stock",
}


@dataclass(frozen=True, kw_only=True)
class AdminProductsPage(BasePage):
    """Product creation and stock management at ``/admin/products``."""

    path: str = "/admin/products"

    @property
    def header(self) -> Locator:
        return self.get_by_test_id("admin-products-page-header")

    @property
    def product_id_input(self) -> Locator:
        return self.get_by_test_id("product-id-input")

    @property
    def name_input(self) -> Locator:
        return self.get_by_test_id("product-name-input")

    @property
    def sku_input(self) -> Locator:
        return self.get_by_test_id("product-sku-input")

    @property
    def price_input(self) -> Locator:
        return self.get_by_test_id("product-price-input")

    @property
    def product_submit(self) -> Locator:
        return self.get_by_test_id("product-form-submit")

    @property
    def stock_select(self) -> Locator:
        return self.get_by_test_id("stock-product-select")

    @property
    def stock_quantity_input(self) -> Locator:
        return self.get_by_test_id("stock-quantity-input")

    @property
    def stock_submit(self) -> Locator:
        return self.get_by_test_id("stock-form-submit")

    @property
    def success_banner(self) -> Locator:
        return self.get_by_test_id("admin-success-banner")

    @property
    def error_banner(self) -> Locator:
        return self.get_by_test_id("admin-error-banner")

    @property
    def product_list(self) -> Locator:
        return self.get_by_test_id("product-list")

    @property
    def inventory_cards(self) -> Locator:
        return self.page.locator('[data-testid^="product-card"]')

    async def open(self) -> None:
        """Navigate here and wait until the product form accepts input."""
        await self.goto()
        await self.expect_visible(self.header)
        await self.wait_until_ready()

    async def wait_until_ready(self) -> None:
        """Wait for the product form to finish initializing."""
        await wait_for_form_ready(
            self.product_id_input, submit=self.product_submit, options=self.options
        )

    async def switch_tab(self, tab: str) -> None:
        """Switch between the "Create Product" and "Add Stock" tabs."""
        try:
            test_id = TAB_TEST_IDS[tab]
        except KeyError:
            raise ValueError(f"Unknown tab: {tab}") from None
        await self.get_by_test_id(test_id).click()
        if tab == "Create Product":
            await self.wait_until_ready()

    async def has_product(self, name: str, load_timeout: float) -> bool:
        """Whether a product with this name is already listed.

        Gives the inventory a short time to load first; an empty store is not
        an error.
        """
        await probe_loaded(self.inventory_cards, timeout=load_timeout)
        count = await self.inventory_cards.filter(has_text=name).count()
        if count > 1:
            log.warning("Product %r is listed %d times", name, count)
        return count > 0

    async def create_product(self, name: str, sku: str, price: str) -> None:
        """Fill in and submit the product form."""
        await self.fill_field(self.name_input, name)
        await self.fill_field(self.sku_input, sku)
        await self.fill_field(self.price_input, price)
        await self.product_submit.click()
        await self.expect_visible(self.success_banner)
        log.info("Created product %r (%s)", name, sku)

    async def add_stock(self, name: str, quantity: int) -> None:
        """Add stock to a product once it shows up in the stock form."""
        await self.switch_tab("Add Stock")
        await select_option_when_available(
            self.page, self.stock_select, name, options=self.options
        )
        await self.fill_field(self.stock_quantity_input, str(quantity))
        await self.stock_submit.click()
        await self.expect_visible(self.success_banner)
        log.info("Added %d units of %r", quantity, name)

    async def ensure_product(
        self,
        name: str,
        sku: str,
        price: str,
        quantity: int = 0,
        *,
        load_timeout: float,
    ) -> bool:
        """Create a product (and stock) unless it exists already.

        Returns whether the product was created by this call.
        """
        if await self.has_product(name, load_timeout):
            log.info("Product %r already exists, skipping creation", name)
            return False
        await self.create_product(name, sku, price)
        if quantity > 0:
            await self.add_stock(name, quantity)
        return True

    async def wait_for_product(self, name: str) -> int:
        """Wait until the product appears in the inventory list."""
        return await wait_for_entity_appearance(
            self.page, name, options=self.options
        )

    async def wait_for_stock(self, name: str, quantity: int) -> int:
        """Wait until the product's stock badge shows ``quantity``."""
        card = entity_locator(self.product_list, name)

        async def read() -> str | None:
            if await card.count() == 0:
                return None
            return await card.first.get_by_test_id("stock-badge").text_content()

        return await wait_for_numeric_value(
            read,
            quantity,
            options=self.options,
            description=f"Stock of {name!r} to become {quantity}",
        )

    async def expect_success(self, text: str) -> None:
        await wait_for_visible_text(self.success_banner, text, options=self.options)

    async def expect_error(self, text: str) -> None:
        await wait_for_visible_text(self.error_banner, text, options=self.options)
