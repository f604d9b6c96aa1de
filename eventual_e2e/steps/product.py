"""Product and stock setup steps.

Setup steps are idempotent: a product already created under this run's
namespace (for example by an earlier scenario) is reused, not duplicated.
"""

import logging

from pytest_bdd import given, parsers, then, when

from eventual_e2e.context import ScenarioContext
from eventual_e2e.steps.pages import admin_products, order_create

log = logging.getLogger(__name__)

DEFAULT_PRICE = "29.99"


async def _ensure_product(
    ctx: ScenarioContext, name: str, sku: str, price: str, quantity: int = 0
) -> str:
    page = admin_products(ctx)
    display_name = ctx.name(name)
    await page.open()
    await page.ensure_product(
        display_name,
        ctx.code(sku),
        price,
        quantity,
        load_timeout=ctx.config.inventory_load_timeout,
    )
    ctx.created[name] = display_name
    log.debug("Product %r is %r in this run", name, display_name)
    return display_name


def format_price(price: float) -> str:
    """Price as typed into the form: 29.99 -> "29.99", 30.0 -> "30"."""
    return f"{price:.2f}".rstrip("0").rstrip(".")


@given(parsers.parse('a product "{name}" with SKU "{sku}" exists'))
def product_exists(scenario_context: ScenarioContext, name: str, sku: str) -> None:
    scenario_context.run(_ensure_product(scenario_context, name, sku, DEFAULT_PRICE))


@given(
    parsers.parse(
        'a product "{name}" with SKU "{sku}" at price {price:f} '
        "and {quantity:d} units in stock"
    )
)
def product_with_stock_exists(
    scenario_context: ScenarioContext,
    name: str,
    sku: str,
    price: float,
    quantity: int,
) -> None:
    scenario_context.run(
        _ensure_product(scenario_context, name, sku, format_price(price), quantity)
    )


@given("products exist with stock")
def products_with_stock(scenario_context: ScenarioContext) -> None:
    async def setup() -> None:
        first = await _ensure_product(
            scenario_context, "Test Product", "TST-001", "49.99", 50
        )
        second = await _ensure_product(
            scenario_context, "Second Product", "TST-002", "29.99", 30
        )
        # The catalog only lists products with available stock
        catalog = order_create(scenario_context)
        await catalog.open()
        await catalog.wait_for_products(first, second)

    scenario_context.run(setup())


@given("products exist with various stock levels")
def products_with_various_stock(scenario_context: ScenarioContext) -> None:
    async def setup() -> None:
        await _ensure_product(
            scenario_context, "Browse In Stock Item", "BIS-001", "19.99", 100
        )
        await _ensure_product(
            scenario_context, "Browse Low Stock Item", "BLS-001", "29.99", 5
        )
        await _ensure_product(
            scenario_context, "Browse Out of Stock Item", "BOS-001", "39.99"
        )

    scenario_context.run(setup())


@when(
    parsers.parse(
        'I create a product "{name}" with SKU "{sku}" at price {price:f}'
    )
)
def create_product(
    scenario_context: ScenarioContext, name: str, sku: str, price: float
) -> None:
    page = admin_products(scenario_context)
    scenario_context.run(
        page.create_product(
            scenario_context.name(name), scenario_context.code(sku), format_price(price)
        )
    )


@when(parsers.parse('I add {quantity:d} units of "{name}" to stock'))
def add_stock(scenario_context: ScenarioContext, quantity: int, name: str) -> None:
    page = admin_products(scenario_context)
    scenario_context.run(page.add_stock(scenario_context.name(name), quantity))


@then(parsers.parse('eventually I should see "{name}" in the product list'))
def product_listed(scenario_context: ScenarioContext, name: str) -> None:
    page = admin_products(scenario_context)
    scenario_context.run(page.wait_for_product(scenario_context.name(name)))
