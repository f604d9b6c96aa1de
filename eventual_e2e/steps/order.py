"""Cart, order submission and order status steps."""

from pytest_bdd import given, parsers, then, when

from eventual_e2e.context import ScenarioContext
from eventual_e2e.steps.pages import admin_products, order_create, order_detail
from eventual_e2e.waits import wait_for_text_value


async def _place_order(
    ctx: ScenarioContext,
    name: str,
    sku: str,
    price: str,
    stock: int,
    quantity: int = 1,
) -> str:
    admin = admin_products(ctx)
    display_name = ctx.name(name)
    await admin.open()
    await admin.ensure_product(
        display_name,
        ctx.code(sku),
        price,
        stock,
        load_timeout=ctx.config.inventory_load_timeout,
    )

    create = order_create(ctx)
    await create.open()
    await create.add_to_cart(display_name, quantity)
    url = await create.submit()
    ctx.created["order_url"] = url
    return url


@given("orders exist with different statuses")
def orders_exist(scenario_context: ScenarioContext) -> None:
    scenario_context.run(
        _place_order(scenario_context, "Order Test Product", "OTP-001", "39.99", 100)
    )


@given("a confirmed order exists")
def confirmed_order_exists(scenario_context: ScenarioContext) -> None:
    async def setup() -> None:
        await _place_order(
            scenario_context, "Confirmed Order Product", "COP-001", "59.99", 50
        )
        await order_detail(scenario_context).wait_for_status("confirmed")

    scenario_context.run(setup())


@given("a cancelled order exists")
def cancelled_order_exists(scenario_context: ScenarioContext) -> None:
    async def setup() -> None:
        # Ordering more than the stock makes the reservation fail
        await _place_order(
            scenario_context,
            "Cancelled Order Product",
            "CAO-001",
            "79.99",
            2,
            quantity=10,
        )
        await order_detail(scenario_context).wait_for_status("cancelled")

    scenario_context.run(setup())


@when(parsers.parse('I add "{name}" to cart with quantity {quantity:d}'))
@when(parsers.parse('I add "{name}" to the cart with quantity {quantity:d}'))
def add_to_cart(scenario_context: ScenarioContext, name: str, quantity: int) -> None:
    page = order_create(scenario_context)
    scenario_context.run(page.add_to_cart(scenario_context.name(name), quantity))


@when("I submit the order")
def submit_order(scenario_context: ScenarioContext) -> None:
    url = scenario_context.run(order_create(scenario_context).submit())
    scenario_context.created["order_url"] = url


@when("I cancel the order")
def cancel_order(scenario_context: ScenarioContext) -> None:
    scenario_context.run(order_detail(scenario_context).cancel())


@when("I navigate to that order")
def navigate_to_order(scenario_context: ScenarioContext) -> None:
    url = scenario_context.created["order_url"]
    scenario_context.run(scenario_context.page.goto(url))


@then(parsers.parse('eventually the order status should be "{status}"'))
def order_status(scenario_context: ScenarioContext, status: str) -> None:
    scenario_context.run(order_detail(scenario_context).wait_for_status(status))


@then(parsers.parse('eventually the reservation status should be "{status}"'))
def reservation_status(scenario_context: ScenarioContext, status: str) -> None:
    scenario_context.run(order_detail(scenario_context).wait_for_reservation(status))


@then("I should be redirected to order detail")
def redirected_to_order(scenario_context: ScenarioContext) -> None:
    url = scenario_context.run(order_detail(scenario_context).wait_loaded())
    scenario_context.created["order_url"] = url


@then("I should see the cancellation reason")
def cancellation_reason(scenario_context: ScenarioContext) -> None:
    page = order_detail(scenario_context)
    reason = page.get_by_test_id("cancellation-reason")
    scenario_context.run(page.expect_visible(reason))


@then("I should see the order cancelled banner")
def cancelled_banner(scenario_context: ScenarioContext) -> None:
    page = order_detail(scenario_context)
    scenario_context.run(page.expect_visible(page.banner("cancelled")))


@then(parsers.parse('I should see status "{status}"'))
def status_shown(scenario_context: ScenarioContext, status: str) -> None:
    page = order_detail(scenario_context)
    scenario_context.run(
        wait_for_text_value(
            page.status_badge, status, match="contains", options=page.options
        )
    )


@then("I should see the order processing indicator")
def processing_banner(scenario_context: ScenarioContext) -> None:
    page = order_detail(scenario_context)
    scenario_context.run(page.expect_visible(page.banner("processing")))


@then("I should see the reservation failed banner")
def reservation_failed_banner(scenario_context: ScenarioContext) -> None:
    page = order_detail(scenario_context)
    scenario_context.run(page.expect_visible(page.banner("reservation-failed")))
