"""Dashboard steps."""

import re

from pytest_bdd import given, parsers, then, when

from eventual_e2e.context import ScenarioContext
from eventual_e2e.steps.pages import admin_products, dashboard, order_create
from eventual_e2e.waits import wait_for_url

CREATE_ORDER_URL = re.compile(r"/orders/new$")


@given("a product with low stock exists")
def low_stock_product(scenario_context: ScenarioContext) -> None:
    async def setup() -> None:
        page = admin_products(scenario_context)
        await page.open()
        await page.ensure_product(
            scenario_context.name("Low Stock Product"),
            scenario_context.code("LSP-001"),
            "19.99",
            5,
            load_timeout=scenario_context.config.inventory_load_timeout,
        )

    scenario_context.run(setup())


@when("I navigate to the dashboard")
@when("I am on the dashboard")
def navigate_to_dashboard(scenario_context: ScenarioContext) -> None:
    scenario_context.run(dashboard(scenario_context).open())


@when(parsers.parse('I click the "{action}" quick action'))
def click_quick_action(scenario_context: ScenarioContext, action: str) -> None:
    scenario_context.run(dashboard(scenario_context).quick_action(action))


@then(parsers.parse("I should see the {stat} count"))
def stat_visible(scenario_context: ScenarioContext, stat: str) -> None:
    page = dashboard(scenario_context)
    test_id = stat.replace(" orders", "").replace(" ", "-")
    scenario_context.run(page.expect_visible(page.stat(f"{test_id}-count")))


@then("I should see the low stock warning")
def low_stock_warning(scenario_context: ScenarioContext) -> None:
    page = dashboard(scenario_context)
    scenario_context.run(page.expect_visible(page.low_stock_warning))


@then("I should be on the create order page")
def on_create_order_page(scenario_context: ScenarioContext) -> None:
    page = order_create(scenario_context)

    async def check() -> None:
        await wait_for_url(page.page, CREATE_ORDER_URL, options=page.options)
        await page.expect_visible(page.heading)

    scenario_context.run(check())
