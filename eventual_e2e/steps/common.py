"""Navigation, feedback and eventual-consistency steps shared by all features."""

from pytest_bdd import given, parsers, then, when

from eventual_e2e.context import ScenarioContext
from eventual_e2e.steps.pages import admin_products, order_create, order_detail
from eventual_e2e.waits import wait_for_visible_text


@given("I am on the admin products page")
def on_admin_products_page(scenario_context: ScenarioContext) -> None:
    scenario_context.run(admin_products(scenario_context).open())


@when("I navigate to the admin products page")
def navigate_to_admin_products(scenario_context: ScenarioContext) -> None:
    scenario_context.run(admin_products(scenario_context).open())


@when("I navigate to the create order page")
def navigate_to_create_order(scenario_context: ScenarioContext) -> None:
    scenario_context.run(order_create(scenario_context).open())


@when(parsers.parse('I switch to the "{tab}" tab'))
def switch_tab(scenario_context: ScenarioContext, tab: str) -> None:
    scenario_context.run(admin_products(scenario_context).switch_tab(tab))


@then(parsers.parse('I should see a success message containing "{text}"'))
def success_message(scenario_context: ScenarioContext, text: str) -> None:
    scenario_context.run(admin_products(scenario_context).expect_success(text))


@then(parsers.parse('I should see an error message containing "{text}"'))
def error_message(scenario_context: ScenarioContext, text: str) -> None:
    scenario_context.run(admin_products(scenario_context).expect_error(text))


@then(parsers.parse('I should see validation error "{text}"'))
def validation_error(scenario_context: ScenarioContext, text: str) -> None:
    scenario_context.run(
        wait_for_visible_text(
            scenario_context.page.get_by_text(text).first,
            text,
            options=scenario_context.projection_options(),
        )
    )


@then(
    parsers.parse('eventually the product "{name}" should appear in the inventory list')
)
def product_in_inventory(scenario_context: ScenarioContext, name: str) -> None:
    page = admin_products(scenario_context)
    scenario_context.run(page.wait_for_product(scenario_context.name(name)))


@then(
    parsers.parse(
        'eventually the product "{name}" should show "{quantity:d}" units '
        "in Current Inventory"
    )
)
def product_stock_level(
    scenario_context: ScenarioContext, name: str, quantity: int
) -> None:
    page = admin_products(scenario_context)
    scenario_context.run(page.wait_for_stock(scenario_context.name(name), quantity))


@then("I should be redirected to the order detail page")
def redirected_to_order_detail(scenario_context: ScenarioContext) -> None:
    url = scenario_context.run(order_detail(scenario_context).wait_loaded())
    scenario_context.created["order_url"] = url
