"""Page object construction for step handlers."""

from eventual_e2e.context import ScenarioContext
from eventual_e2e.pages import (
    AdminProductsPage,
    DashboardPage,
    OrderCreatePage,
    OrderDetailPage,
)


def admin_products(ctx: ScenarioContext) -> AdminProductsPage:
    return AdminProductsPage(page=ctx.page, options=ctx.projection_options())


def order_create(ctx: ScenarioContext) -> OrderCreatePage:
    return OrderCreatePage(page=ctx.page, options=ctx.projection_options())


def order_detail(ctx: ScenarioContext) -> OrderDetailPage:
    return OrderDetailPage(
        page=ctx.page,
        options=ctx.projection_options(),
        saga_options=ctx.saga_options(),
    )


def dashboard(ctx: ScenarioContext) -> DashboardPage:
    return DashboardPage(page=ctx.page, options=ctx.projection_options())
