"""Page object for the dashboard."""

from dataclasses import dataclass

from eventual_e2e.driver import Locator
from eventual_e2e.pages.base import BasePage


@dataclass(frozen=True, kw_only=True)
class DashboardPage(BasePage):
    """Summary statistics at ``/``."""

    def stat(self, name: str) -> Locator:
        """Statistic tile, e.g. ``product-count``."""
        return self.get_by_test_id(f"stat-{name}")

    @property
    def low_stock_warning(self) -> Locator:
        return self.get_by_test_id("low-stock-warning")

    async def open(self) -> None:
        await self.goto()
        await self.expect_visible(self.get_by_test_id("dashboard-page"))

    async def quick_action(self, name: str) -> None:
        actions = self.get_by_test_id("quick-actions")
        await actions.get_by_role("button", name=name).click()
