"""Page objects for the order management application."""

from eventual_e2e.pages.admin_products import AdminProductsPage
from eventual_e2e.pages.base import BasePage
from eventual_e2e.pages.dashboard import DashboardPage
from eventual_e2e.pages.orders import OrderCreatePage, OrderDetailPage

__all__ = [
    "AdminProductsPage",
    "BasePage",
    "DashboardPage",
    "OrderCreatePage",
    "OrderDetailPage",
]
