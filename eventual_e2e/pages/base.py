"""Base class for page objects."""

from dataclasses import dataclass

from eventual_e2e.driver import Locator, Page
from eventual_e2e.polling import PollOptions
from eventual_e2e.waits import wait_for_specific_value, wait_for_visible


@dataclass(frozen=True, kw_only=True)
class BasePage:
    """Page object bound to one browser page.

    Names passed to page objects are already namespaced; page objects never
    derive names themselves.
    """

    page: Page
    options: PollOptions

    path: str = "/"

    def get_by_test_id(self, test_id: str) -> Locator:
        """Element by its ``data-testid``."""
        return self.page.get_by_test_id(test_id)

    async def goto(self, path: str | None = None) -> None:
        """Navigate to ``path`` or to the page's own path."""
        await self.page.goto(path or self.path)

    async def fill_field(self, field: Locator, value: str) -> None:
        """Fill an input and commit it by blurring.

        Controlled inputs only keep their value once the blur handler ran, so
        the value is read back before moving on.
        """
        await field.click()
        await field.fill(value)
        await field.blur()
        await wait_for_specific_value(
            field.input_value,
            value,
            options=self.options,
            description=f"Field to hold {value!r}",
        )

    async def expect_visible(self, locator: Locator) -> None:
        """Wait until ``locator`` is visible."""
        await wait_for_visible(locator, options=self.options)
