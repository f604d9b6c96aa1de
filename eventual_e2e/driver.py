"""Interface consumed from the browser-automation driver.

Only the lookups, reads and actions listed here are used. Playwright's async
``Page`` and ``Locator`` satisfy these protocols structurally; the in-memory
fakes in ``eventual_e2e.testing.fakes`` do too.
"""

from re import Pattern
from typing import Literal, Protocol, Self

type ElementState = Literal["attached", "detached", "visible", "hidden"]


class Locator(Protocol):
    """A lazily evaluated query for elements on a page."""

    @property
    def first(self) -> Self: ...

    def locator(self, selector: str) -> Self: ...

    def filter(self, *, has_text: str | Pattern[str] | None = None) -> Self: ...

    def get_by_test_id(self, test_id: str | Pattern[str]) -> Self: ...

    def get_by_role(
        self, role: str, *, name: str | Pattern[str] | None = None
    ) -> Self: ...

    def get_by_text(
        self, text: str | Pattern[str], *, exact: bool | None = None
    ) -> Self: ...

    async def count(self) -> int: ...

    async def is_visible(self) -> bool: ...

    async def is_enabled(self) -> bool: ...

    async def text_content(self) -> str | None: ...

    async def input_value(self) -> str: ...

    async def click(self) -> None: ...

    async def fill(self, value: str) -> None: ...

    async def blur(self) -> None: ...

    async def wait_for(
        self, *, state: ElementState | None = None, timeout: float | None = None
    ) -> None: ...


class Keyboard(Protocol):
    """Keyboard input."""

    async def press(self, key: str) -> None: ...


class Page(Protocol):
    """A browser tab."""

    @property
    def url(self) -> str: ...

    @property
    def keyboard(self) -> Keyboard: ...

    async def goto(self, url: str) -> object: ...

    def locator(self, selector: str) -> Locator: ...

    def get_by_test_id(self, test_id: str | Pattern[str]) -> Locator: ...

    def get_by_role(
        self, role: str, *, name: str | Pattern[str] | None = None
    ) -> Locator: ...

    def get_by_text(
        self, text: str | Pattern[str], *, exact: bool | None = None
    ) -> Locator: ...
