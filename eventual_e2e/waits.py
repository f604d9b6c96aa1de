"""Waits for specific UI states, built on ``wait_until``.

Every wait here checks for one terminal value, never for "something changed":
intermediate values show up while the backend works through a multi-step
process, and only the final one may satisfy the wait.
"""

import logging
import re
from collections.abc import Awaitable, Callable
from re import Pattern
from typing import Any, Literal

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from eventual_e2e.driver import Locator, Page
from eventual_e2e.namespace import PreconditionViolation
from eventual_e2e.polling import (
    INVENTORY_LOAD_TIMEOUT,
    Observation,
    PollOptions,
    Satisfied,
    maybe_await,
    wait_until,
)

log = logging.getLogger(__name__)

ENTITY_ATTRIBUTE = "data-testid"
PRODUCT_CARD_PREFIX = "product-card"
HYDRATION_PLACEHOLDER = "Generating..."
PRODUCT_ID_PATTERN = re.compile(r"^prod-")
ORDER_URL_PATTERN = re.compile(r"/orders/[a-f0-9-]+")
DROPDOWN_OPEN_TIMEOUT = 0.5

_NUMBER = re.compile(r"(\d+)")

type Reader = Callable[[], str | None | Awaitable[str | None]]


def _normalize(value: str, *, ignore_case: bool) -> str:
    value = " ".join(value.split())
    return value.casefold() if ignore_case else value


def matches_value(
    actual: str | None,
    expected: str,
    *,
    match: Literal["exact", "contains"] = "exact",
    ignore_case: bool = False,
) -> bool:
    """Compare an observed text against the expected one.

    Whitespace runs are collapsed on both sides before comparing.
    """
    if actual is None:
        return False
    observed = _normalize(actual, ignore_case=ignore_case)
    target = _normalize(expected, ignore_case=ignore_case)
    if match == "contains":
        return target in observed
    return observed == target


def extract_number(text: str | None) -> int | None:
    """First integer in ``text``: "50 in stock" -> 50, "Out of stock" -> None."""
    if not text:
        return None
    found = _NUMBER.search(text)
    return int(found.group(1)) if found else None


def entity_selector(
    prefix: str = PRODUCT_CARD_PREFIX, attribute: str = ENTITY_ATTRIBUTE
) -> str:
    """CSS selector for elements whose stable attribute starts with ``prefix``."""
    return f'[{attribute}^="{prefix}"]'


def entity_locator(
    scope: Locator | Page,
    namespaced_name: str,
    *,
    prefix: str = PRODUCT_CARD_PREFIX,
    attribute: str = ENTITY_ATTRIBUTE,
) -> Locator:
    """Locator for the entities under ``scope`` whose text contains the name.

    Never matches by position alone: the namespaced name is always part of
    the query, so data left by other runs is not picked up.
    """
    if not namespaced_name:
        raise PreconditionViolation("Entity lookup requires a namespaced name")
    return scope.locator(entity_selector(prefix, attribute)).filter(
        has_text=namespaced_name
    )


async def wait_for_specific_value(
    read: Reader,
    expected: str,
    *,
    match: Literal["exact", "contains"] = "exact",
    ignore_case: bool = False,
    options: PollOptions | None = None,
    **overrides: Any,
) -> str:
    """Wait until ``read`` returns ``expected`` and return the observed text."""
    overrides.setdefault("description", f"Value to become {expected!r}")

    async def observe() -> Observation:
        actual = await maybe_await(read())
        return Observation(
            ok=matches_value(actual, expected, match=match, ignore_case=ignore_case),
            value=actual,
        )

    outcome = await wait_until(observe, options, **overrides)
    return str(outcome.value)


async def wait_for_text_value(
    locator: Locator,
    expected: str,
    *,
    match: Literal["exact", "contains"] = "exact",
    ignore_case: bool = True,
    options: PollOptions | None = None,
    **overrides: Any,
) -> str:
    """Wait until the element is visible and its text content is ``expected``.

    Text is only read once the element is visible, so a badge that has not
    rendered yet does not block on the driver's auto-wait. Case is ignored
    by default since status badges are styled freely.
    """

    async def read() -> str | None:
        if not await locator.is_visible():
            return None
        return await locator.text_content()

    return await wait_for_specific_value(
        read,
        expected,
        match=match,
        ignore_case=ignore_case,
        options=options,
        **overrides,
    )


async def wait_for_visible_text(
    locator: Locator,
    expected: str,
    *,
    options: PollOptions | None = None,
    **overrides: Any,
) -> str:
    """Wait until the element is visible and its text contains ``expected``."""
    return await wait_for_text_value(
        locator,
        expected,
        match="contains",
        ignore_case=False,
        options=options,
        **overrides,
    )


async def wait_for_numeric_value(
    read: Reader,
    expected: int,
    *,
    options: PollOptions | None = None,
    **overrides: Any,
) -> int:
    """Wait until the first number in the observed text equals ``expected``."""
    overrides.setdefault("description", f"Number to become {expected}")

    async def observe() -> Observation:
        text = await maybe_await(read())
        return Observation(ok=extract_number(text) == expected, value=text)

    await wait_until(observe, options, **overrides)
    return expected


async def wait_for_entity_appearance(
    scope: Locator | Page,
    namespaced_name: str,
    *,
    prefix: str = PRODUCT_CARD_PREFIX,
    attribute: str = ENTITY_ATTRIBUTE,
    options: PollOptions | None = None,
    **overrides: Any,
) -> int:
    """Wait until at least one entity carrying ``namespaced_name`` exists.

    Returns the number of matches. More than one match is tolerated and
    logged; callers act on the first one.
    """
    entities = entity_locator(
        scope, namespaced_name, prefix=prefix, attribute=attribute
    )
    overrides.setdefault("description", f"Entity {namespaced_name!r} to appear")

    async def observe() -> Observation:
        count = await entities.count()
        return Observation(ok=count > 0, value=count)

    outcome = await wait_until(observe, options, **overrides)
    count = int(outcome.value)
    if count > 1:
        log.warning(
            "Found %d entities matching %r, using the first one",
            count,
            namespaced_name,
        )
    return count


async def wait_for_form_ready(
    field: Locator,
    *,
    placeholder: str = HYDRATION_PLACEHOLDER,
    ready_pattern: str | Pattern[str] = PRODUCT_ID_PATTERN,
    submit: Locator | None = None,
    options: PollOptions | None = None,
    **overrides: Any,
) -> str:
    """Wait for a form to finish client-side initialization.

    Until the page is interactive ``field`` shows ``placeholder``; afterwards
    it holds a value matching ``ready_pattern``. Input typed before that point
    is silently lost, so no field may be filled before this returns. When
    ``submit`` is given it must also be enabled.
    """
    pattern = (
        re.compile(ready_pattern) if isinstance(ready_pattern, str) else ready_pattern
    )
    overrides.setdefault("description", "Form to finish initializing")

    async def observe() -> Observation:
        value = await field.input_value()
        ready = value != placeholder and pattern.search(value) is not None
        if ready and submit is not None:
            ready = await submit.is_enabled()
        return Observation(ok=ready, value=value)

    outcome = await wait_until(observe, options, **overrides)
    return str(outcome.value)


async def wait_for_visible(
    locator: Locator, *, options: PollOptions | None = None, **overrides: Any
) -> Satisfied:
    """Wait until the element is visible."""
    overrides.setdefault("description", "Element to become visible")
    return await wait_until(locator.is_visible, options, **overrides)


async def wait_for_hidden(
    locator: Locator, *, options: PollOptions | None = None, **overrides: Any
) -> Satisfied:
    """Wait until the element is hidden or gone."""
    overrides.setdefault("description", "Element to become hidden")

    async def observe() -> bool:
        return not await locator.is_visible()

    return await wait_until(observe, options, **overrides)


async def wait_for_count(
    locator: Locator,
    expected: int,
    *,
    options: PollOptions | None = None,
    **overrides: Any,
) -> Satisfied:
    """Wait until exactly ``expected`` elements match."""
    overrides.setdefault("description", f"Element count to become {expected}")

    async def observe() -> Observation:
        count = await locator.count()
        return Observation(ok=count == expected, value=count)

    return await wait_until(observe, options, **overrides)


async def wait_for_url(
    page: Page,
    pattern: str | Pattern[str] = ORDER_URL_PATTERN,
    *,
    options: PollOptions | None = None,
    **overrides: Any,
) -> str:
    """Wait until the page URL matches ``pattern`` and return the URL."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    overrides.setdefault("description", f"URL to match {compiled.pattern!r}")

    def observe() -> Observation:
        url = page.url
        return Observation(ok=compiled.search(url) is not None, value=url)

    outcome = await wait_until(observe, options, **overrides)
    return str(outcome.value)


async def select_option_when_available(
    page: Page,
    trigger: Locator,
    option_text: str,
    *,
    options: PollOptions | None = None,
    **overrides: Any,
) -> None:
    """Pick ``option_text`` from a dropdown once the option exists.

    A freshly created entity shows up in dropdowns only after its projection
    is updated. Each attempt opens the dropdown, clicks the option if present,
    and otherwise closes the dropdown again before the next attempt.
    """
    if not option_text:
        raise PreconditionViolation("Option lookup requires a namespaced name")
    if options is None:
        overrides.setdefault("interval", 1.0)
    overrides.setdefault("description", f"Option {option_text!r} to be selectable")

    async def attempt() -> Observation:
        await trigger.click()
        try:
            await page.get_by_role("listbox").wait_for(
                state="visible", timeout=DROPDOWN_OPEN_TIMEOUT * 1000
            )
        except PlaywrightTimeoutError:
            await page.keyboard.press("Escape")
            return Observation(ok=False, value="dropdown not open")

        candidates = page.get_by_role("option").filter(has_text=option_text)
        count = await candidates.count()
        if count > 0:
            await candidates.first.click()
            return Observation(ok=True, value=count)

        await page.keyboard.press("Escape")
        return Observation(ok=False, value=count)

    await wait_until(attempt, options, **overrides)


async def probe_loaded(
    locator: Locator, timeout: float = INVENTORY_LOAD_TIMEOUT
) -> bool:
    """Give a list a short time to render its first element.

    Returns ``False`` rather than raising when nothing shows up, which for
    setup steps simply means nothing has been created yet.
    """
    try:
        await locator.first.wait_for(state="visible", timeout=timeout * 1000)
    except PlaywrightTimeoutError:
        log.debug("Nothing visible after %.1fs", timeout)
        return False
    return True
