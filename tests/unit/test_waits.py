"""Tests for the specialized waits."""

import logging

import pytest

from eventual_e2e.namespace import PreconditionViolation
from eventual_e2e.polling import PollOptions, PollTimeoutError
from eventual_e2e.testing.fakes import (
    FakePage,
    ScriptedLocator,
    wait_timeout,
)
from eventual_e2e.waits import (
    entity_locator,
    extract_number,
    matches_value,
    probe_loaded,
    select_option_when_available,
    wait_for_count,
    wait_for_entity_appearance,
    wait_for_form_ready,
    wait_for_hidden,
    wait_for_numeric_value,
    wait_for_specific_value,
    wait_for_text_value,
    wait_for_url,
    wait_for_visible,
    wait_for_visible_text,
)

FAST = PollOptions(timeout=0.2, interval=0.001)


@pytest.mark.parametrize(
    ("actual", "expected", "kwargs", "result"),
    [
        ("confirmed", "confirmed", {}, True),
        ("  confirmed\n", "confirmed", {}, True),
        ("Confirmed", "confirmed", {}, False),
        ("Confirmed", "confirmed", {"ignore_case": True}, True),
        ("Stock Reserved", "Reserved", {"match": "contains"}, True),
        ("confirmed", "cancelled", {}, False),
        (None, "confirmed", {}, False),
    ],
)
def test_matches_value(
    actual: str | None, expected: str, kwargs: dict[str, object], result: bool
) -> None:
    assert matches_value(actual, expected, **kwargs) is result  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("50 in stock", 50),
        ("Only 5 left", 5),
        ("Out of stock", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_number(text: str | None, expected: int | None) -> None:
    assert extract_number(text) == expected


class TestWaitForSpecificValue:
    """Tests for wait_for_specific_value."""

    async def test_ignores_intermediate_values(self) -> None:
        """Only the exact target satisfies the wait."""
        badge = ScriptedLocator(texts=["draft", "submitted", "confirmed"])

        result = await wait_for_specific_value(
            badge.text_content, "confirmed", options=FAST
        )

        assert result == "confirmed"
        assert badge.text_reads == 3

    async def test_accepts_sync_reader(self) -> None:
        result = await wait_for_specific_value(lambda: "ready", "ready", options=FAST)

        assert result == "ready"

    async def test_times_out_with_last_value(self) -> None:
        badge = ScriptedLocator(texts=["processing"])

        with pytest.raises(PollTimeoutError) as exc_info:
            await wait_for_specific_value(
                badge.text_content, "confirmed", options=FAST
            )

        assert exc_info.value.last_value == "processing"
        assert "Value to become 'confirmed'" in str(exc_info.value)
        assert "200ms" in str(exc_info.value)

    async def test_read_errors_are_retried(self) -> None:
        badge = ScriptedLocator(texts=[RuntimeError("detached"), "confirmed"])

        result = await wait_for_specific_value(
            badge.text_content, "confirmed", options=FAST
        )

        assert result == "confirmed"

    async def test_override_timeout(self) -> None:
        badge = ScriptedLocator(texts=["processing"])

        with pytest.raises(PollTimeoutError, match="50ms"):
            await wait_for_specific_value(
                badge.text_content, "confirmed", options=FAST, timeout=0.05
            )


class TestWaitForTextValue:
    """Tests for wait_for_text_value."""

    async def test_ignores_case(self) -> None:
        badge = ScriptedLocator(visible=[True], texts=["Pending", "Confirmed"])

        result = await wait_for_text_value(badge, "confirmed", options=FAST)

        assert result == "Confirmed"

    async def test_reads_text_only_once_visible(self) -> None:
        """A badge that has not rendered yet is not read."""
        badge = ScriptedLocator(visible=[False, False, True], texts=["Confirmed"])

        await wait_for_text_value(badge, "confirmed", options=FAST)

        assert badge._visible.calls == 3
        assert badge.text_reads == 1

    async def test_never_visible_times_out_without_reading(self) -> None:
        badge = ScriptedLocator(visible=[False], texts=["Confirmed"])

        with pytest.raises(PollTimeoutError) as exc_info:
            await wait_for_text_value(badge, "confirmed", options=FAST)

        assert exc_info.value.last_value is None
        assert badge.text_reads == 0


async def test_wait_for_visible_text_requires_visibility() -> None:
    banner = ScriptedLocator(
        visible=[False, True], texts=["Product created successfully"]
    )

    result = await wait_for_visible_text(banner, "created", options=FAST)

    assert result == "Product created successfully"


class TestWaitForNumericValue:
    """Tests for wait_for_numeric_value."""

    async def test_waits_for_expected_number(self) -> None:
        badge = ScriptedLocator(texts=["Out of stock", "Only 5 left", "50 in stock"])

        assert await wait_for_numeric_value(badge.text_content, 50, options=FAST) == 50

    async def test_other_numbers_do_not_satisfy(self) -> None:
        badge = ScriptedLocator(texts=["Only 5 left"])

        with pytest.raises(PollTimeoutError, match="Only 5 left"):
            await wait_for_numeric_value(badge.text_content, 50, options=FAST)


class TestWaitForEntityAppearance:
    """Tests for wait_for_entity_appearance."""

    async def test_scopes_lookup_by_name(self) -> None:
        """Queries by stable attribute prefix and namespaced name."""
        catalog = ScriptedLocator(counts=[0, 0, 1])

        count = await wait_for_entity_appearance(
            catalog, "r1a2b Widget Pro", options=FAST
        )

        assert count == 1
        assert catalog.queries == [
            '[data-testid^="product-card"]',
            "has_text=r1a2b Widget Pro",
        ]

    async def test_multiple_matches_use_first(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        catalog = ScriptedLocator(counts=[2])

        with caplog.at_level(logging.WARNING):
            count = await wait_for_entity_appearance(
                catalog, "r1a2b Widget", options=FAST
            )

        assert count == 2
        assert "Found 2 entities matching 'r1a2b Widget'" in caplog.text

    async def test_times_out_when_absent(self) -> None:
        catalog = ScriptedLocator(counts=[0])

        with pytest.raises(PollTimeoutError, match="Entity 'r1a2b Widget' to appear"):
            await wait_for_entity_appearance(catalog, "r1a2b Widget", options=FAST)

    async def test_custom_prefix_and_attribute(self) -> None:
        orders = ScriptedLocator(counts=[1])

        await wait_for_entity_appearance(
            orders, "r1a2b", prefix="order-card", attribute="data-qa", options=FAST
        )

        assert orders.queries[0] == '[data-qa^="order-card"]'

    def test_requires_name(self) -> None:
        with pytest.raises(PreconditionViolation):
            entity_locator(ScriptedLocator(), "")


class TestWaitForFormReady:
    """Tests for wait_for_form_ready."""

    async def test_waits_for_placeholder_to_clear(self) -> None:
        field = ScriptedLocator(values=["Generating...", "Generating...", "prod-42"])

        value = await wait_for_form_ready(field, options=FAST)

        assert value == "prod-42"

    async def test_requires_pattern_match(self) -> None:
        field = ScriptedLocator(values=["", "prod-1"])

        assert await wait_for_form_ready(field, options=FAST) == "prod-1"

    async def test_waits_for_submit_enabled(self) -> None:
        field = ScriptedLocator(values=["prod-1"])
        submit = ScriptedLocator(enabled=[False, False, True])

        await wait_for_form_ready(field, submit=submit, options=FAST)

        assert submit._enabled.calls == 3

    async def test_times_out_on_placeholder(self) -> None:
        field = ScriptedLocator(values=["Generating..."])

        with pytest.raises(PollTimeoutError, match="'Generating...'"):
            await wait_for_form_ready(field, options=FAST)

    async def test_custom_pattern(self) -> None:
        field = ScriptedLocator(values=["Loading", "ord-7"])

        value = await wait_for_form_ready(
            field, placeholder="Loading", ready_pattern=r"^ord-", options=FAST
        )

        assert value == "ord-7"


async def test_wait_for_visible_and_hidden() -> None:
    spinner = ScriptedLocator(visible=[False, True, True, False])

    await wait_for_visible(spinner, options=FAST)
    await wait_for_hidden(spinner, options=FAST)

    assert spinner._visible.calls == 4


async def test_wait_for_count() -> None:
    rows = ScriptedLocator(counts=[2, 2, 1])

    outcome = await wait_for_count(rows, 1, options=FAST)

    assert outcome.value == 1


async def test_wait_for_url() -> None:
    page = FakePage(
        urls=["http://app.test/orders/new", "http://app.test/orders/ab12-cd"]
    )

    assert await wait_for_url(page, options=FAST) == "http://app.test/orders/ab12-cd"


class TestSelectOptionWhenAvailable:
    """Tests for select_option_when_available."""

    async def test_clicks_option_once_listed(self) -> None:
        listbox = ScriptedLocator()
        option = ScriptedLocator(counts=[0, 1])
        trigger = ScriptedLocator()
        page = FakePage(locators={"role=listbox": listbox, "role=option": option})

        await select_option_when_available(
            page, trigger, "r1a2b Widget", options=FAST
        )

        assert trigger.actions == [("click", None), ("click", None)]
        assert page.keyboard.pressed == ["Escape"]
        assert option.actions == [("click", None)]
        assert "has_text=r1a2b Widget" in option.queries

    async def test_closes_dropdown_when_not_open(self) -> None:
        listbox = ScriptedLocator(wait_results=[wait_timeout(), None])
        option = ScriptedLocator(counts=[1])
        page = FakePage(locators={"role=listbox": listbox, "role=option": option})

        await select_option_when_available(
            page, ScriptedLocator(), "r1a2b Widget", options=FAST
        )

        assert page.keyboard.pressed == ["Escape"]
        assert option.actions == [("click", None)]

    async def test_times_out_when_never_listed(self) -> None:
        page = FakePage(
            locators={
                "role=listbox": ScriptedLocator(),
                "role=option": ScriptedLocator(counts=[0]),
            }
        )

        with pytest.raises(PollTimeoutError, match="Option 'r1a2b Widget'"):
            await select_option_when_available(
                page, ScriptedLocator(), "r1a2b Widget", options=FAST
            )


class TestProbeLoaded:
    """Tests for probe_loaded."""

    async def test_true_when_visible(self) -> None:
        cards = ScriptedLocator()

        assert await probe_loaded(cards, timeout=0.1) is True
        assert cards.actions == [("wait_for", "visible")]

    async def test_false_on_driver_timeout(self) -> None:
        cards = ScriptedLocator(wait_results=[wait_timeout()])

        assert await probe_loaded(cards, timeout=0.1) is False
