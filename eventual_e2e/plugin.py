"""Pytest plugin wiring the run namespace, the browser and the step handlers."""

import asyncio
import logging
import os
from collections.abc import Generator

import pytest
from playwright.async_api import Browser, async_playwright

from eventual_e2e.config import E2EConfig, load_config
from eventual_e2e.context import ScenarioContext
from eventual_e2e.namespace import RunNamespace
from eventual_e2e.steps import STEP_MODULES

log = logging.getLogger(__name__)

pytest_plugins = list(STEP_MODULES)

E2E_MARKER = "e2e"


def pytest_configure(config: pytest.Config) -> None:
    """Register the e2e marker."""
    config.addinivalue_line(
        "markers", f"{E2E_MARKER}: scenario driving a live application"
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip e2e scenarios unless an application URL is configured."""
    if load_config(os.environ).base_url:
        return

    skip = pytest.mark.skip(reason="E2E_BASE_URL is not configured")
    for item in items:
        if E2E_MARKER in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def e2e_config() -> E2EConfig:
    """Configuration read from the environment."""
    return load_config(os.environ)


@pytest.fixture(scope="session")
def run_namespace(e2e_config: E2EConfig) -> RunNamespace:
    """Namespace shared by every scenario of this test process."""
    return RunNamespace.create(e2e_config.run_token)


@pytest.fixture(scope="session")
def scenario_runner() -> Generator[asyncio.Runner]:
    """Event loop shared by the browser and every scenario."""
    with asyncio.Runner() as runner:
        yield runner


@pytest.fixture(scope="session")
def browser(
    scenario_runner: asyncio.Runner, e2e_config: E2EConfig
) -> Generator[Browser]:
    """Browser launched once per test process."""
    playwright = scenario_runner.run(async_playwright().start())
    browser_type = getattr(playwright, e2e_config.browser)
    log.info(
        "Launching %s (headless=%s)", e2e_config.browser, e2e_config.headless
    )
    instance: Browser = scenario_runner.run(
        browser_type.launch(headless=e2e_config.headless)
    )
    try:
        yield instance
    finally:
        scenario_runner.run(instance.close())
        scenario_runner.run(playwright.stop())


@pytest.fixture
def scenario_context(
    scenario_runner: asyncio.Runner,
    browser: Browser,
    e2e_config: E2EConfig,
    run_namespace: RunNamespace,
) -> Generator[ScenarioContext]:
    """Fresh browser context and page for one scenario."""
    context = scenario_runner.run(browser.new_context(base_url=e2e_config.base_url))
    page = scenario_runner.run(context.new_page())
    try:
        yield ScenarioContext(
            page=page,
            namespace=run_namespace,
            config=e2e_config,
            runner=scenario_runner,
        )
    finally:
        scenario_runner.run(context.close())
