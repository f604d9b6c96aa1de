"""Per-scenario state handed to step handlers."""

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field
from typing import Any

from eventual_e2e.config import E2EConfig
from eventual_e2e.driver import Page
from eventual_e2e.namespace import RunNamespace
from eventual_e2e.polling import PollOptions


@dataclass(kw_only=True)
class ScenarioContext:
    """Everything a step needs: the page, the run namespace and configuration.

    Step handlers are synchronous while the driver is async, so the context
    owns the runner whose event loop the page belongs to.
    """

    page: Page
    namespace: RunNamespace
    config: E2EConfig
    runner: asyncio.Runner = field(repr=False)
    created: dict[str, str] = field(default_factory=dict)

    def run[T](self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine on the page's event loop."""
        return self.runner.run(coro)

    def name(self, base_name: str) -> str:
        """Namespaced display name."""
        return self.namespace.display_name(base_name)

    def code(self, base_code: str) -> str:
        """Namespaced code."""
        return self.namespace.code(base_code)

    def projection_options(self) -> PollOptions:
        """Poll options for simple projection updates."""
        return self.config.poll_options()

    def saga_options(self) -> PollOptions:
        """Poll options for checks that wait on a multi-step workflow."""
        return self.config.poll_options(self.config.saga_timeout)
