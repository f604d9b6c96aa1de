"""Step definitions for the order management scenarios.

Each module is loaded as a pytest plugin by ``eventual_e2e.plugin``.
"""

STEP_MODULES = (
    "eventual_e2e.steps.common",
    "eventual_e2e.steps.product",
    "eventual_e2e.steps.order",
    "eventual_e2e.steps.dashboard",
)
