"""Polling of externally observable state until it reaches an expected value.

Writes to the application under test become visible after a variable delay.
Assertions therefore sample the UI repeatedly through a caller-supplied
predicate until it holds or a deadline passes. A predicate failing with an
exception counts as "not yet", since a missing or detached element is usually
a symptom of the very delay being waited out.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import Field, model_validator

from eventual_e2e.models.base import Model

log = logging.getLogger(__name__)

PROJECTION_TIMEOUT = 30.0
SAGA_TIMEOUT = 45.0
INVENTORY_LOAD_TIMEOUT = 5.0

DEFAULT_TIMEOUT = PROJECTION_TIMEOUT
DEFAULT_INTERVAL = 0.5


@dataclass(frozen=True, slots=True)
class Observation:
    """A predicate result that also reports what was observed."""

    ok: bool
    value: Any = None


type PredicateResult = bool | Observation
type Predicate = Callable[[], PredicateResult | Awaitable[PredicateResult]]
type Clock = Callable[[], float]
type Sleep = Callable[[float], Awaitable[Any]]


class PollOptions(Model):
    """Timing options for a poll.

    All durations are in seconds.
    """

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    interval: float = Field(default=DEFAULT_INTERVAL, gt=0)
    backoff: float = Field(default=1.0, ge=1.0)
    max_interval: float | None = Field(default=None, gt=0)
    description: str | None = None

    @model_validator(mode="after")
    def _check_max_interval(self) -> "PollOptions":
        if self.max_interval is not None and self.max_interval < self.interval:
            raise ValueError("max_interval must not be smaller than interval")
        return self

    @property
    def timeout_ms(self) -> int:
        """Timeout in whole milliseconds."""
        return round(self.timeout * 1000)

    def next_interval(self, interval: float) -> float:
        """Interval to use after waiting ``interval``."""
        grown = interval * self.backoff
        if self.max_interval is not None:
            return min(grown, self.max_interval)
        return grown


def resolve_options(
    options: PollOptions | None = None, **overrides: Any
) -> PollOptions:
    """Return ``options`` (or the defaults) with ``overrides`` applied.

    Overrides are validated like any other field; ``None`` values are ignored
    so callers can pass optional arguments straight through.
    """
    base = options if options is not None else PollOptions()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return base
    return PollOptions.model_validate({**base.model_dump(), **updates})


@dataclass(frozen=True, slots=True)
class PollAttempt:
    """One evaluation of a predicate."""

    number: int
    elapsed: float
    result: Literal["true", "false", "error"]
    value: Any = None
    error: BaseException | None = None


@dataclass(frozen=True, kw_only=True)
class Satisfied:
    """The predicate held before the deadline."""

    attempts: int
    elapsed: float
    value: Any = None


@dataclass(frozen=True, kw_only=True)
class TimedOut:
    """The deadline passed without the predicate holding."""

    timeout: float
    elapsed: float
    attempts: int
    last_attempt: PollAttempt | None = None
    last_value: Any = None
    last_error: BaseException | None = None
    description: str | None = None

    def describe(self) -> str:
        """Human-readable account of the timeout for assertion messages."""
        condition = self.description or "Condition"
        message = (
            f"{condition} not met within {round(self.timeout * 1000)}ms "
            f"({self.attempts} attempt(s), {self.elapsed:.2f}s elapsed)"
        )
        if self.last_value is not None:
            message += f"; last observed value: {self.last_value!r}"
        if self.last_error is not None:
            message += (
                f"; last error: {type(self.last_error).__name__}: {self.last_error}"
            )
        return message


type PollOutcome = Satisfied | TimedOut


class PollTimeoutError(TimeoutError):
    """Raised when a wait times out."""

    def __init__(self, outcome: TimedOut) -> None:
        super().__init__(outcome.describe())
        self.outcome = outcome

    @property
    def timeout(self) -> float:
        """Configured timeout in seconds."""
        return self.outcome.timeout

    @property
    def last_value(self) -> Any:
        """Last value observed before the deadline, if any."""
        return self.outcome.last_value


async def maybe_await[T](value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def evaluate(predicate: Predicate) -> Observation:
    """Run a predicate once and normalize its result."""
    result = await maybe_await(predicate())
    if isinstance(result, Observation):
        return result
    return Observation(ok=bool(result), value=result)


async def poll_until(
    predicate: Predicate,
    options: PollOptions | None = None,
    *,
    clock: Clock | None = None,
    sleep: Sleep = asyncio.sleep,
) -> PollOutcome:
    """Evaluate ``predicate`` until it holds or the timeout elapses.

    Returns as soon as an evaluation succeeds, without a trailing wait. Waits
    between attempts are clipped to the time remaining, and one last attempt
    is made at the deadline. Each attempt is cut off once the deadline has
    passed, or after one interval for the attempt at the deadline, so a poll
    that times out takes at least ``timeout`` and at most about one interval
    longer. A cut-off attempt is recorded as an error.

    Args:
        predicate: Zero-argument callable returning a bool or an
            ``Observation``, or an awaitable of either
        options: Timing options, defaults to ``PollOptions()``
        clock: Monotonic time source in seconds, defaults to the event
            loop clock
        sleep: Coroutine function used to wait between attempts

    Returns:
        ``Satisfied`` or ``TimedOut``; exceptions raised by the predicate
        never escape.

    """
    options = options or PollOptions()
    now = clock or asyncio.get_running_loop().time
    start = now()
    deadline = start + options.timeout
    interval = options.interval
    number = 0
    last_attempt: PollAttempt | None = None
    last_value: Any = None
    last_error: BaseException | None = None

    while True:
        number += 1
        try:
            async with asyncio.timeout(max(deadline - now(), interval)):
                observation = await evaluate(predicate)
        except Exception as exc:
            last_error = exc
            last_attempt = PollAttempt(
                number=number, elapsed=now() - start, result="error", error=exc
            )
            log.debug(
                "Poll attempt %d of %s raised %s: %s",
                number,
                options.description or "condition",
                type(exc).__name__,
                exc,
            )
        else:
            last_error = None
            last_value = observation.value
            last_attempt = PollAttempt(
                number=number,
                elapsed=now() - start,
                result="true" if observation.ok else "false",
                value=observation.value,
            )
            if observation.ok:
                log.debug(
                    "%s satisfied after %d attempt(s) in %.2fs",
                    options.description or "Condition",
                    number,
                    last_attempt.elapsed,
                )
                return Satisfied(
                    attempts=number,
                    elapsed=last_attempt.elapsed,
                    value=observation.value,
                )
            log.debug(
                "Poll attempt %d of %s observed %r",
                number,
                options.description or "condition",
                observation.value,
            )

        remaining = deadline - now()
        if remaining <= 0:
            outcome = TimedOut(
                timeout=options.timeout,
                elapsed=now() - start,
                attempts=number,
                last_attempt=last_attempt,
                last_value=last_value,
                last_error=last_error,
                description=options.description,
            )
            log.warning("%s", outcome.describe())
            return outcome

        await sleep(min(interval, remaining))
        interval = options.next_interval(interval)


async def wait_until(
    predicate: Predicate,
    options: PollOptions | None = None,
    *,
    clock: Clock | None = None,
    sleep: Sleep = asyncio.sleep,
    **overrides: Any,
) -> Satisfied:
    """Poll like ``poll_until`` but raise ``PollTimeoutError`` on timeout.

    Keyword overrides (``timeout=45``, ``description="..."``) are applied on
    top of ``options``.
    """
    resolved = resolve_options(options, **overrides)
    outcome = await poll_until(predicate, resolved, clock=clock, sleep=sleep)
    if isinstance(outcome, TimedOut):
        raise PollTimeoutError(outcome)
    return outcome


async def retry_action[T](
    action: Callable[[], Awaitable[T]],
    options: PollOptions | None = None,
    *,
    clock: Clock | None = None,
    sleep: Sleep = asyncio.sleep,
    **overrides: Any,
) -> T:
    """Run ``action`` until it completes without raising.

    Unlike ``wait_until`` the action is expected to have effects (a click, a
    form submission). On timeout the last error is re-raised so the caller
    sees the real failure.
    """
    resolved = resolve_options(options, **overrides)
    now = clock or asyncio.get_running_loop().time
    deadline = now() + resolved.timeout
    interval = resolved.interval
    attempts = 0

    while True:
        attempts += 1
        try:
            async with asyncio.timeout(max(deadline - now(), interval)):
                return await action()
        except Exception as exc:
            remaining = deadline - now()
            if remaining <= 0:
                log.warning(
                    "%s still failing after %d attempt(s): %s",
                    resolved.description or "Action",
                    attempts,
                    exc,
                )
                raise
            log.debug("Attempt %d failed, retrying: %s", attempts, exc)
        await sleep(min(interval, remaining))
        interval = resolved.next_interval(interval)
