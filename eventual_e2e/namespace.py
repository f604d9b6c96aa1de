"""Run-scoped namespacing for entities created against a shared store.

The store behind the application under test is never wiped, so every entity a
test run creates carries a short token unique to that run. Both the step that
creates an entity and the step that later looks for it derive the same name
from the same token, which keeps them in agreement without shared state.
"""

import logging
import re
import time
from dataclasses import dataclass

log = logging.getLogger(__name__)

type RunToken = str

TOKEN_LENGTH = 6
TOKEN_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
CODE_SEPARATOR = "-"

_TOKEN_PATTERN = re.compile(r"^[0-9a-z]+$")


class PreconditionViolation(ValueError):
    """Raised when a name cannot be derived from the given input."""


def to_base36(number: int) -> str:
    """Encode a non-negative integer in lower-case base 36."""
    if number < 0:
        raise PreconditionViolation(f"Cannot encode negative number: {number}")
    if number == 0:
        return "0"

    digits: list[str] = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(TOKEN_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_run_token(
    now: float | None = None, length: int = TOKEN_LENGTH
) -> RunToken:
    """Generate a run token from the wall clock.

    The current time in milliseconds is base-36 encoded and only the trailing
    ``length`` characters are kept. Those are the fastest-moving digits, so two
    processes started even a millisecond apart get different tokens. Tokens
    repeat after 36**length milliseconds (about 25 days for the default).

    Args:
        now: Seconds since the epoch; defaults to ``time.time()``
        length: Number of characters to keep

    Returns:
        A short lower-case alphanumeric token.

    """
    if length < 1:
        raise PreconditionViolation(f"Token length must be positive, got {length}")

    seconds = time.time() if now is None else now
    encoded = to_base36(int(seconds * 1000))
    return encoded[-length:].rjust(length, "0")


def validate_token(token: str) -> RunToken:
    """Return the token if it is usable as a namespace, raise otherwise."""
    if not token:
        raise PreconditionViolation("Run token must be a non-empty string")
    if not _TOKEN_PATTERN.match(token):
        raise PreconditionViolation(
            f"Run token must be lower-case alphanumeric, got {token!r}"
        )
    return token


def derive_display_name(token: RunToken, base_name: str) -> str:
    """Prefix a human-readable name with the run token.

    The base name keeps its casing and punctuation: ``("r1a2b", "Widget Pro")``
    becomes ``"r1a2b Widget Pro"``.
    """
    validate_token(token)
    if not base_name or not base_name.strip():
        raise PreconditionViolation("Base name must be a non-empty string")
    return f"{token} {base_name}"


def derive_code(token: RunToken, base_code: str) -> str:
    """Prefix a constrained identifier (such as a SKU) with the run token.

    The token is upper-cased and joined with a hyphen: ``("r1a2b",
    "WIDGET-001")`` becomes ``"R1A2B-WIDGET-001"``.
    """
    validate_token(token)
    if not base_code or not base_code.strip():
        raise PreconditionViolation("Base code must be a non-empty string")
    if base_code.startswith(CODE_SEPARATOR):
        raise PreconditionViolation(
            f"Base code must not start with {CODE_SEPARATOR!r}, got {base_code!r}"
        )
    return f"{token.upper()}{CODE_SEPARATOR}{base_code}"


@dataclass(frozen=True, slots=True)
class RunNamespace:
    """Namespace shared by every scenario of one test process."""

    token: RunToken

    def __post_init__(self) -> None:
        validate_token(self.token)

    @classmethod
    def create(cls, token: RunToken | None = None) -> "RunNamespace":
        """Create a namespace, generating a token unless one is pinned."""
        if token is None:
            token = generate_run_token()
            log.info("Generated run token: %s", token)
        else:
            log.info("Using pinned run token: %s", token)
        return cls(token=token)

    def display_name(self, base_name: str) -> str:
        """Namespaced display name for ``base_name``."""
        return derive_display_name(self.token, base_name)

    def code(self, base_code: str) -> str:
        """Namespaced code for ``base_code``."""
        return derive_code(self.token, base_code)
