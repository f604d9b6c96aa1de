"""Tests for run namespacing."""

import pytest

from eventual_e2e.namespace import (
    TOKEN_LENGTH,
    PreconditionViolation,
    RunNamespace,
    derive_code,
    derive_display_name,
    generate_run_token,
    to_base36,
    validate_token,
)


def test_derive_display_name_prefixes_token() -> None:
    """Joins token and base name with a space, keeping the base name as is."""
    assert derive_display_name("r1a2b", "Widget Pro") == "r1a2b Widget Pro"


def test_derive_display_name_preserves_punctuation() -> None:
    assert derive_display_name("abc123", "Café, Deluxe!") == "abc123 Café, Deluxe!"


def test_derive_code_uppercases_token() -> None:
    """Joins the upper-cased token and base code with a hyphen."""
    assert derive_code("r1a2b", "WIDGET-001") == "R1A2B-WIDGET-001"


def test_derivation_is_deterministic() -> None:
    first = derive_display_name("r1a2b", "Widget Pro")
    second = derive_display_name("r1a2b", "Widget Pro")

    assert first == second


@pytest.mark.parametrize(
    ("first", "second"),
    [
        ("Widget Pro", "Widget"),
        ("Widget", "widget"),
        ("Test Product", "Second Product"),
    ],
)
def test_distinct_base_names_give_distinct_names(first: str, second: str) -> None:
    assert derive_display_name("r1a2b", first) != derive_display_name("r1a2b", second)


def test_distinct_tokens_give_distinct_names() -> None:
    assert derive_display_name("aaaaaa", "Widget") != derive_display_name(
        "aaaaab", "Widget"
    )


@pytest.mark.parametrize("base_name", ["", "   "])
def test_derive_display_name_rejects_empty_base(base_name: str) -> None:
    with pytest.raises(PreconditionViolation, match="Base name"):
        derive_display_name("r1a2b", base_name)


def test_derive_code_rejects_empty_base() -> None:
    with pytest.raises(PreconditionViolation, match="Base code"):
        derive_code("r1a2b", "")


def test_derive_code_rejects_leading_separator() -> None:
    with pytest.raises(PreconditionViolation, match="must not start"):
        derive_code("r1a2b", "-001")


@pytest.mark.parametrize("token", ["", "R1A2B", "r1 a2", "r1-a2"])
def test_derivation_rejects_malformed_token(token: str) -> None:
    with pytest.raises(PreconditionViolation):
        derive_display_name(token, "Widget")


@pytest.mark.parametrize(
    ("number", "expected"),
    [(0, "0"), (35, "z"), (36, "10"), (1295, "zz"), (1296, "100")],
)
def test_to_base36(number: int, expected: str) -> None:
    assert to_base36(number) == expected


def test_to_base36_rejects_negative() -> None:
    with pytest.raises(PreconditionViolation):
        to_base36(-1)


def test_generate_run_token_has_fixed_length() -> None:
    token = generate_run_token()

    assert len(token) == TOKEN_LENGTH
    assert validate_token(token) == token


def test_generate_run_token_differs_one_millisecond_apart() -> None:
    """Keeps the fast-moving digits, so nearby start times differ."""
    start_ms = 1_700_000_000_000

    tokens = {
        generate_run_token((start_ms + offset + 0.5) / 1000) for offset in range(100)
    }

    assert len(tokens) == 100


def test_generate_run_token_is_deterministic_for_a_given_time() -> None:
    assert generate_run_token(1_700_000_000.123) == generate_run_token(
        1_700_000_000.123
    )


def test_generate_run_token_pads_short_values() -> None:
    assert generate_run_token(0.5, length=3) == "0dw"


def test_generate_run_token_respects_length() -> None:
    assert len(generate_run_token(1_700_000_000.0, length=4)) == 4


def test_generate_run_token_rejects_zero_length() -> None:
    with pytest.raises(PreconditionViolation):
        generate_run_token(length=0)


def test_run_namespace_uses_pinned_token() -> None:
    namespace = RunNamespace.create("r1a2b")

    assert namespace.token == "r1a2b"
    assert namespace.display_name("Widget Pro") == "r1a2b Widget Pro"
    assert namespace.code("WIDGET-001") == "R1A2B-WIDGET-001"


def test_run_namespace_generates_token() -> None:
    namespace = RunNamespace.create()

    assert len(namespace.token) == TOKEN_LENGTH


def test_run_namespace_rejects_malformed_token() -> None:
    with pytest.raises(PreconditionViolation):
        RunNamespace(token="Not A Token")


def test_run_namespace_is_immutable() -> None:
    namespace = RunNamespace(token="r1a2b")

    with pytest.raises(AttributeError):
        namespace.token = "other"  # type: ignore[misc]
