"""CLI for inspecting run namespaces and checking the application is up."""

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from eventual_e2e.config import ConfigError, E2EConfig, load_config
from eventual_e2e.namespace import (
    PreconditionViolation,
    RunNamespace,
    derive_code,
    derive_display_name,
)
from eventual_e2e.polling import PollTimeoutError
from eventual_e2e.probes import wait_for_app_ready

log = logging.getLogger("eventual_e2e")


def derive_all(
    token: str, values: Sequence[str], derive: Callable[[str, str], str]
) -> dict[str, Any]:
    """Derive a namespaced identifier for every value."""
    return {
        "token": token,
        "results": [
            {"base": value, "derived": derive(token, value)} for value in values
        ],
    }


async def check_ready(config: E2EConfig, path: str, timeout: float | None) -> int:
    """Wait for the application and return an exit code."""
    options = config.poll_options(timeout)
    try:
        outcome = await wait_for_app_ready(config, path, options)
    except PollTimeoutError as exc:
        log.error("%s", exc)
        print(json.dumps({"ready": False, "message": str(exc)}))
        return 1

    log.info("Application ready after %.2fs", outcome.elapsed)
    print(
        json.dumps(
            {
                "ready": True,
                "status": outcome.value,
                "attempts": outcome.attempts,
                "elapsed": round(outcome.elapsed, 3),
            }
        )
    )
    return 0


def run(args: argparse.Namespace, environ: Mapping[str, str]) -> int:
    """Execute the selected command and return an exit code."""
    config = load_config(environ)

    if args.command == "token":
        namespace = RunNamespace.create(config.run_token)
        print(json.dumps({"token": namespace.token}))
        return 0

    if args.command in {"names", "codes"}:
        token = args.token or config.run_token
        if token is None:
            log.error("No run token given (use --token or E2E_RUN_TOKEN)")
            return 2
        derive = derive_display_name if args.command == "names" else derive_code
        print(json.dumps(derive_all(token, args.values, derive), indent=2))
        return 0

    return asyncio.run(check_ready(config, args.path, args.timeout))


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for all commands."""
    parser = argparse.ArgumentParser(
        description="Run namespaces and readiness checks for end-to-end tests"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("token", help="Print a run token")

    names = commands.add_parser("names", help="Derive namespaced display names")
    names.add_argument("values", nargs="+", help="Base names, e.g. 'Widget Pro'")
    names.add_argument("--token", help="Run token (default: E2E_RUN_TOKEN)")

    codes = commands.add_parser("codes", help="Derive namespaced codes such as SKUs")
    codes.add_argument("values", nargs="+", help="Base codes, e.g. WIDGET-001")
    codes.add_argument("--token", help="Run token (default: E2E_RUN_TOKEN)")

    ready = commands.add_parser(
        "wait-ready", help="Wait until the application responds"
    )
    ready.add_argument("--path", default="/", help="Path to probe")
    ready.add_argument(
        "--timeout", type=float, default=None, help="Timeout in seconds"
    )

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        exit_code = run(args, os.environ)
    except (ConfigError, PreconditionViolation, ValidationError) as exc:
        log.error("%s", exc)
        exit_code = 2
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
