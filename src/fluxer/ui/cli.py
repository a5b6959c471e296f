from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from fluxer.app import reconcile_once
from fluxer.config import ConfigurationError, configure_logging, get_operator_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile FluxApp resources")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run the operator against the current cluster")
    run.add_argument(
        "--namespace",
        type=str,
        help="Only watch this namespace (defaults to FLUXER_NAMESPACE, else all namespaces)",
    )

    reconcile = subparsers.add_parser("reconcile", help="Reconcile one FluxApp once and exit")
    reconcile.add_argument("namespace", type=str, help="Namespace of the FluxApp")
    reconcile.add_argument("name", type=str, help="Name of the FluxApp")
    reconcile.add_argument(
        "--context",
        type=str,
        help="Kubeconfig context to use when running outside the cluster",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        config = get_operator_config(namespace=getattr(parsed_args, "namespace", None))
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)

    try:
        if parsed_args.command == "run":
            from fluxer.operator import run_operator  # noqa: PLC0415

            run_operator(namespace=config.namespace)
        elif parsed_args.command == "reconcile":
            result = reconcile_once(
                parsed_args.namespace,
                parsed_args.name,
                context=parsed_args.context,
            )
            if result.requeue:
                log.info("Requeue requested in %s: %s", result.requeue_after, result.reason)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def entrypoint() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    entrypoint()
