#!/usr/bin/env python3
"""
Command-line interface for the notification pipeline.

Usage:
    uv run python cli.py [command] [options]

Commands:
    demo        Run demo scenarios
    send        Compose and send one notification
    test        Run the test suite
    serve       Start the API server

Examples:
    uv run python cli.py demo all
    uv run python cli.py send "Your order has shipped" --signature --timestamp
    uv run python cli.py serve
"""

import argparse
import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional


def run_demo(scenario: str) -> None:
    """Run a demo scenario."""
    from notifier.demo import run_channel_failure_demo, run_order_shipped_demo

    if scenario == "order-shipped":
        run_order_shipped_demo()
    elif scenario == "channel-failure":
        run_channel_failure_demo()
    elif scenario == "all":
        run_order_shipped_demo()
        run_channel_failure_demo()
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


def run_send(text: str, decorators: list[str], config_path: Optional[Path]) -> int:
    """
    Send one notification through the configured pipeline.

    Returns:
        Process exit code: 0 if every delivery succeeded, 1 otherwise
    """
    from notifier.config import build_pipeline, load_config
    from notifier.errors import ConfigError

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        pipeline = build_pipeline(load_config(config_path))
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    pipeline.service.send_notification(pipeline.compose(text, decorators))

    print("\nDeliveries:")
    for result in pipeline.engine.last_results:
        print(f"  {result}")

    return 0 if all(r.success for r in pipeline.engine.last_results) else 1


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = ["uv", "run", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Notification Pipeline CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo order-shipped
  %(prog)s demo all
  %(prog)s send "Notification ready" --signature --timestamp
  %(prog)s send "Hello" --config data/pipeline.json
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "scenario",
        choices=["order-shipped", "channel-failure", "all"],
        help="Which scenario to run",
    )

    # Send command
    send_parser = subparsers.add_parser("send", help="Send one notification")
    send_parser.add_argument("text", help="Notification text")
    send_parser.add_argument(
        "--signature",
        dest="decorators",
        action="append_const",
        const="signature",
        help="Prepend the configured signature",
    )
    send_parser.add_argument(
        "--timestamp",
        dest="decorators",
        action="append_const",
        const="timestamp",
        help="Prepend the current time",
    )
    send_parser.add_argument("--config", type=Path, default=None, help="Pipeline config file")

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "demo":
        run_demo(args.scenario)
    elif args.command == "send":
        sys.exit(run_send(args.text, args.decorators or [], args.config))
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
