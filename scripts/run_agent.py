#!/usr/bin/env python3
"""Dispatch a single request to one agent and print the response envelope."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.agents.contracts import AgentKind  # noqa: E402
from src.agents.hub import build_hub_session  # noqa: E402
from src.errors import OmniAgentError  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Run one agent without the planning step.")
    parser.add_argument("agent", choices=[kind.value for kind in AgentKind], help="Agent kind to dispatch.")
    parser.add_argument("prompt", help="Request text for the agent.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    dispatcher = build_hub_session().dispatcher
    start = time.perf_counter()
    try:
        envelope = dispatcher.dispatch(args.prompt, AgentKind(args.agent))
    except OmniAgentError as exc:
        print(f"Execution failed: {exc}", file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - start

    print(f"Agent: {args.agent}", file=sys.stderr)
    print(f"Elapsed: {elapsed:.2f}s", file=sys.stderr)
    print(envelope.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
