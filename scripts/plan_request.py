#!/usr/bin/env python3
"""Generate an execution plan for a request and print it as JSON."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.agents.contracts import AgentKind  # noqa: E402
from src.agents.orchestrator import generate_plan  # noqa: E402
from src.errors import OmniAgentError  # noqa: E402
from src.services import build_generation_service  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Ask the planner for an execution plan.")
    parser.add_argument("prompt", help="Free-text request, e.g. 'Build me a pitch deck'")
    parser.add_argument(
        "--agent",
        choices=[kind.value for kind in AgentKind],
        help="Forced agent mode passed to the planner.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    forced = AgentKind(args.agent) if args.agent else None

    try:
        plan = generate_plan(args.prompt, forced, service=build_generation_service())
    except OmniAgentError as exc:
        print(f"Plan generation failed: {exc}", file=sys.stderr)
        return 1

    print(plan.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
