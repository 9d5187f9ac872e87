"""
SpendPilot: CLI Module

Command-line interface for one-off policy checks.

Usage:
    spendpilot evaluate scenario.json
    spendpilot evaluate scenario.json --pack packs/corporate_default.yaml --format text
    spendpilot diff previous.json current.json
    spendpilot config --pack packs/corporate_default.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional

from .config import PolicyConfig, load_config_from_env
from .engine import SpendPolicyEngine
from .exceptions import SpendPilotError
from .models import Scenario
from .packs import load_policy_pack

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INVALID = 2


def _load_config(pack: Optional[str]) -> PolicyConfig:
    if pack:
        return load_policy_pack(pack)
    return load_config_from_env()


def _read_scenario(path: str) -> Scenario:
    """Read a wire-format scenario from a JSON file ("-" for stdin)."""
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return Scenario.from_dict(data)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def cmd_evaluate(args: argparse.Namespace) -> int:
    """Evaluate one scenario."""
    engine = SpendPolicyEngine(_load_config(args.pack))
    scenario = _read_scenario(args.scenario)
    decision = engine.evaluate(scenario)

    if args.format == "text":
        print(engine.summarize(scenario, decision))
        action = engine.next_action(scenario, decision)
        print(f"Next: {action.label}")
        if decision.alternatives:
            print("Alternatives:")
            for alt in decision.alternatives:
                print(f"- {alt.title} -> {alt.expected_outcome.label}")
        return EXIT_OK

    payload = decision.to_dict()
    payload["nextAction"] = engine.next_action(scenario, decision).to_dict()
    _print_json(payload)
    return EXIT_OK


def cmd_diff(args: argparse.Namespace) -> int:
    """Diff two attempts."""
    engine = SpendPolicyEngine(_load_config(args.pack))
    previous = _read_scenario(args.previous)
    current = _read_scenario(args.current)
    _print_json({"changes": [c.to_dict() for c in engine.diff(previous, current)]})
    return EXIT_OK


def cmd_config(args: argparse.Namespace) -> int:
    """Show the active policy configuration."""
    config = _load_config(args.pack)
    _print_json({
        "name": config.name,
        "version": config.version,
        "fingerprint": config.fingerprint(),
        "config": config.to_dict(),
    })
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="SpendPilot corporate spend policy checks",
        prog="spendpilot",
    )
    pack_help = "Policy pack (YAML or JSON); defaults to $SP_POLICY_PACK or built-in policy"
    parser.add_argument("--pack", default=None, help=pack_help)

    # Also accepted after the subcommand; SUPPRESS keeps a pack given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--pack", default=argparse.SUPPRESS, help=pack_help)

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Evaluate command
    eval_parser = subparsers.add_parser("evaluate", parents=[common], help="Evaluate a scenario")
    eval_parser.add_argument("scenario", help="Scenario JSON file, or - for stdin")
    eval_parser.add_argument("--format", choices=("json", "text"), default="json")
    eval_parser.set_defaults(func=cmd_evaluate)

    # Diff command
    diff_parser = subparsers.add_parser("diff", parents=[common], help="Compare two scenarios")
    diff_parser.add_argument("previous", help="Previous scenario JSON file")
    diff_parser.add_argument("current", help="Current scenario JSON file")
    diff_parser.set_defaults(func=cmd_diff)

    # Config command
    config_parser = subparsers.add_parser("config", parents=[common], help="Show the active policy configuration")
    config_parser.set_defaults(func=cmd_config)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    try:
        return args.func(args)
    except SpendPilotError as e:
        print(json.dumps({"error": e.to_dict()}), file=sys.stderr)
        return EXIT_INVALID
    except (OSError, ValueError) as e:
        print(json.dumps({"error": {"code": "SP_BAD_INPUT", "message": str(e)}}), file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
