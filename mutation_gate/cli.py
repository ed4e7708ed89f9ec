"""
Command-line interface for Mutation Gate.

Pass data through the gate, inspect decisions and list configured rules.
Rule values and switches are read from the environment, as in a library run.
"""

import argparse
import json
import sys

from .config import create_default_config_file, load_config
from .errors import GateError
from .gate import Gate


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Mutation Gate - conditional fuzzing of values"
    )
    parser.add_argument("--config", "-c", help="Path to a JSON config file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # evaluate command
    evaluate_parser = subparsers.add_parser("evaluate", help="Pass data through the gate")
    evaluate_parser.add_argument("--key", "-k", help="Data key scoping the rules")
    evaluate_parser.add_argument("--data", "-d", help="Input data (reads stdin if omitted)")
    evaluate_parser.add_argument("--binary", action="store_true", help="Treat input as bytes")
    evaluate_parser.add_argument("--seed", help="Mutation seed")

    # decide command
    decide_parser = subparsers.add_parser("decide", help="Show the decision for a value")
    decide_parser.add_argument("--key", "-k", help="Data key scoping the rules")
    decide_parser.add_argument("--value", "-v", required=True, help="Value to decide on")
    decide_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # rules command
    rules_parser = subparsers.add_parser("rules", help="List configured rules")
    rules_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # status command
    subparsers.add_parser("status", help="Show switches and rules")

    # init command
    subparsers.add_parser("init", help="Create default configuration file")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "init":
        create_default_config_file()
        return 0

    try:
        return _run(args)
    except GateError as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return 1


def _run(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    gate = Gate(config)

    if args.command == "evaluate":
        if args.seed is not None:
            gate.set_mutation_seed(args.seed)

        if args.binary:
            data = args.data.encode("utf-8") if args.data is not None else sys.stdin.buffer.read()
            result = gate.maybe(data, args.key)
            sys.stdout.buffer.write(result)
            sys.stdout.buffer.flush()
        else:
            data = args.data if args.data is not None else sys.stdin.read()
            print(gate.maybe(data, args.key), end="")

    elif args.command == "decide":
        decision = gate.explain(args.key, args.value)
        if args.json:
            print(json.dumps(decision.to_dict(), indent=2))
        else:
            print(gate.decision_engine.explain_decision(decision))

    elif args.command == "rules":
        rules = gate.rules()
        if args.json:
            print(json.dumps(rules, indent=2))
        elif not rules:
            print("No rules configured")
        else:
            for rule in rules:
                print(f"  {rule['config_key']:<40} {rule['kind']:<15} {rule['value']!r}")

    elif args.command == "status":
        print(json.dumps(gate.get_status(), indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
