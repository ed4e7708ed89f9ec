"""
Example: Fuzzing the fields of a request with Mutation Gate.

This example demonstrates:
1. Registering rules for data keys
2. Turning the gate on through the environment
3. Skipping the first N values and values containing a substring
4. Inspecting a decision
"""

import os

# Add parent to path for running without install
import sys
sys.path.insert(0, "..")

from mutation_gate import Gate, GateConfig


def build_request(i: int) -> dict:
    return {
        "user": f"user_{i}",
        "query": "health check" if i % 3 == 0 else f"sample query {i}",
        "payload": f"payload-{i}".encode("utf-8"),
    }


def main():
    os.environ["DEMO_ENABLED"] = "1"
    os.environ["DEMO_SHOW_IO"] = "0"

    gate = Gate(GateConfig(prefix="DEMO_"))
    gate.set_mutation_seed("42")

    # Never touch user names, leave health checks alone, warm up with 3 clean payloads
    gate.register_rule("user", "boolean", False)
    gate.register_rule("query", "skip_substring", "health")
    gate.register_rule("payload", "skip_first_n", 3)

    print("=== Passing Requests Through The Gate ===")
    for i in range(6):
        request = build_request(i)
        fuzzed = {key: gate.maybe(value, key) for key, value in request.items()}
        print(f"{i}: {fuzzed}")

    print("\n=== Decision For A Query ===")
    decision = gate.explain("query", "health check")
    print(gate.decision_engine.explain_decision(decision))

    print("\n=== Rules ===")
    for rule in gate.rules():
        print(f"  {rule['config_key']}: {rule['value']!r} (count={rule['count']})")


if __name__ == "__main__":
    main()
