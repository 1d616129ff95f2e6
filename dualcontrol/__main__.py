"""CLI interface for DualControl administration."""

import json
import sys

from dualcontrol.bootstrap import build_workflow_engine

USAGE = "Usage: python -m dualcontrol <init-db|action-types>"


def main():
    """Main entry point for the DualControl CLI."""
    if len(sys.argv) < 2:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        build_workflow_engine(create_schema=True)
        print("Database initialized")
    elif command == "action-types":
        engine = build_workflow_engine()
        print(json.dumps(engine.describe_action_types(), indent=2))
    else:
        print(USAGE, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
