#!/usr/bin/env python3
"""
Scheduled entry point - runs a single rollcall and prints its summary.

Usage:
    python scripts/run_rollcall.py [--sandbox]
"""

import argparse
import sys
from pathlib import Path

# Load environment variables from .env file first
import dotenv
dotenv.load_dotenv()

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rollcall.core.config import load_settings
from rollcall.core.errors import RollcallError
from rollcall.core.rollcall import run_rollcall


def main(argv=None):
    """Main entry point for the rollcall script."""
    parser = argparse.ArgumentParser(description="Email owners of stale journal clubs")
    parser.add_argument(
        "--sandbox",
        action="store_true",
        help="Use the sandbox repository and only touch the sentinel journal club"
    )
    args = parser.parse_args(argv)

    try:
        summary = run_rollcall(load_settings(sandbox=args.sandbox))
    except RollcallError as e:
        print(f"Rollcall failed: {e}", file=sys.stderr)
        return 1

    print(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
