#!/usr/bin/env python3
"""
Recommendation Counter Reconciliation Script
Compares every movie's recommendation counter with its ledger row count and
optionally rewrites drifted counters from the ledger.

Usage: python scripts/reconcile_recommendation_counts.py [--repair]
"""

import argparse
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from filmclub.app import create_app
from filmclub.services.recommendation_service import get_recommendation_coordinator


# Color codes for terminal output
class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BOLD = '\033[1m'
    END = '\033[0m'


def print_drifts(drifts, repair):
    """Print one line per drifted movie and a summary."""
    if not drifts:
        print(f"{Colors.GREEN}✅ All recommendation counters match the ledger.{Colors.END}")
        return

    for drift in drifts:
        print(
            f"{Colors.YELLOW}⚠️  movie {drift.movie_id}: "
            f"counter={drift.stored_count} ledger={drift.ledger_count}{Colors.END}"
        )

    print(f"\n{Colors.BOLD}{len(drifts)} drifted counter(s){Colors.END}")
    if repair:
        print(f"{Colors.GREEN}🔧 Counters rewritten from the ledger.{Colors.END}")
    else:
        print("Run again with --repair to rewrite them from the ledger.")


def main(argv=None):
    """Main entry point for the reconciliation script."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--repair",
        action="store_true",
        help="rewrite drifted counters from the ledger",
    )
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        drifts = get_recommendation_coordinator().reconcile_recommendation_counts(repair=args.repair)

    print_drifts(drifts, args.repair)
    # Non-zero exit flags unrepaired drift for cron/CI use
    return 1 if drifts and not args.repair else 0


if __name__ == "__main__":
    sys.exit(main())
