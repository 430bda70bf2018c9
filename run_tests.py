#!/usr/bin/env python3
"""
Test runner for the diagram editor.

Usage:
    python run_tests.py              # Run unit + integration tests
    python run_tests.py unit         # Run unit tests only
    python run_tests.py integration  # Run integration tests only
    python run_tests.py --coverage   # Run with coverage report

Examples:
    python run_tests.py unit -x            # Stop on first failure
    python run_tests.py --coverage         # With coverage report
"""

import sys
import subprocess
import argparse


def main():
    parser = argparse.ArgumentParser(
        description="Run diagram editor tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Test Suites:
  unit         Unit tests (fast, no Qt required)
  integration  Integration tests (may use filesystem)
  all          All test suites
        """
    )
    parser.add_argument(
        "suite",
        nargs="?",
        choices=["unit", "integration", "all"],
        default="all",
        help="Test suite to run (default: all)"
    )
    parser.add_argument(
        "--coverage", "--cov",
        action="store_true",
        help="Run with coverage report"
    )
    parser.add_argument(
        "--failfast", "-x",
        action="store_true",
        help="Stop on first failure"
    )

    args = parser.parse_args()

    # Build pytest command
    cmd = [sys.executable, "-m", "pytest"]

    if args.suite == "unit":
        cmd.append("tests/unit")
    elif args.suite == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests")

    cmd.append("-v")

    if args.failfast:
        cmd.append("-x")

    if args.coverage:
        cmd.extend([
            "--cov=models",
            "--cov=services",
            "--cov-report=term-missing",
            "--cov-report=html:coverage_report"
        ])

    print(f"Running: {' '.join(cmd)}")
    print("-" * 60)

    result = subprocess.run(cmd)
    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
