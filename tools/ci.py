#!/usr/bin/env python3
# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the MapEdit CI checks locally.

Steps run in order and every step runs even if an earlier one fails, so a
single invocation shows all problems. Use ``--only`` to pick steps by name.
"""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, list[str]] = {
    "format": ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"],
    "lint": ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"],
    "types": ["uv", "run", "ty", "check", "src/"],
    "tests": ["uv", "run", "pytest", "--cov=mapedit", "--cov-report=term-missing"],
    "build": ["uv", "build"],
}


def main() -> int:
    """Run the selected CI steps and print a summary."""
    parser = argparse.ArgumentParser(description="Run MapEdit CI checks")
    parser.add_argument(
        "--only",
        nargs="+",
        choices=list(STEPS),
        default=list(STEPS),
        help="Steps to run (default: all)",
    )
    args = parser.parse_args()

    results = [_run_step(name, STEPS[name]) for name in args.only]

    _banner("Summary")
    for name, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        print(color(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_REPO_ROOT = Path(__file__).resolve().parent.parent


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(f"  {title}"))
    print(sep)


def _run_step(name: str, cmd: list[str]) -> tuple[str, bool, float]:
    _banner(name)
    start = time.monotonic()
    try:
        returncode = subprocess.run(cmd, cwd=_REPO_ROOT).returncode
    except FileNotFoundError:
        print(chalk.red(f"Command not found: {cmd[0]}"))
        returncode = 127
    return name, returncode == 0, time.monotonic() - start


if __name__ == "__main__":
    sys.exit(main())
