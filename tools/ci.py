#!/usr/bin/env python3
# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the local CI pipeline: formatting, lint, type check, tests with coverage, and build.

Pass ``--fail-fast`` to stop at the first failing step.
"""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=fhirmodel", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]


def main(argv: list[str]) -> int:
    """Run the CI steps in order and print a coloured summary."""
    fail_fast = "--fail-fast" in argv
    results: list[tuple[str, bool, float]] = []

    for name, cmd in STEPS:
        passed, elapsed = _run_step(name, cmd)
        results.append((name, passed, elapsed))
        if fail_fast and not passed:
            break

    _print_banner("Summary")
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    skipped = len(STEPS) - len(results)
    if skipped:
        print(chalk.yellow(f"  {skipped} step(s) skipped"))
    print()
    return 0 if all(passed for _, passed, _ in results) and not skipped else 1


# ################
# Implementation
# ################

_REPO_ROOT = pathlib.Path(__file__).resolve().parent.parent


def _print_banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}\n{chalk.blue(title)}\n{sep}")


def _run_step(name: str, cmd: list[str]) -> tuple[bool, float]:
    _print_banner(name)
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=_REPO_ROOT)
    return proc.returncode == 0, time.monotonic() - start


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
