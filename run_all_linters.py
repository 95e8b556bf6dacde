#!/usr/bin/env python3
"""Run the formatters, linters and the test suite in one go.

Steps, in order:
1. Black format check
2. isort import-order check
3. Ruff static checks
4. Pylint on the application packages
5. pytest

Output of every step is collected and failures are repeated in a summary.
"""

from pathlib import Path
import subprocess
import sys

PACKAGES = ["app", "core", "infrastructure", "main.py"]

COMMANDS: list[tuple[list[str], str]] = [
    ([sys.executable, "-m", "black", ".", "--check"], "black"),
    ([sys.executable, "-m", "isort", ".", "--check-only"], "isort"),
    ([sys.executable, "-m", "ruff", "check", "."], "ruff"),
    ([sys.executable, "-m", "pylint", *PACKAGES], "pylint"),
    ([sys.executable, "-m", "pytest", "-q"], "pytest"),
]


def run_command(cmd: list[str], description: str) -> tuple[bool, str]:
    """Run `cmd` from the project root; return (succeeded, combined output)."""
    print(f"\n{'=' * 60}")
    print(f"{description}: {' '.join(cmd)}")
    print("=" * 60)

    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, check=False, cwd=Path(__file__).parent
        )
    except OSError as e:
        print(f"FAILED to start: {e}")
        return False, str(e)

    success = result.returncode == 0
    output = result.stdout + result.stderr
    print("ok" if success else f"FAILED (exit {result.returncode})")
    if output.strip():
        print(output)
    return success, output


def main() -> None:
    results = [(name, *run_command(cmd, name)) for cmd, name in COMMANDS]

    print(f"\n{'=' * 60}")
    print("Summary")
    print("=" * 60)
    for name, success, _ in results:
        print(f"{name:<8} {'passed' if success else 'FAILED'}")

    failed = [(name, output) for name, success, output in results if not success]
    for name, output in failed:
        if output.strip():
            print(f"\n--- {name} ---")
            print(output)

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
