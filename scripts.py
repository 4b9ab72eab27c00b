#!/usr/bin/env python3
"""Development scripts for the flight seat map service."""

import subprocess
import sys


def start():
    """Start the development server."""
    subprocess.run([
        "uvicorn",
        "flight_seatmap.main:app",
        "--host", "0.0.0.0",
        "--port", "3000",
        "--reload"
    ])


def lint():
    """Run linting and type checking."""
    subprocess.run(["black", "flight_seatmap/", "tests/"])
    subprocess.run(["mypy", "flight_seatmap/"])


def format_code():
    """Format code with black."""
    subprocess.run(["black", "flight_seatmap/", "tests/"])


def test():
    """Run the test suite."""
    subprocess.run(["pytest", "tests/"])


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts.py <command>")
        print("Commands: start, lint, format-code, test")
        sys.exit(1)

    command = sys.argv[1].replace("-", "_")
    if hasattr(sys.modules[__name__], command):
        getattr(sys.modules[__name__], command)()
    else:
        print(f"Unknown command: {sys.argv[1]}")
        sys.exit(1)
