"""A small demo application: greetings and factorials."""

from __future__ import annotations

from typing import List, Optional


def greet(name: str) -> None:
    """Print a greeting for ``name``."""
    print(f"Hello, {name}!")


def factorial(n: int) -> int:
    """n! for a non-negative integer; raises ValueError for negative input."""
    if n < 0:
        raise ValueError("factorial is undefined for negative numbers")
    result = 1
    for k in range(2, n + 1):
        result *= k
    return result


def main(argv: Optional[List[str]] = None) -> int:
    print("Welcome to Forge Demo!")
    greet("World")

    numbers = [1, 2, 3, 4, 5]
    print(f"Sum of {numbers} = {sum(numbers)}")

    print("\nThis file is version-controlled by Forge!")
    print("All changes are stored in Cloudflare R2 as compressed blobs.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())