#!/usr/bin/env python3
"""Fail when a module in the sign_addon package grows past the line limit."""

import os
import sys
from pathlib import Path

MAX_LINES = int(os.getenv("SIGN_ADDON_MAX_FILE_LINES", "250"))
PACKAGE_DIR = Path(__file__).resolve().parent.parent / "src" / "sign_addon"


def count_lines(path: Path) -> int:
    with open(path, encoding="utf-8") as f:
        return sum(1 for _ in f)


def oversized_modules(package_dir: Path = PACKAGE_DIR, limit: int = MAX_LINES) -> list[str]:
    found = []
    for module in sorted(package_dir.rglob("*.py")):
        if "__pycache__" in module.parts:
            continue
        lines = count_lines(module)
        if lines > limit:
            found.append(f"{module.relative_to(package_dir.parent)}: {lines} lines (max {limit})")
    return found


def main() -> int:
    if not PACKAGE_DIR.exists():
        print(f"Package directory not found: {PACKAGE_DIR}")
        return 1

    errors = oversized_modules()
    if errors:
        print("Modules exceeding maximum line count:")
        for err in errors:
            print(f"  {err}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
