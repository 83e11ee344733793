"""Interactive generator of sample CSV data files."""

from __future__ import annotations

import argparse
import random
import re
import sys
from collections.abc import Sequence
from pathlib import Path

CSV_HEADER = "id,nombre,edad,saldo"
DEFAULT_NAME = "data"
MIN_AGE = 18
MAX_AGE = 65
MAX_BALANCE = 10000.0

_INT_PREFIX = re.compile(r"[+-]?\d+")
_INT32_MAX = 2**31 - 1


def desktop_path() -> Path | None:
    """The user's desktop folder on Windows, or None where there is none."""
    if sys.platform != "win32":
        return None
    candidate = Path.home() / "Desktop"
    return candidate if candidate.is_dir() else None


def generate_csv(
    path: str | Path, num_records: int, rng: random.Random | None = None
) -> Path:
    """Write ``num_records`` random rows to ``path`` and return the path."""
    if num_records <= 0:
        raise ValueError("the number of records must be positive")
    rng = rng or random.Random()
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8", newline="") as handle:
        handle.write(CSV_HEADER + "\n")
        for i in range(num_records):
            age = rng.randint(MIN_AGE, MAX_AGE)
            balance = rng.uniform(0.0, MAX_BALANCE)
            handle.write(f"{i},User{i},{age},{balance:g}\n")
    return target


def _read_line() -> str | None:
    line = sys.stdin.readline()
    return line.rstrip("\n") if line else None


def _ask_count() -> int | None:
    while True:
        line = _read_line()
        if line is None:
            return None
        text = line.strip()
        if not text:
            continue
        match = _INT_PREFIX.match(text)
        if match is not None:
            value = int(match.group())
            if 0 < value <= _INT32_MAX:
                return value
        print("Invalid number. Try again: ", end="", flush=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Ask for a directory, a file name and a row count, then write the CSV."""
    argparse.ArgumentParser(
        prog="bonsaidb-generate", description="Generate a sample CSV data file."
    ).parse_args(argv)

    default_dir = desktop_path()
    print("--- Step 1: Choose a directory ---")
    if default_dir is not None:
        print("Press Enter to use the Desktop or enter a directory: ", end="", flush=True)
    else:
        print("Enter the directory where the CSV should be saved: ", end="", flush=True)
    dir_text = _read_line() or ""
    if not dir_text and default_dir is not None:
        directory = default_dir
    else:
        directory = Path(dir_text).absolute()

    print("\n--- Step 2: Name the file ---")
    print(
        f"Enter the CSV file name (no extension, empty for '{DEFAULT_NAME}'): ",
        end="",
        flush=True,
    )
    filename = (_read_line() or "").strip(" \n\r\t") or DEFAULT_NAME
    file_path = directory / f"{filename}.csv"

    print("\n--- Step 3: Number of records ---")
    print("Enter the number of records to create: ", end="", flush=True)
    num_records = _ask_count()
    if num_records is None:
        print("\nNo record count given.", file=sys.stderr)
        return 1

    try:
        generate_csv(file_path, num_records)
    except OSError as exc:
        print(f"Could not write {file_path}: {exc}", file=sys.stderr)
        return 1

    print("\nCSV file generated.")
    print(f"Path: {file_path}")
    print(f"Records: {num_records}")
    return 0