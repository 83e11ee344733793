"""Interactive command shell over a database file."""

from __future__ import annotations

import re
import sys
from collections.abc import Sequence
from typing import TextIO

from bonsaidb.engine import DatabaseEngine
from bonsaidb.record import NAME_SIZE, Record

PROMPT = "bonsaidb> "

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

HELP_TEXT = """\
BonsaiDB - available commands:
  insert <id> <name> <age> <balance>   - Insert a new record.
     <id>     : 32-bit integer (e.g. 101)
     <name>   : text without spaces (at most 49 characters, e.g. Juan)
     <age>    : 32-bit integer (e.g. 30)
     <balance>: decimal number (e.g. 1500.75)
  select <id>                          - Look up a record by its ID.
  delete <id>                          - Remove a record's ID from the index.
  dump                                 - Show every record.
  help                                 - Show this help.
  exit                                 - Leave the shell.
"""


def split_line(line: str, delimiter: str) -> list[str]:
    """Split ``line`` on ``delimiter``, keeping inner empty tokens.

    A trailing delimiter does not produce a final empty token, and an
    empty line yields no tokens at all.
    """
    if not line:
        return []
    tokens = line.split(delimiter)
    if line.endswith(delimiter):
        tokens.pop()
    return tokens


def print_help(out: TextIO) -> None:
    """Write the command summary to ``out``."""
    out.write(HELP_TEXT + "\n")


def _parse_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"not an integer: {text!r}")
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def _fit_name(name: str) -> str:
    return name.encode("utf-8")[: NAME_SIZE - 1].decode("utf-8", errors="ignore")


def _fmt(value: float) -> str:
    return f"{value:g}"


def _insert(engine: DatabaseEngine, args: list[str], out: TextIO, err: TextIO) -> None:
    if len(args) != 4:
        err.write("Error: 'insert' takes 4 arguments. See 'help'.\n")
        return
    try:
        record = Record(
            id=_parse_int(args[0]),
            name=_fit_name(args[1]),
            age=_parse_int(args[2]),
            balance=_parse_float(args[3]),
        )
    except ValueError:
        err.write(
            "Error: invalid argument. ID and age must be integers, "
            "balance must be a number.\n"
        )
        return
    try:
        page_id = engine.insert(record)
    except (OSError, ValueError):
        err.write("Error: the record could not be inserted.\n")
        return
    out.write(f"Record data stored in page {page_id}.\n")
    out.write("Record inserted.\n")


def _select(engine: DatabaseEngine, args: list[str], out: TextIO, err: TextIO) -> None:
    if len(args) != 1:
        err.write("Error: 'select' takes an ID. See 'help'.\n")
        return
    try:
        record_id = _parse_int(args[0])
    except ValueError:
        err.write("Error: the ID must be an integer.\n")
        return
    record = engine.find(record_id)
    if record is None:
        out.write(f"Record with ID {record_id} not found.\n")
        return
    out.write(
        "Record found:\n"
        f"  ID     : {record.id}\n"
        f"  Name   : {record.name}\n"
        f"  Age    : {record.age}\n"
        f"  Balance: {_fmt(record.balance)}\n"
    )


def _delete(engine: DatabaseEngine, args: list[str], out: TextIO, err: TextIO) -> None:
    if len(args) != 1:
        err.write("Error: 'delete' takes an ID. See 'help'.\n")
        return
    try:
        record_id = _parse_int(args[0])
    except ValueError:
        err.write("Error: the ID must be an integer.\n")
        return
    if engine.remove(record_id):
        out.write(f"Record with ID {record_id} removed from the index.\n")
    else:
        err.write(f"Error: no record with ID {record_id} in the index.\n")


def _dump(engine: DatabaseEngine, out: TextIO) -> None:
    for record in engine.dump_all():
        out.write(f"{record.id},{record.name},{record.age},{_fmt(record.balance)}\n")


def handle_command(
    engine: DatabaseEngine, tokens: list[str], out: TextIO, err: TextIO
) -> bool:
    """Run one tokenized command; return False when the shell should stop."""
    if not tokens:
        return True
    command, args = tokens[0], tokens[1:]
    if command in ("exit", "quit"):
        return False
    if command == "help":
        print_help(out)
    elif command == "insert":
        _insert(engine, args, out, err)
    elif command == "select":
        _select(engine, args, out, err)
    elif command == "delete":
        _delete(engine, args, out, err)
    elif command == "dump":
        _dump(engine, out)
    else:
        err.write(f"Unknown command: '{command}'. Type 'help' for help.\n")
    return True


def main(argv: Sequence[str] | None = None) -> int:
    """Run the shell on the database file named in ``argv``."""
    args = list(sys.argv[1:] if argv is None else argv)
    out, err = sys.stdout, sys.stderr
    if len(args) != 1:
        err.write("Usage: bonsaidb <file.db>\n")
        return 1

    db_filename = args[0]
    try:
        engine = DatabaseEngine(db_filename)
    except OSError as exc:
        err.write(f"Error: could not open or create database file {db_filename}: {exc}\n")
        return 1

    with engine:
        out.write(
            f"BonsaiDB started. Using file '{db_filename}'.\n"
            "Type 'help' for the list of commands or 'exit' to quit.\n"
        )
        while True:
            out.write(PROMPT)
            out.flush()
            line = sys.stdin.readline()
            if not line:
                break
            tokens = split_line(line.rstrip("\n"), " ")
            if not handle_command(engine, tokens, out, err):
                break
        out.write("Closing BonsaiDB.\n")
    return 0