"""Reading and writing the simple CSV lines used by the SDK database files."""

from __future__ import annotations

from typing import Iterable


def _read_field(line: str, start: int) -> tuple[str, int]:
    """Read one field beginning at ``start``; return it and the next index."""
    chars: list[str] = []
    started_quotes = False
    in_quotes = False
    index = start
    length = len(line)
    while index < length:
        c = line[index]
        if c in "\r\n":
            index = length
            break
        if not started_quotes:
            if c == '"':
                started_quotes = True
            elif not in_quotes and c == ",":
                index += 1
                break
            else:
                chars.append(c)
        else:
            if c != '"':
                in_quotes = not in_quotes
                if not in_quotes and c == ",":
                    index += 1
                    break
            started_quotes = False
            chars.append(c)
        index += 1
    return "".join(chars).strip(), index


def read_fields(line: str, count: int) -> list[str]:
    """Read ``count`` trimmed fields from a CSV line; missing fields are empty."""
    fields = []
    index = 0
    for _ in range(count):
        value, index = _read_field(line, index)
        fields.append(value)
    return fields


def read_lines(file: Iterable[str]) -> list[str]:
    """Return every line of ``file`` after the header, without line endings.

    Comments are not supported and empty lines are kept.
    """
    lines = iter(file)
    next(lines, None)
    return [line[:-1] if line.endswith("\n") else line for line in lines]


def quote_value(value: str) -> str:
    """Quote ``value`` when it holds a comma."""
    if "," in value:
        return f'"{value}"'
    return value