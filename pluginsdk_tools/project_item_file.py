"""Line-based editing of Visual Studio project item files."""

from __future__ import annotations

from pathlib import Path


def _starts_with_ci(line: str, prefix: str) -> bool:
    """True if the trimmed line starts with ``prefix``, ignoring case."""
    return line.strip()[: len(prefix)].lower() == prefix.lower()


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


class ProjectItemFile:
    """A text file held as a list of lines, edited node by node."""

    def __init__(self, lines: list[str] | None = None) -> None:
        self.lines: list[str] = list(lines) if lines else []

    def read(self, path: str | Path) -> None:
        """Append the lines of ``path``; raises OSError if it cannot be read."""
        with open(path, encoding="utf-8", newline=None) as stream:
            self.lines.extend(line.rstrip("\n") for line in stream)

    def write(self, path: str | Path) -> None:
        """Write the lines joined by newlines, with no newline after the last."""
        with open(path, "w", encoding="utf-8", newline="") as stream:
            stream.write("\n".join(self.lines))

    def line(self, index: int) -> str:
        """Return the line at ``index``, or an empty string when out of range."""
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return ""

    def set_line(self, index: int, value: str) -> None:
        """Replace the line at ``index``; raises IndexError when out of range."""
        if not 0 <= index < len(self.lines):
            raise IndexError(f"line index {index} out of range")
        self.lines[index] = value

    def set_lines_value(self, old_value: str, new_value: str) -> None:
        """Replace every line whose trimmed text starts with ``old_value``."""
        self.lines = [
            new_value if _starts_with_ci(line, old_value) else line for line in self.lines
        ]

    def count_nodes(self, node_name: str) -> int:
        """Count the lines that open the node ``node_name``."""
        tag = f"<{node_name}>"
        return sum(1 for line in self.lines if _starts_with_ci(line, tag))

    def set_nodes_value(
        self,
        node_name: str,
        value: str,
        search: str | None = None,
        contains: bool = True,
    ) -> None:
        """Set the text of every ``node_name`` node, keeping the indentation.

        With ``search`` given, only lines whose containing ``search`` (ignoring
        case) equals ``contains`` are changed.
        """
        tag = f"<{node_name}>"
        replacement = f"{tag}{value}</{node_name}>"
        for number, line in enumerate(self.lines):
            if not _starts_with_ci(line, tag):
                continue
            if search is not None and (search.lower() in line.lower()) != contains:
                continue
            self.lines[number] = " " * _indent_width(line) + replacement