"""Doxygen-style comments for generated C++ declarations."""

from __future__ import annotations

INDENT_UNIT = "    "


def indentation(level: int) -> str:
    """Return the leading whitespace for an indentation level."""
    return INDENT_UNIT * level


def format_comment(comment: str, indent: int, pos: int) -> str:
    """Format a comment whose lines are separated by ``;;``.

    With ``pos`` equal to 0 the comment stands on its own lines at the given
    indentation level; otherwise it trails a declaration that is ``pos``
    characters long.  A trailing comment's last line gets no line ending.
    """
    if not comment:
        return ""
    parts = comment.split(";;")
    out: list[str] = []
    last_index = len(parts) - 1
    for number, line in enumerate(parts):
        first = number == 0
        last = number == last_index
        if pos == 0:
            out.append(indentation(indent))
            out.append("//!")
        else:
            if not first:
                out.append(" " * pos)
            out.append(" ")
            if first:
                out.append("//!<" if last else "/**<")
            else:
                out.append("    ")
        out.append(" " + line)
        if pos == 0:
            out.append("\n")
        elif last:
            if not first:
                out.append("*/")
        else:
            out.append("\\n\n")
    return "".join(out)