"""Move blocks of Python source between indentation levels.

Lines that continue a multi-line string literal are part of the literal's
value, so they are never shifted.  Every other line is indented or cut by
the requested number of columns.
"""

from __future__ import annotations

import ast


def string_lines(node: ast.AST, *, first_line: int = 1) -> frozenset[int]:
    """Rows inside multi-line string literals of *node*.

    Rows are 1-based and counted from *first_line*, so a block cut out of a
    larger file can be described by the node parsed from that file.  The
    row a literal starts on is not included; only its continuation rows are.
    """
    rows: set[int] = set()
    for child in ast.walk(node):
        if isinstance(child, ast.Constant):
            if not isinstance(child.value, str | bytes):
                continue
        elif not isinstance(child, ast.JoinedStr):
            continue
        end = child.end_lineno
        if end is None or end == child.lineno:
            continue
        rows.update(range(child.lineno - first_line + 2, end - first_line + 2))
    return frozenset(rows)


def shift(text: str, columns: int, *, keep: frozenset[int] = frozenset()) -> str:
    """Indent (*columns* > 0) or dedent (*columns* < 0) every row not in *keep*.

    Dedenting only removes leading blanks, at most ``-columns`` of them, so
    a continuation line that sits further left than the block loses nothing
    but its whitespace.
    """
    shifted: list[str] = []
    for row, line in enumerate(text.split("\n"), start=1):
        if row in keep:
            shifted.append(line)
        elif not line.strip():
            shifted.append("")
        elif columns >= 0:
            shifted.append(" " * columns + line)
        else:
            blanks = len(line) - len(line.lstrip(" \t"))
            shifted.append(line[min(blanks, -columns) :])
    return "\n".join(shifted)


def indent_block(text: str, columns: int) -> str:
    """Indent a block that parses on its own, e.g. a method at column 0.

    Raises:
        SyntaxError: *text* is not valid Python.
    """
    return shift(text, columns, keep=string_lines(ast.parse(text)))
