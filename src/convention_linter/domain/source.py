"""Offset bookkeeping between astroid positions and character ranges."""

import bisect
import re
from typing import Optional

import astroid

from convention_linter.domain.entities import Location, Span

_DEF_NAME = re.compile(r"(?:async\s+)?def\s+([A-Za-z_]\w*)")
_CLASS_NAME = re.compile(r"class\s+([A-Za-z_]\w*)")
# The tokenizer ends lines only here; str.splitlines also breaks on \f, \v and \x1c-\x1e.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class SourceIndex:
    """Maps (line, byte column) pairs to character offsets and back for one file."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._starts: list[int] = [0]
        self._starts.extend(match.end() for match in _LINE_BREAK.finditer(text))
        if len(self._starts) > 1 and self._starts[-1] == len(text):
            self._starts.pop()
        ends = self._starts[1:] + [len(text)]
        self._lines = [text[start:end] for start, end in zip(self._starts, ends)]

    def offset(self, lineno: int, col_offset: int) -> int:
        """Character offset for astroid's 1-based line and UTF-8 byte column."""
        index = min(max(lineno - 1, 0), len(self._lines) - 1)
        line = self._lines[index]
        prefix = line.encode("utf-8")[:col_offset].decode("utf-8", errors="ignore")
        return self._starts[index] + len(prefix)

    def location(self, span: Span) -> Location:
        line, column = self._line_col(span.start)
        end_line, end_column = self._line_col(span.end)
        return Location(line=line, column=column, end_line=end_line, end_column=end_column)

    def _line_col(self, offset: int) -> tuple[int, int]:
        index = max(bisect.bisect_right(self._starts, offset) - 1, 0)
        return index + 1, offset - self._starts[index]

    def node_span(self, node: astroid.nodes.NodeNG) -> Span:
        """Full range of a node. Falls back to the first line of its parent when unpositioned."""
        current: Optional[astroid.nodes.NodeNG] = node
        while current is not None and getattr(current, "lineno", None) is None:
            current = current.parent
        if current is None:
            return Span(0, 0)
        start = self.offset(current.lineno, current.col_offset or 0)
        end_lineno = getattr(current, "end_lineno", None)
        end_col = getattr(current, "end_col_offset", None)
        if end_lineno is None or end_col is None:
            return Span(start, start)
        return Span(start, max(start, self.offset(end_lineno, end_col)))

    def name_span(self, node: astroid.nodes.NodeNG) -> Span:
        """
        Range of the identifier a node declares or references.

        ``Name``/``AssignName``/``DelName`` start at their own position (an
        annotated parameter's range would otherwise include the annotation).
        ``def`` and ``class`` names are located after the keyword.
        """
        if isinstance(node, (astroid.nodes.FunctionDef, astroid.nodes.ClassDef)):
            pattern = _CLASS_NAME if isinstance(node, astroid.nodes.ClassDef) else _DEF_NAME
            # A decorated def's lineno is its first decorator's line.
            position = getattr(node, "position", None)
            if position is not None:
                start = self.offset(position.lineno, position.col_offset)
            else:
                start = self.offset(node.lineno, node.col_offset or 0)
            match = pattern.search(self.text, start)
            if match and match.group(1) == node.name:
                return Span(match.start(1), match.end(1))
            return self.node_span(node)
        name = getattr(node, "name", None)
        if isinstance(name, str) and getattr(node, "lineno", None) is not None:
            start = self.offset(node.lineno, node.col_offset or 0)
            if self.text.startswith(name, start):
                return Span(start, start + len(name))
        return self.node_span(node)

    def slice(self, span: Span) -> str:
        return self.text[span.start:span.end]
