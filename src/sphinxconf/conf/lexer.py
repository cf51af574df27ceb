# -*- encoding: utf-8 -*-
# @File   : lexer.py
# @Time   : 2024/11/02 22:10:05
# @Author : Kariko Lin

"""Physical lines in, logical lines out.

`sphinx.conf` knows two lexical tricks only:

    sql_query = SELECT id, title \\
        FROM documents  # comments go to end of line

a `#` (and the whitespace before it) starts a comment, and a trailing
backslash glues the next physical line on, collapsing into one space.
"""

from io import StringIO, TextIOBase
from re import compile as regex
from typing import Iterator, NamedTuple

__all__ = ['LogicalLine', 'LineReader']

_COMMENT = regex(r'\s*#.*')
_CONTINUATION = regex(r'\\\s*$')


class LogicalLine(NamedTuple):
    lineno: int  # where the logical line starts, 1-based
    text: str

    @property
    def tokens(self) -> list[str]:
        return self.text.split()

    @property
    def blank(self) -> bool:
        return not self.text.strip()


class LineReader:
    """Iterates logical lines of a decoded text stream.

    A continuation still pending at end of input is not an error,
    the backslash is collapsed and the line handed out as it is.
    """

    def __init__(
        self, buf: TextIOBase | str, filename: str = '<stream>'
    ) -> None:
        if isinstance(buf, str):
            buf = StringIO(buf, newline=None)
        self._buf = buf
        self.filename = filename
        self.lineno = 0  # physical lines consumed so far

    def _next_physical(self) -> str | None:
        raw = self._buf.readline()
        if not raw:
            return None
        self.lineno += 1
        return _COMMENT.sub('', raw.rstrip('\r\n'), count=1)

    def __iter__(self) -> Iterator[LogicalLine]:
        while (line := self._next_physical()) is not None:
            start = self.lineno
            while _CONTINUATION.search(line):
                line = _CONTINUATION.sub(' ', line, count=1)
                if (following := self._next_physical()) is None:
                    break
                line += following
            yield LogicalLine(start, line)
