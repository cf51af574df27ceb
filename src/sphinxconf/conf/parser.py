# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/11/03 01:04:45
# @Author : Kariko Lin

"""Reading goes in two states.

Outside of any block, input is split by whitespace and walked token by
token: section type, name (only `source`/`index`), optional `: parent`,
then `{`. Inside a block, what remains of the line is matched as a whole
against `}`, `key = value` or blank.

    ```
    source base { type = mysql }
    source delta : base
    {
        sql_query = SELECT id, title \\
            FROM documents WHERE id > 1000
        sql_attr_uint = group_id
        sql_attr_uint = date_added   # repeated keys pile up into a list
    }
    searchd { listen = 9312 }
    ```
"""

import logging
from collections import deque
from enum import Enum, auto
from io import StringIO, TextIOBase
from os import PathLike
from os.path import isfile
from re import compile as regex

import chardet

from ..abstract import FileHandler
from .consts import (
    CLOSE_BLOCK, DEFAULT_INDENT, INHERIT_MARK, OPEN_BLOCK, SECTION_NAME,
    SectionType
)
from .errors import (
    ConfigParseError, ConfigSyntaxError, DuplicateSection, InputNotFound,
    MalformedPair, OutputNotWritable, UnresolvedParent
)
from .lexer import LineReader, LogicalLine
from .model import SphinxConfig, SphinxSection
from .writer import dumps

__all__ = ['ConfParser', 'parse_stream', 'parse_string', 'SphinxConfParser']

_log = logging.getLogger(__name__)

_CLOSE = regex(r'\s*\}')
# a `}` after whitespace ends the block on the same line: `{ path = /a }`
_PAIR = regex(r'\s*(\w+)\s*=\s*(.*?)\s*(?:(?<![^\s=])(\}.*))?$')


class _Seq(Enum):
    SECTION = auto()
    NAME = auto()
    OPEN_OR_INHERIT = auto()
    INHERIT = auto()
    OPEN = auto()


class ConfParser:
    """Feed it logical lines, then `finish()` for the document.

    Any error aborts the whole thing; a half-read document is never
    handed out.
    """

    def __init__(self, filename: str = '<stream>') -> None:
        self._fn = filename
        self._config = SphinxConfig()
        self._inner = False
        self._seq = _Seq.SECTION
        self._current: SphinxSection | None = None
        self._stype: SectionType | None = None
        self._line = LogicalLine(0, '')

    def _fail(
        self, exc: type[ConfigParseError], message: str
    ) -> ConfigParseError:
        return exc(message, self._fn, self._line.lineno, self._line.text)

    def feed(self, line: LogicalLine) -> None:
        self._line = line
        rest = line.text
        while rest.strip():
            rest = self._read_inner(rest) if self._inner \
                else self._read_outer(rest)

    def finish(self, lineno: int | None = None) -> SphinxConfig:
        if lineno is not None:
            self._line = LogicalLine(lineno, '')
        if self._inner:
            raise self._fail(
                ConfigSyntaxError,
                f'unexpected end of input, "{self._current}" is not closed')
        if self._seq is not _Seq.SECTION:
            raise self._fail(
                ConfigSyntaxError,
                f"unexpected end of input, expected '{OPEN_BLOCK}'")
        return self._config

    # ---- outer state

    def _start(self, stype: SectionType, name: str | None = None) -> None:
        if (stype, name) in self._config:
            what = stype.value if name is None else f'{stype} {name}'
            raise self._fail(
                DuplicateSection, f'section "{what}" is already declared')
        self._current = self._config._new_section((stype, name))

    def _inherit(self, parent: str) -> None:
        base = None
        for i in reversed(self._config.sections[:-1]):
            if i.type is self._current.type and i.name == parent:
                base = i
                break
        if base is None:
            raise self._fail(
                UnresolvedParent, f"Base section '{parent}' does not exist")
        self._current._inherit_from(base)

    def _read_outer(self, text: str) -> str:
        tokens = deque(text.split())
        while tokens:
            tok = tokens.popleft()
            match self._seq:
                case _Seq.SECTION:
                    try:
                        stype = SectionType(tok)
                    except ValueError:
                        raise self._fail(
                            ConfigSyntaxError,
                            f"Expected section type, got '{tok}'"
                        ) from None
                    self._stype = stype
                    if stype.named:
                        self._seq = _Seq.NAME
                    else:
                        self._start(stype)
                        self._seq = _Seq.OPEN
                case _Seq.NAME:
                    if not SECTION_NAME.fullmatch(tok):
                        raise self._fail(
                            ConfigSyntaxError,
                            f"Expected section name, got '{tok}'")
                    self._start(self._stype, tok)
                    self._seq = _Seq.OPEN_OR_INHERIT
                case _Seq.OPEN_OR_INHERIT:
                    if tok == INHERIT_MARK:
                        self._seq = _Seq.INHERIT
                    else:
                        tokens.appendleft(tok)
                        self._seq = _Seq.OPEN
                case _Seq.INHERIT:
                    self._inherit(tok)
                    self._seq = _Seq.OPEN
                case _Seq.OPEN:
                    if tok != OPEN_BLOCK:
                        raise self._fail(
                            ConfigSyntaxError,
                            f"expected '{OPEN_BLOCK}', got '{tok}'")
                    self._seq = _Seq.SECTION
                    self._inner = True
                    # leftovers belong to the block
                    return ' '.join(tokens)
        return ''

    # ---- inner state

    def _read_inner(self, text: str) -> str:
        if m := _CLOSE.match(text):
            self._inner = False
            self._current = None
            return text[m.end():]
        if m := _PAIR.match(text):
            key, value, rest = m.groups()
            self._current._declare(key, value)
            return rest or ''
        if not text.strip():
            return ''
        raise self._fail(
            MalformedPair,
            'expected name=value pair or end of section, '
            f"got '{text.strip()}'")


def parse_stream(
    buf: TextIOBase | str, filename: str = '<stream>'
) -> SphinxConfig:
    """Read a whole decoded stream (or string) into a `SphinxConfig`."""
    reader = LineReader(buf, filename)
    parser = ConfParser(filename)
    for line in reader:
        parser.feed(line)
    config = parser.finish(reader.lineno)
    _log.debug('%s: %d sections read', filename, len(config))
    return config


def parse_string(text: str, filename: str = '<string>') -> SphinxConfig:
    return parse_stream(text, filename)


class SphinxConfParser(FileHandler[SphinxConfig]):
    def __init__(
        self, filename: str | PathLike[str], encoding: str | None = None
    ) -> None:
        super().__init__(filename, encoding)

    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        if codec['encoding'] is None or codec['confidence'] < 0.8:
            codec = {'encoding': 'utf-8'}
        _log.warning('%s: retry decoding as %s', filename, codec['encoding'])

        # fallbacks
        try:
            buf = raw.decode(codec['encoding'])
        except (UnicodeDecodeError, LookupError):
            buf = raw.decode('latin-1')
        return StringIO(buf, newline=None)

    def read(self) -> SphinxConfig:
        """Parse the file given to this handler.

        Raises `InputNotFound` if there is no such file,
        or a `ConfigParseError` subclass on malformed content.
        """
        if not isfile(self._fn):
            raise InputNotFound(f'{self._fn} does not exist')
        try:
            # encoding None falls back to system default,
            # and if that goes wrong, ask `chardet`.
            with open(self._fn, 'r', encoding=self._codec) as fp:
                return parse_stream(fp, self._fn)
        except UnicodeDecodeError:
            return parse_stream(self._decode_file(self._fn), self._fn)

    def write(
        self, instance: SphinxConfig, comment: str | None = None, *,
        indent: str = DEFAULT_INDENT,
        blank_lines: int = 0
    ) -> None:
        """Save (overwrite) the file with `instance.as_string(comment)`."""
        text = dumps(
            instance, comment, indent=indent, blank_lines=blank_lines)
        try:
            with open(self._fn, 'w', encoding=self._codec) as fp:
                fp.write(text)
        except OSError as e:
            raise OutputNotWritable(
                f'cannot open {self._fn} for writing: {e}') from e

    def __str__(self) -> str:
        return 'sphinx.conf: ' + super().__str__() + f'({self._codec})'
