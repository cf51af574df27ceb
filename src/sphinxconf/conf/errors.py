# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2024/11/02 21:52:40
# @Author : Kariko Lin


class SphinxConfError(Exception):
    """Base of everything raised by this package."""
    pass


class InputNotFound(SphinxConfError, FileNotFoundError):
    """The configuration file to read does not exist."""
    pass


class OutputNotWritable(SphinxConfError, OSError):
    """The destination could not be opened for writing."""
    pass


class ConfigParseError(SphinxConfError):
    """Raised when reading `sphinx.conf` text fails.

    Carries the file name and the 1-based line number of the logical line
    being parsed, so that `str(e)` reads like a compiler diagnostic.
    """

    def __init__(
        self, message: str, filename: str, lineno: int,
        text: str | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.filename = filename
        self.lineno = lineno
        self.text = text

    def __str__(self) -> str:
        return f'{self.filename}:{self.lineno}: {self.message}'


class ConfigSyntaxError(ConfigParseError):
    """Unexpected token where a section type, name or `{` was expected."""
    pass


class UnresolvedParent(ConfigParseError):
    """`: parent` names a section which does not precede the current one."""
    pass


class MalformedPair(ConfigParseError):
    """A line inside a section is neither `key = value`, `}` nor blank."""
    pass


class DuplicateSection(ConfigParseError):
    """The same section (type and name) is declared twice."""
    pass


class InvalidArgument(SphinxConfError, TypeError):
    """Bad arguments given to an editing call. Never a parse error."""
    pass
