# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/11/02 21:40:12
# @Author : Kariko Lin

from enum import Enum
from re import compile as regex


class SectionType(str, Enum):
    SOURCE = 'source'
    INDEX = 'index'
    INDEXER = 'indexer'
    SEARCHD = 'searchd'
    SEARCH = 'search'  # pre-0.9.9 name of searchd, still accepted.

    @property
    def named(self) -> bool:
        """`source` and `index` must carry a name, the others never do."""
        return self in (SectionType.SOURCE, SectionType.INDEX)

    def __str__(self) -> str:
        return self.value


INHERIT_MARK = ':'
OPEN_BLOCK = '{'
CLOSE_BLOCK = '}'
COMMENT_MARK = '#'
# one bare token, nothing the block syntax would trip over.
SECTION_NAME = regex(r'[^\s{}:#]+')

# sphinx.conf samples shipped by upstream use 8 spaces.
DEFAULT_INDENT = ' ' * 8
