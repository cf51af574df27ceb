# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/03 01:16:53
# @Author : Kariko Lin

from .consts import SectionType
from .errors import (
    SphinxConfError,
    InputNotFound,
    OutputNotWritable,
    ConfigParseError,
    ConfigSyntaxError,
    UnresolvedParent,
    MalformedPair,
    DuplicateSection,
    InvalidArgument
)
from .export import SphinxConfJsonParser, SphinxConfYamlParser
from .lexer import LineReader, LogicalLine
from .model import SectionRecord, SphinxConfig, SphinxSection
from .parser import ConfParser, SphinxConfParser, parse_stream, parse_string
from .writer import dumps
