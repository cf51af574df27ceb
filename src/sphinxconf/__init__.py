# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/03 02:01:52
# @Author : Kariko Lin

import logging

from .conf import (
    SectionType, SectionRecord, SphinxConfig, SphinxSection,
    SphinxConfParser, SphinxConfJsonParser, SphinxConfYamlParser,
    parse_stream, parse_string, dumps,
    SphinxConfError, InputNotFound, OutputNotWritable,
    ConfigParseError, ConfigSyntaxError, UnresolvedParent,
    MalformedPair, DuplicateSection, InvalidArgument
)

__all__ = [
    'SectionType', 'SectionRecord', 'SphinxConfig', 'SphinxSection',
    'SphinxConfParser', 'SphinxConfJsonParser', 'SphinxConfYamlParser',
    'parse_stream', 'parse_string', 'dumps',
    'SphinxConfError', 'InputNotFound', 'OutputNotWritable',
    'ConfigParseError', 'ConfigSyntaxError', 'UnresolvedParent',
    'MalformedPair', 'DuplicateSection', 'InvalidArgument'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
