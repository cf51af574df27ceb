# -*- encoding: utf-8 -*-
# @File   : writer.py
# @Time   : 2024/11/03 01:30:22
# @Author : Kariko Lin

from typing import TYPE_CHECKING

from .consts import CLOSE_BLOCK, DEFAULT_INDENT, INHERIT_MARK, OPEN_BLOCK

if TYPE_CHECKING:
    from .model import SphinxConfig, SphinxSection

__all__ = ['dumps']


def _section2str(
    section: 'SphinxSection', preserve: bool, indent: str
) -> str:
    ret = str(section)
    if preserve and section.parent is not None:
        ret += f' {INHERIT_MARK} {section.parent}'
    ret += f' {OPEN_BLOCK}\n'
    for key in sorted(section):
        # still what the parent gives, so leave it to the parent.
        if preserve and section.is_inherited(key):
            continue
        value = section[key]
        for i in value if isinstance(value, list) else [value]:
            ret += f'{indent}{key} = {i}\n'
    return ret + f'{CLOSE_BLOCK}\n'


def dumps(
    config: 'SphinxConfig', comment: str | None = None, *,
    indent: str = DEFAULT_INDENT,
    blank_lines: int = 0
) -> str:
    """Text form of `config`.

    With preserve-inheritance on, children get `: parent` and only the
    keys they override. Otherwise every section is written out in full.

    Args:
        comment: put before everything, literally.
        indent: leading spaces of `key = value` lines.
        blank_lines: how many lines between sections?
    """
    preserve = config.preserve_inheritance()
    buffers = [f'{comment}\n'] if comment else []
    for section in config.sections:
        buffers.append(_section2str(section, preserve, indent))
        buffers.append('\n' * blank_lines)
    return ''.join(buffers)
