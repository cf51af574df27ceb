# -*- encoding: utf-8 -*-
# @File   : export.py
# @Time   : 2024/11/04 19:26:51
# @Author : Kariko Lin

"""Structured dumps of a `SphinxConfig`, for tooling that would rather not
parse `sphinx.conf` itself.

Both formats carry the same document:

    ```yaml
    protocol: 1
    preserve_inheritance: true
    sections:
    - type: index
      name: delta
      parent: main
      data: {path: /var/data/delta, morphology: stem_en}
      inherited: {path: false, morphology: true}
    ```
"""

import json
from time import localtime, strftime
from typing import TypedDict

import yaml

from ..abstract import FileHandler
from .errors import InvalidArgument
from .model import SphinxConfig, Value

__all__ = ['SphinxConfJsonParser', 'SphinxConfYamlParser']

PROTOCOL = 1


class _SectionPack(TypedDict):
    type: str
    name: str | None
    parent: str | None
    data: dict[str, Value]
    inherited: dict[str, bool]


class _DocumentPack(TypedDict):
    protocol: int
    preserve_inheritance: bool
    sections: list[_SectionPack]


def _pack(config: SphinxConfig) -> _DocumentPack:
    return _DocumentPack(
        protocol=PROTOCOL,
        preserve_inheritance=config.preserve_inheritance(),
        sections=config.to_records())


def _unpack(src: object) -> SphinxConfig:
    if not isinstance(src, dict) or not isinstance(src.get('sections'), list):
        raise InvalidArgument('not a sphinxconf structured dump')
    if src.get('protocol', PROTOCOL) != PROTOCOL:
        raise InvalidArgument(f'unsupported protocol {src["protocol"]!r}')
    return SphinxConfig.from_records(
        src['sections'],
        preserve_inheritance=src.get('preserve_inheritance', True))


class SphinxConfJsonParser(FileHandler[SphinxConfig]):
    def __init__(self, filename: str, encoding: str = 'utf-8') -> None:
        super().__init__(filename, encoding)

    def read(self) -> SphinxConfig:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            return _unpack(json.load(fp))

    def write(self, instance: SphinxConfig, indent: int = 2) -> None:
        with open(self._fn, 'w', encoding=self._codec) as fp:
            json.dump(_pack(instance), fp, ensure_ascii=False, indent=indent)


class SphinxConfYamlParser(FileHandler[SphinxConfig]):
    def __init__(self, filename: str, encoding: str = 'utf-8') -> None:
        super().__init__(filename, encoding)

    def read(self) -> SphinxConfig:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            return _unpack(yaml.load(fp, yaml.SafeLoader))

    def write(self, instance: SphinxConfig, indent: int = 2) -> None:
        curtime = strftime("%Y-%m-%d %H:%M:%S", localtime())
        with open(self._fn, 'w', encoding=self._codec) as fp:
            fp.write(
                f'# sphinx.conf dump, {len(instance)} sections\n'
                f'# build time: {curtime}\n')
            yaml.safe_dump(
                _pack(instance), fp,
                indent=indent, allow_unicode=True, sort_keys=False)
