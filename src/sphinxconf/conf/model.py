# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/11/03 00:12:47
# @Author : Kariko Lin

"""
`sphinx.conf` structure with single-parent inheritance:

    ```
    index main
    {
        path = /var/data/main
    }
    index delta : main
    {
        path = /var/data/delta  # everything else comes from `main`.
    }
    ```

A child starts with a *copy* of its parent's pairs, and every copied key
remembers that it is inherited. Later edits on the parent are bestowed
onto children which never overrode the key.
"""

import logging
from collections.abc import Mapping, MutableMapping, Sequence
from re import compile as regex
from typing import Iterator, NamedTuple
from warnings import warn

from .consts import SECTION_NAME, SectionType
from .errors import InvalidArgument
from .writer import dumps

__all__ = ['Value', 'SectionKey', 'SectionRecord', 'SphinxSection',
           'SphinxConfig']

_log = logging.getLogger(__name__)
_KEY = regex(r'\w+')
_LINE_BREAK = regex(r'[\r\n]')

Value = str | list[str]
SectionKey = tuple[SectionType, str | None]


def _copy_value(value: Value) -> Value:
    # lists must never be shared between sections.
    return list(value) if isinstance(value, list) else value


def _copy_data(data: Mapping[str, Value]) -> dict[str, Value]:
    return {k: _copy_value(v) for k, v in data.items()}


def _check_key(key: object) -> str:
    if not isinstance(key, str) or not _KEY.fullmatch(key):
        raise InvalidArgument(
            f'keys must be word characters only, not {key!r}')
    return key


def _check_value(key: str, value: object) -> Value:
    if isinstance(value, str):
        items = [value]
    elif isinstance(value, Sequence) and value:
        items = list(value)
    else:
        items = [None]
    if all(isinstance(i, str) for i in items):
        if any(_LINE_BREAK.search(i) for i in items):
            raise InvalidArgument(
                f'value of "{key}" cannot span lines: {value!r}')
        return value if isinstance(value, str) else items
    raise InvalidArgument(
        f'value of "{key}" must be a string or a non-empty list of strings, '
        f'not {value!r}')


class SectionRecord(NamedTuple):
    """Read-only snapshot of a section, metadata and data apart."""
    type: SectionType
    name: str | None
    parent: str | None
    children: tuple[str, ...]
    data: dict[str, Value]
    inherited: dict[str, bool]


class SphinxSection(MutableMapping[str, Value]):
    """One `type [name] [: parent] { ... }` block.

    Reading is plain dict access (list values come back as copies).
    Writing goes through the owning `SphinxConfig`, so children get
    their inherited values updated as well.
    """

    def __init__(
        self, owner: 'SphinxConfig',
        stype: SectionType, name: str | None = None
    ) -> None:
        self._owner = owner
        self._type = stype
        self._name = name
        self._parent: str | None = None
        self._data: dict[str, Value] = {}
        self._inherited: dict[str, bool] = {}

    @property
    def type(self) -> SectionType:
        return self._type

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def parent(self) -> str | None:
        return self._parent

    @property
    def identity(self) -> SectionKey:
        return self._type, self._name

    @property
    def children(self) -> list['SphinxSection']:
        return self._owner._children_of(self)

    @property
    def inherited(self) -> dict[str, bool]:
        return self._inherited.copy()

    def is_inherited(self, key: str) -> bool:
        """Whether the value of `key` is still exactly the parent's one."""
        return self._inherited.get(key, False)

    def __getitem__(self, key: str) -> Value:
        return _copy_value(self._data[key])

    def __setitem__(self, key: str, value: Value) -> None:
        key = _check_key(key)
        self._owner._set_value(self, key, _check_value(key, value))

    def __delitem__(self, key: str) -> None:
        if key not in self._data:
            raise KeyError(key)
        self._owner._set_value(self, key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __str__(self) -> str:
        if self._name is None:
            return str(self._type)
        return f'{self._type} {self._name}'

    def __repr__(self) -> str:
        return '%s { .parent = %r, .cnt = %d }' % (
            self, self._parent, len(self._data))

    def to_dict(self) -> dict[str, Value]:
        return _copy_data(self._data)

    # parser side. no propagation happens here, children come later.
    def _inherit_from(self, parent: 'SphinxSection') -> None:
        self._parent = parent.name
        self._data = _copy_data(parent._data)
        self._inherited = dict.fromkeys(self._data, True)

    def _declare(self, key: str, value: str) -> None:
        """Parse-time insertion.

        A key declared again in the same block piles up into a list,
        while the first local declaration of an inherited key replaces it.
        """
        if key in self._data and not self._inherited.get(key, False):
            current = self._data[key]
            if not isinstance(current, list):
                current = self._data[key] = [current]
            current.append(value)
        else:
            self._data[key] = value
            self._inherited[key] = False


class SphinxConfig(MutableMapping[SectionKey, SphinxSection]):
    """A whole `sphinx.conf`: ordered sections plus an identity index.

    Sections are addressed by `(type, name)`, or just by type for the
    nameless ones:

        ```python
        conf['index', 'main']['path'] = '/data/main'
        conf['searchd']['listen'] = '9312'
        ```

    `self.get()` / `self.set()` offer the same in call form, but note
    that `get()` is not `Mapping.get`: it takes `(type, name, key)` and
    hands back copies of the data, never the section. A tuple key such
    as `conf.get(('index', 'main'))` is no section type, so it gives
    `None`; use `conf['index', 'main']` for the section itself.
    """

    def __init__(self, *, preserve_inheritance: bool = True) -> None:
        self.__sections: list[SphinxSection] = []
        self.__index: dict[SectionKey, SphinxSection] = {}
        self.__preserve = preserve_inheritance

    # ---- identities

    @staticmethod
    def _identity(
        stype: SectionType | str, name: str | None = None, *,
        strict: bool = True
    ) -> SectionKey | None:
        """Normalize `(type, name)`.

        With `strict=False`, identities which could never exist
        give `None` instead of raising.
        """
        try:
            stype = SectionType(stype)
        except ValueError:
            if not strict:
                return None
            raise InvalidArgument(f'unknown section type {stype!r}') from None
        if name is not None and not isinstance(name, str):
            if not strict:
                return None
            raise InvalidArgument(f'section name must be str, not {name!r}')
        name = name or None
        if name is not None and not SECTION_NAME.fullmatch(name):
            if not strict:
                return None
            raise InvalidArgument(
                f'section name must be one token without {{}}:#, got {name!r}')
        if stype.named != (name is not None):
            if not strict:
                return None
            raise InvalidArgument(
                f'"{stype}" sections must have a name'
                if stype.named else
                f'"{stype}" sections take no name, got {name!r}')
        return stype, name

    @classmethod
    def _key_of(cls, key: object, strict: bool = True) -> SectionKey | None:
        if isinstance(key, tuple) and len(key) == 2:
            return cls._identity(*key, strict=strict)
        if isinstance(key, (str, SectionType)):
            return cls._identity(key, strict=strict)
        if not strict:
            return None
        raise InvalidArgument(f'bad section key {key!r}')

    def __lookup(
        self, stype: SectionType | str, name: str | None
    ) -> SphinxSection | None:
        ident = self._identity(stype, name, strict=False)
        return None if ident is None else self.__index.get(ident)

    # ---- structure, for parser and loaders

    @property
    def sections(self) -> tuple[SphinxSection, ...]:
        return tuple(self.__sections)

    def _append(self, section: SphinxSection) -> SphinxSection:
        if section.identity in self.__index:
            raise InvalidArgument(f'section "{section}" already exists')
        self.__sections.append(section)
        self.__index[section.identity] = section
        return section

    def _new_section(self, ident: SectionKey) -> SphinxSection:
        return self._append(SphinxSection(self, *ident))

    def __ensure(self, ident: SectionKey) -> SphinxSection:
        section = self.__index.get(ident)
        return self._new_section(ident) if section is None else section

    def _children_of(self, section: SphinxSection) -> list[SphinxSection]:
        if section.name is None:
            return []
        return [
            i for i in self.__sections
            if i is not section
            and i.type is section.type
            and i.parent == section.name
        ]

    # ---- propagation

    def preserve_inheritance(self, flag: bool | None = None) -> bool:
        """Get (and with `flag`, set) the preserve-inheritance mode.

        When on, edits on a parent reach children which never
        overrode the key, and `as_string()` writes minimal blocks with
        `: parent`. When off, children are detached key by key as their
        parent gets edited, and output is fully flattened.
        """
        if flag is not None:
            self.__preserve = bool(flag)
        return self.__preserve

    @staticmethod
    def __assign(section: SphinxSection, key: str, value: Value | None):
        if value is None:
            section._data.pop(key, None)
        else:
            section._data[key] = _copy_value(value)

    def _set_value(
        self, section: SphinxSection, key: str, value: Value | None
    ) -> None:
        """Set (or with `None`, delete) one key, then bestow it."""
        self.__assign(section, key, value)
        section._inherited[key] = False
        self.__bestow(section, key, value)

    def __bestow(
        self, section: SphinxSection, key: str, value: Value | None
    ) -> None:
        for child in self._children_of(section):
            if not self.__preserve:
                # one-way latch, turning the mode on again won't undo it.
                child._inherited[key] = False
                continue
            if not child.is_inherited(key):
                continue
            self.__assign(child, key, value)
            child._inherited[key] = True
            # grandchildren follow their own parent, which just changed.
            self.__bestow(child, key, value)

    def _replace(
        self, section: SphinxSection, pairs: Mapping[str, Value]
    ) -> None:
        for key in sorted(section._data.keys() - pairs.keys()):
            self._set_value(section, key, None)
        for key, value in pairs.items():
            self._set_value(section, key, value)

    # ---- public editing api

    def get(
        self, stype: SectionType | str, name: str | None = None,
        key: str | None = None
    ) -> Value | dict[str, Value] | None:
        """Value of `key`, or all pairs of the section when `key` is omitted.

        `None` means not found; an empty value is `''`.
        """
        section = self.__lookup(stype, name)
        if section is None:
            return None
        if key is None:
            return section.to_dict()
        value = section._data.get(key)
        return None if value is None else _copy_value(value)

    def section_record(
        self, stype: SectionType | str, name: str | None = None
    ) -> SectionRecord | None:
        section = self.__lookup(stype, name)
        if section is None:
            return None
        return SectionRecord(
            type=section.type,
            name=section.name,
            parent=section.parent,
            children=tuple(i.name for i in section.children),
            data=section.to_dict(),
            inherited=section.inherited)

    def set(
        self, stype: SectionType | str, name: str | None = None,
        key: str | Mapping[str, Value] | None = None,
        value: Value | None = None
    ) -> dict[str, Value] | None:
        """Edit a section, creating (appending) it when missing.

        - `set(type, name, key, value)`: set one key.
        - `set(type, name, key)`: delete that key.
        - `set(type, name, {k: v, ...})`: replace all pairs.
        - `set(type, name)`: delete the whole section.

        Returns the pairs of the section after editing
        (`None` if the section was deleted).
        Nothing changes when `InvalidArgument` is raised.
        """
        ident = self._identity(stype, name)
        if key is None:
            if value is not None:
                raise InvalidArgument('a value was given without a key')
            self.delete_section(*ident)
            return None
        if isinstance(key, Mapping):
            if value is not None:
                raise InvalidArgument(
                    'a value cannot be given together with a mapping')
            pairs = {
                k: _check_value(k, v)
                for k, v in ((_check_key(k), v) for k, v in key.items())
            }
            section = self.__ensure(ident)
            self._replace(section, pairs)
        elif isinstance(key, str):
            key = _check_key(key)
            if value is not None:
                value = _check_value(key, value)
            section = self.__ensure(ident)
            self._set_value(section, key, value)
        else:
            raise InvalidArgument(
                f'must provide a key or a mapping, not {type(key).__name__}')
        return section.to_dict()

    def delete_section(
        self, stype: SectionType | str, name: str | None = None
    ) -> bool:
        """Remove a section. Returns `False` if there was nothing to remove.

        Children of the removed section lose their parent and keep
        their current values as own ones.
        """
        section = self.__lookup(stype, name)
        if section is None:
            return False
        orphans = self._children_of(section)
        del self.__index[section.identity]
        self.__sections = [i for i in self.__sections if i is not section]
        for child in orphans:
            child._parent = None
            child._inherited = dict.fromkeys(child._inherited, False)
        if orphans:
            warn(
                f'Section "{section}" was inherited by '
                f'{", ".join(str(i) for i in orphans)}; '
                'they now hold all their values on their own.')
        _log.debug('section "%s" deleted', section)
        return True

    def as_string(self, comment: str | None = None, **kwargs) -> str:
        """Serialize, see `writer.dumps()` for keywords.

        `comment` is inserted literally, so each line should begin
        with '#'.
        """
        return dumps(self, comment, **kwargs)

    def to_records(self) -> list[dict]:
        """All sections as plain dicts, in document order."""
        return [
            {
                'type': i.type.value,
                'name': i.name,
                'parent': i.parent,
                'data': i.to_dict(),
                'inherited': i.inherited,
            }
            for i in self.__sections
        ]

    @classmethod
    def from_records(
        cls, records: Sequence[Mapping], *, preserve_inheritance: bool = True
    ) -> 'SphinxConfig':
        """Rebuild a document from `to_records()` output.

        Parents have to precede their children, like in the text form.
        """
        ret = cls(preserve_inheritance=preserve_inheritance)
        for rec in records:
            ident = cls._identity(rec.get('type', ''), rec.get('name'))
            if ident in ret.__index:
                raise InvalidArgument(f'duplicate section {ident}')
            section = SphinxSection(ret, *ident)
            if (parent := rec.get('parent')) is not None:
                if ret.__lookup(ident[0], parent) is None:
                    raise InvalidArgument(
                        f'base section "{ident[0]} {parent}" '
                        'does not precede its child')
                section._parent = parent
            for k, v in (rec.get('data') or {}).items():
                section._data[_check_key(k)] = _check_value(k, v)
            section._inherited = {
                str(k): bool(v)
                for k, v in (rec.get('inherited') or {}).items()
            }
            ret._append(section)
        return ret

    # ---- mapping protocol

    def __getitem__(self, key: SectionKey | SectionType | str) -> SphinxSection:
        ident = self._key_of(key, strict=False)
        if ident is None or ident not in self.__index:
            raise KeyError(key)
        return self.__index[ident]

    def __setitem__(
        self, key: SectionKey | SectionType | str,
        value: Mapping[str, Value]
    ) -> None:
        if not isinstance(value, Mapping):
            raise InvalidArgument(
                f'sections are set from mappings, not {type(value).__name__}')
        self.set(*self._key_of(key), value)

    def __delitem__(self, key: SectionKey | SectionType | str) -> None:
        ident = self._key_of(key, strict=False)
        if ident is None or not self.delete_section(*ident):
            raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        ident = self._key_of(key, strict=False)
        return ident is not None and ident in self.__index

    def __iter__(self) -> Iterator[SectionKey]:
        return iter([i.identity for i in self.__sections])

    def __len__(self) -> int:
        return len(self.__sections)

    def __str__(self) -> str:
        return self.as_string()
