# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/10/21 23:05:18
# @Author : Kariko Lin

"""
Basically INI structure: ordered sections of ordered, string-only pairs.

The leading pairs (before any `[section]`) live in a section named `""`,
which always exists and is never declared explicitly.
As for reading text, just see `inidoc.parser`.
"""

import logging
from collections.abc import Iterator, Mapping, MutableMapping
from warnings import warn

from .errors import ReservedSectionNameError, UnrepresentableError

logger = logging.getLogger(__name__)

HEADER = ''
_COMMENT_MARKS = ('#', ';')
NEWLINES = ('\n', '\r\n')


class IniSection(MutableMapping[str, str]):
    """INI 小节字典。

    Keys are case sensitive and unique. Overwriting a key keeps its position,
    new keys are appended.
    """
    def __init__(
        self, section_name: str, /,
        pairs: Mapping[str, str] | None = None
    ) -> None:
        self._name = section_name
        self.__raw: dict[str, str] = {}
        if pairs:
            self.update(pairs)

    @property
    def name(self) -> str:
        return self._name

    def __getitem__(self, key: str) -> str:
        return self.__raw[key]

    def __setitem__(self, key: str, value: str) -> None:
        self.__raw[key] = value

    def __delitem__(self, key: str) -> None:
        del self.__raw[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__raw

    def __len__(self) -> int:
        return len(self.__raw)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__raw)

    def __eq__(self, other: object) -> bool:
        # order matters, unlike plain Mapping equality.
        if isinstance(other, IniSection):
            return list(self.items()) == list(other.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return f"[{self._name}]"

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._name, len(self.__raw))

    def find_key(self, key: str) -> str | None:
        """Case-insensitive key lookup, returns the key as actually stored."""
        folded = key.casefold()
        for i in self.__raw:
            if i.casefold() == folded:
                return i
        return None


class IniDocument:
    """INI 文件表示。支持以下形式的 INI 小节和键值对：

        ```ini
        ; use self.header, or section "", for pairs up here.
        key = val
        [section]
        key233 = val666
        ; a second header reopens the section above.
        [section]
        key = val114514
        ```

    Comments are dropped, and `self.serialize()` writes canonical text only.
    """
    def __init__(self) -> None:
        self.__raw: dict[str, IniSection] = {HEADER: IniSection(HEADER)}

    @classmethod
    def empty(cls) -> 'IniDocument':
        """A document with only the (empty) leading section."""
        return cls()

    @classmethod
    def from_text(cls, text: str) -> 'IniDocument':
        """Parse `text`, see `inidoc.parser.from_text()`.

        Raises a `ParseError` on the first offending line,
        no document is built in that case.
        """
        from .parser import from_text
        return from_text(text)

    @property
    def header(self) -> IniSection:
        """位于文件头部的，不属于任何小节的游离键值对。"""
        return self.__raw[HEADER]

    # container protocol, over section names.
    def __getitem__(self, section: str) -> IniSection:
        return self.__raw[section]

    def __setitem__(self, section: str, pairs: Mapping[str, str]) -> None:
        # shouldn't keep ptr to external dict in section setting operation.
        self.__raw[section] = IniSection(section, pairs)

    def __delitem__(self, section: str) -> None:
        if section == HEADER:
            raise ReservedSectionNameError()
        del self.__raw[section]

    def __contains__(self, section: object) -> bool:
        return section in self.__raw

    def __len__(self) -> int:
        return len(self.__raw)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IniDocument):
            return NotImplemented
        return list(self.__raw.items()) == list(other.__raw.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'<IniDocument sections={self.sections()!r}>'

    def _matching_sections(
        self, section: str, case_sensitive: bool
    ) -> Iterator[IniSection]:
        if case_sensitive:
            if section in self.__raw:
                yield self.__raw[section]
            return
        folded = section.casefold()
        for name, sect in self.__raw.items():
            if name.casefold() == folded:
                yield sect

    def _locate(
        self, key: str, section: str, case_sensitive: bool
    ) -> tuple[IniSection, str] | None:
        """Find the section holding `key`, and the key as actually stored."""
        for sect in self._matching_sections(section, case_sensitive):
            stored = key if case_sensitive else sect.find_key(key)
            if stored is not None and stored in sect:
                return sect, stored
        return None

    def add_section(self, section: str) -> IniSection:
        """Declare `section`, or return it if already present.

        The leading section `""` always exists and cannot be declared,
        so it raises `ReservedSectionNameError`.
        """
        if section == HEADER:
            raise ReservedSectionNameError()
        if section not in self.__raw:
            self.__raw[section] = IniSection(section)
        else:
            logger.debug('section [%s] reopened', section)
        return self.__raw[section]

    def get_section(
        self, section: str, *, case_sensitive: bool = True
    ) -> IniSection | None:
        return next(self._matching_sections(section, case_sensitive), None)

    def remove_section(
        self, section: str, *, case_sensitive: bool = True
    ) -> IniSection | None:
        """Remove a whole section. Returns it, if it existed."""
        if section == HEADER:
            raise ReservedSectionNameError()
        sect = next(self._matching_sections(section, case_sensitive), None)
        if sect is None or sect.name == HEADER:
            return None
        return self.__raw.pop(sect.name)

    def get(
        self, key: str, section: str = HEADER, *,
        case_sensitive: bool = True
    ) -> str | None:
        """With `case_sensitive=False`, every section matching the name is
        searched in document order, and the first holding the key wins.
        """
        if (found := self._locate(key, section, case_sensitive)) is None:
            return None
        sect, key = found
        return sect[key]

    def insert(self, key: str, value: str, section: str = HEADER) -> str | None:
        """Insert a pair into `section`, creating the section if needed.

        Returns the old value if the key existed. An existing key keeps its
        position, a new one is appended.
        """
        for what, i in (('section', section), ('key', key), ('value', value)):
            if i != i.strip():
                warn(
                    f'{what} {i!r} has surrounding whitespace, '
                    'which parsing would never produce.')
        sect = self.__raw.get(section)
        if sect is None:
            sect = self.add_section(section)
        old = sect.get(key)
        if old is not None:
            logger.debug('[%s] %s overwritten: %r -> %r',
                         section, key, old, value)
        sect[key] = value
        return old

    def remove(
        self, key: str, section: str = HEADER, *,
        case_sensitive: bool = True
    ) -> str | None:
        """Remove a pair. Returns the value, if it existed.

        The section is kept even if it ends up empty.
        """
        if (found := self._locate(key, section, case_sensitive)) is None:
            return None
        sect, key = found
        return sect.pop(key)

    def sections(self) -> list[str]:
        return list(self.__raw)

    def keys(self, section: str = HEADER) -> list[str] | None:
        if (sect := self.__raw.get(section)) is None:
            return None
        return list(sect)

    def is_empty(self) -> bool:
        """A document that contains sections but no keys is considered empty."""
        return not any(self.__raw.values())

    def serialize(
        self, *,
        newline: str = '\n',
        pairing: str = ' = ',
        blank_lines: int = 0
    ) -> str:
        """Turn the document back into text.

        Pairs of `""` come first without a header, then every other section
        in order. Nothing is quoted or escaped: the first `=` splits a line,
        so values may hold `=`, `#`, `;` or brackets as they are. Anything
        that could not parse back the same raises `UnrepresentableError`.
        """
        if pairing.count('=') != 1 or pairing.replace('=', '').strip():
            raise ValueError(f'bad pairing {pairing!r}')
        if newline not in NEWLINES:
            raise ValueError(f'bad newline {newline!r}')

        lines: list[str] = []
        for name, sect in self.__raw.items():
            if name != HEADER:
                _check_section(name)
                if lines and blank_lines:
                    lines.extend([''] * blank_lines)
                lines.append(f'[{name}]')
            for k, v in sect.items():
                _check_entry(name, k, v)
                lines.append(f'{k}{pairing}{v}')
        return ''.join(i + newline for i in lines)


def _has_linebreak(s: str) -> bool:
    return '\n' in s or '\r' in s


def _check_section(name: str) -> None:
    if name != name.strip():
        raise UnrepresentableError(name, None, 'surrounding whitespace')
    if _has_linebreak(name):
        raise UnrepresentableError(name, None, 'line break in name')


def _check_entry(section: str, key: str, value: str) -> None:
    if not isinstance(key, str) or not isinstance(value, str):
        raise UnrepresentableError(section, str(key), 'not a string pair')
    if not key.strip():
        raise UnrepresentableError(section, key, 'empty key')
    if key != key.strip() or value != value.strip():
        raise UnrepresentableError(section, key, 'surrounding whitespace')
    if '=' in key:
        raise UnrepresentableError(section, key, '"=" in key')
    if key.startswith(_COMMENT_MARKS):
        raise UnrepresentableError(section, key, 'key reads as a comment')
    # `[k = v]` would come back as a header.
    if key.startswith('[') and value.endswith(']'):
        raise UnrepresentableError(section, key, 'pair reads as a header')
    if _has_linebreak(key) or _has_linebreak(value):
        raise UnrepresentableError(section, key, 'line break')
