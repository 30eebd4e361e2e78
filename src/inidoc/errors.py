# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2024/10/21 22:37:05
# @Author : Kariko Lin

"""Exceptions raised while parsing or writing INI documents.

Absent keys or sections are *not* errors, those just come back as `None`.
"""


class IniError(Exception):
    """Base of every `inidoc` failure.

    `lineno` is 1-based and only set when the error comes from parsing.
    """
    def __init__(
        self, message: str,
        lineno: int | None = None, line: str | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.lineno = lineno
        self.line = line


class ParseError(IniError):
    pass


class MalformedLineError(ParseError):
    """Neither a comment, a `[section]` header nor a `key = value` pair."""
    def __init__(self, line: str, lineno: int, reason: str = '') -> None:
        msg = f'bad k/v pair `{line}` on line {lineno}'
        if reason:
            msg += f' ({reason})'
        super().__init__(msg, lineno, line)
        self.reason = reason


class ReservedSectionNameError(ParseError):
    """The empty string names the leading section, and is never declared."""
    def __init__(self, lineno: int | None = None, line: str | None = None):
        if lineno is None:
            msg = 'section with empty string as name cannot be created'
        else:
            msg = f'section with empty string as name on line {lineno}'
        super().__init__(msg, lineno, line)


class UnrepresentableError(IniError, ValueError):
    """Raised by `IniDocument.serialize()` for entries that won't parse back."""
    def __init__(self, section: str, key: str | None, reason: str) -> None:
        where = f'[{section}]' if key is None else f'[{section}] {key!r}'
        super().__init__(f'{where}: {reason}')
        self.section = section
        self.key = key
        self.reason = reason
