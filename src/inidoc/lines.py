# -*- encoding: utf-8 -*-
# @File   : lines.py
# @Time   : 2024/10/21 22:51:40
# @Author : Kariko Lin

"""Single line classification, the leaf of the parser.

    ```ini
    key = val      ; KEYVALUE, this very comment included in the value
    # comment      ; COMMENT (and so does a leading `;`)
    [section]      ; SECTION
                   ; BLANK
    anything else  ; INVALID
    ```
"""

from enum import Enum
from typing import NamedTuple

COMMENT_MARKS = ('#', ';')


class LineKind(Enum):
    BLANK = 'blank'
    COMMENT = 'comment'
    SECTION = 'section'
    KEYVALUE = 'keyvalue'
    INVALID = 'invalid'


class Line(NamedTuple):
    kind: LineKind
    name: str = ''  # section name, SECTION only
    key: str = ''
    value: str = ''
    reason: str = ''  # INVALID only


def classify(line: str) -> Line:
    """Tell what a single line (without its terminator) is.

    Whitespace around the line, the key and the value is insignificant,
    while whitespace inside the value is kept as is.
    """
    stripped = line.strip()
    if not stripped:
        return Line(LineKind.BLANK)
    if stripped.startswith(COMMENT_MARKS):
        return Line(LineKind.COMMENT)

    if stripped[0] == '[' and stripped[-1] == ']':
        # empty names pass here, the driver knows they are reserved.
        return Line(LineKind.SECTION, name=stripped[1:-1].strip())

    # `[a] = b` is no header but a pair keyed `[a]`.
    if '=' not in stripped:
        reason = ('unbalanced brackets' if stripped[0] == '['
                  else 'missing "="')
        return Line(LineKind.INVALID, reason=reason)
    key, value = stripped.split('=', 1)
    key = key.strip()
    if not key:
        return Line(LineKind.INVALID, reason='empty key')
    return Line(LineKind.KEYVALUE, key=key, value=value.strip())
