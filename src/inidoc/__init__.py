# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/21 22:30:11
# @Author : Kariko Lin

from .errors import (
    IniError,
    ParseError,
    MalformedLineError,
    ReservedSectionNameError,
    UnrepresentableError
)
from .lines import Line, LineKind, classify
from .model import IniSection, IniDocument
from .parser import IniFile, from_text, readstream

__all__ = [
    'IniError', 'ParseError', 'MalformedLineError',
    'ReservedSectionNameError', 'UnrepresentableError',
    'Line', 'LineKind', 'classify',
    'IniSection', 'IniDocument',
    'IniFile', 'from_text', 'readstream'
]
