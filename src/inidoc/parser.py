# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/21 23:20:44
# @Author : Kariko Lin

"""Read INI text into an `IniDocument`, and the file round trip of it.

Parsing is all-or-nothing: the first bad line raises a `ParseError`
(with its 1-based line number) and no document is handed out.
"""

import logging
from io import StringIO
from typing import TextIO

import chardet

from .abstract import FileHandler
from .errors import MalformedLineError, ReservedSectionNameError
from .lines import LineKind, classify
from .model import HEADER, IniDocument

logger = logging.getLogger(__name__)


def readstream(buf: TextIO) -> IniDocument:
    """读取解码好的字符串流。

    Lines before any `[section]` go to the section `""`. A repeated header
    reopens its section, a repeated key overwrites the value in place.
    """
    ret = IniDocument()
    this_sect = HEADER
    for lineno, raw in enumerate(buf, 1):
        if lineno == 1:
            # `str.strip()` keeps a BOM, which Windows editors like to write.
            raw = raw.removeprefix('\ufeff')
        line = classify(raw)
        match line.kind:
            case LineKind.BLANK | LineKind.COMMENT:
                continue
            case LineKind.SECTION:
                if not line.name:
                    raise ReservedSectionNameError(lineno, raw.strip())
                ret.add_section(line.name)
                this_sect = line.name
            case LineKind.KEYVALUE:
                ret.insert(line.key, line.value, this_sect)
            case _:
                raise MalformedLineError(raw.strip(), lineno, line.reason)
    logger.debug('parsed %d section(s)', len(ret))
    return ret


def from_text(text: str) -> IniDocument:
    # only "\n" splits lines, a "\r" left behind is trimmed by `classify()`.
    return readstream(StringIO(text, newline='\n'))


class IniFile(FileHandler[IniDocument]):
    """An INI file on disk. The core never touches files, this does."""
    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        encoding = codec.get('encoding')
        if encoding is None or codec.get('confidence', 0) < 0.8:
            logger.warning(
                'unsure about the encoding of %s (%s), trying utf-8.',
                filename, encoding)
            encoding = 'utf-8'

        # fallbacks
        try:
            buf = raw.decode(encoding)
        except UnicodeDecodeError:
            logger.warning('%s is not %s, falling back to gbk.',
                           filename, encoding)
            buf = raw.decode('gbk')
        return StringIO(buf, newline='\n')

    def read(self) -> IniDocument:
        """读取`IniFile`实例指定的文件。

        May raise `OSError`, or `ParseError` for bad content.
        """
        try:
            # when encoding is None, `open()` would fallback to system default.
            # and when encoding got wrong,
            # just `UnicodeDecodeError` and fallback to `chardet`.
            with open(self._fn, 'r', encoding=self._codec, newline='\n') as fp:
                return readstream(fp)
        except UnicodeDecodeError:
            logger.warning('cannot decode %s as %s, guessing with chardet.',
                           self._fn, self._codec or 'default encoding')
            return readstream(self._decode_file(self._fn))

    def write(
        self, instance: IniDocument, *,
        newline: str = '\n',
        blank_lines: int = 0
    ) -> None:
        """保存到*一个* INI 文件。

        注：注释和原有格式都*不会*保留。
        """
        text = instance.serialize(newline=newline, blank_lines=blank_lines)
        # newline='' keeps `newline` exactly as serialized.
        with open(self._fn, 'w', encoding=self._codec, newline='') as fp:
            fp.write(text)

    def __str__(self) -> str:
        return "INI file: " + super().__str__()
