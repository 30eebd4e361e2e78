"""Tests for the parser driver and the file handler."""

import logging
from io import StringIO

import pytest

from inidoc import (
    IniDocument,
    IniFile,
    MalformedLineError,
    ParseError,
    ReservedSectionNameError,
    from_text,
    readstream,
)

SAMPLE = """foo = bar
# comment
; comment
baz=bop
[section1]
foo = baz"""


class TestFromText:
    def test_sample(self):
        doc = from_text(SAMPLE)
        assert doc.get("foo", "") == "bar"
        assert doc.get("baz", "") == "bop"
        assert doc.get("scrunkle", "") is None
        assert doc.get("foo", "section1") == "baz"
        assert doc.sections() == ["", "section1"]

    def test_classmethod_delegates(self):
        assert IniDocument.from_text(SAMPLE) == from_text(SAMPLE)

    def test_empty_text(self):
        doc = from_text("")
        assert doc.sections() == [""]
        assert doc.is_empty()
        assert doc == IniDocument.empty()

    def test_only_comments_and_blanks(self):
        doc = from_text("\n# one\n\n   ; two\n\n")
        assert doc == IniDocument.empty()

    def test_header_section_exists_without_pairs(self):
        doc = from_text("[a]\nx = 1")
        assert doc.sections() == ["", "a"]
        assert doc.keys("") == []

    def test_reopened_section_appends(self):
        doc = from_text("[a]\nx=1\n[a]\ny=2")
        assert doc.sections() == ["", "a"]
        assert doc.keys("a") == ["x", "y"]

    def test_reopen_and_overwrite_are_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="inidoc.model"):
            from_text("[a]\nx=1\n[a]\nx=2")
        assert "section [a] reopened" in caplog.text
        assert "[a] x overwritten: '1' -> '2'" in caplog.text

    def test_reopened_section_keeps_position(self):
        doc = from_text("[a]\nx=1\n[b]\ny=2\n[a]\nz=3")
        assert doc.sections() == ["", "a", "b"]
        assert doc.keys("a") == ["x", "z"]

    def test_header_pairs_only_before_first_section(self):
        doc = from_text("a = 1\n[s]\nb = 2")
        assert doc.keys("") == ["a"]
        assert doc.keys("s") == ["b"]

    def test_duplicate_key_overwrites_in_place(self):
        doc = from_text("x=1\ny=2\nx=3")
        assert doc.keys("") == ["x", "y"]
        assert doc.get("x", "") == "3"

    def test_crlf_same_as_lf(self):
        assert from_text(SAMPLE.replace("\n", "\r\n")) == from_text(SAMPLE)

    def test_trailing_newline(self):
        assert from_text(SAMPLE + "\n") == from_text(SAMPLE)

    def test_values_keep_special_characters(self):
        doc = from_text("k = a=b # c ; d [e]")
        assert doc.get("k") == "a=b # c ; d [e]"

    def test_bracketed_key(self):
        doc = from_text("[s]\n[a] = b")
        assert doc.sections() == ["", "s"]
        assert doc.get("[a]", "s") == "b"

    def test_leading_bom(self):
        assert from_text("\ufeff[s]\nk = v") == from_text("[s]\nk = v")

    def test_case_sensitive(self):
        doc = from_text("Key = 1\nkey = 2\n[S]\n[s]")
        assert doc.keys("") == ["Key", "key"]
        assert doc.sections() == ["", "S", "s"]

    def test_readstream(self):
        assert readstream(StringIO(SAMPLE)) == from_text(SAMPLE)


class TestParseErrors:
    def test_malformed_line(self):
        with pytest.raises(MalformedLineError) as err:
            from_text("this is not valid")
        assert err.value.lineno == 1
        assert err.value.line == "this is not valid"
        assert str(err.value).startswith(
            "bad k/v pair `this is not valid` on line 1")

    def test_malformed_line_number(self):
        with pytest.raises(MalformedLineError) as err:
            from_text("a = 1\n\n# fine\n[s]\nbeans\nb = 2")
        assert err.value.lineno == 5
        assert err.value.line == "beans"

    def test_empty_key(self):
        with pytest.raises(MalformedLineError) as err:
            from_text("a = 1\n = 2")
        assert err.value.lineno == 2
        assert err.value.reason == "empty key"

    def test_unbalanced_header(self):
        with pytest.raises(MalformedLineError) as err:
            from_text("[section")
        assert err.value.reason == "unbalanced brackets"

    @pytest.mark.parametrize("header", ["[]", "[   ]"])
    def test_empty_section_name_is_reserved(self, header):
        with pytest.raises(ReservedSectionNameError) as err:
            from_text(f"a = 1\n[s]\n{header}\nb = 2")
        assert err.value.lineno == 3
        assert str(err.value) == "section with empty string as name on line 3"

    def test_errors_share_a_base(self):
        for text in ("beans", "[]"):
            with pytest.raises(ParseError):
                from_text(text)

    def test_first_error_wins(self):
        with pytest.raises(ReservedSectionNameError):
            from_text("[]\nbeans")


class TestIniFile:
    def test_write_then_read(self, tmp_path):
        path = tmp_path / "settings.ini"
        doc = from_text(SAMPLE)
        ini = IniFile(path, encoding="utf-8")
        ini.write(doc)
        assert path.read_text(encoding="utf-8") == (
            "foo = bar\nbaz = bop\n[section1]\nfoo = baz\n")
        assert ini.read() == doc

    def test_write_crlf(self, tmp_path):
        path = tmp_path / "crlf.ini"
        ini = IniFile(path, encoding="utf-8")
        ini.write(from_text(SAMPLE), newline="\r\n", blank_lines=1)
        assert path.read_bytes() == (
            b"foo = bar\r\nbaz = bop\r\n\r\n[section1]\r\nfoo = baz\r\n")
        assert ini.read() == from_text(SAMPLE)

    def test_unicode_content(self, tmp_path):
        path = tmp_path / "zh.ini"
        path.write_text("[小节]\n键 = 值\n", encoding="utf-8")
        doc = IniFile(path, encoding="utf-8").read()
        assert doc.get("键", "小节") == "值"

    def test_parse_error_from_file(self, tmp_path):
        path = tmp_path / "bad.ini"
        path.write_text("a = 1\nbeans\n", encoding="utf-8")
        with pytest.raises(MalformedLineError) as err:
            IniFile(path, encoding="utf-8").read()
        assert err.value.lineno == 2

    def test_utf8_bom(self, tmp_path):
        path = tmp_path / "bom.ini"
        path.write_bytes("[s]\nk = v\n".encode("utf-8-sig"))
        doc = IniFile(path, encoding="utf-8").read()
        assert doc.sections() == ["", "s"]
        assert doc.get("k", "s") == "v"

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            IniFile(tmp_path / "nope.ini").read()

    def test_guessed_encoding(self, tmp_path, monkeypatch):
        path = tmp_path / "gbk.ini"
        path.write_bytes("[小节]\n键 = 值\n".encode("gbk"))
        monkeypatch.setattr(
            "inidoc.parser.chardet.detect",
            lambda raw: {"encoding": "gbk", "confidence": 0.99})
        doc = IniFile(path, encoding="utf-8").read()
        assert doc.get("键", "小节") == "值"

    def test_gbk_fallback(self, tmp_path, monkeypatch, caplog):
        path = tmp_path / "gbk.ini"
        path.write_bytes("[小节]\n键 = 值\n".encode("gbk"))
        monkeypatch.setattr(
            "inidoc.parser.chardet.detect",
            lambda raw: {"encoding": None, "confidence": 0.0})
        with caplog.at_level(logging.WARNING, logger="inidoc.parser"):
            doc = IniFile(path, encoding="utf-8").read()
        assert doc.get("键", "小节") == "值"
        assert "falling back to gbk" in caplog.text

    def test_str(self, tmp_path):
        ini = IniFile(tmp_path / "a.ini", encoding="utf-8")
        assert str(ini).startswith("INI file: ")
        assert str(ini).endswith("a.ini (utf-8)")
        assert ini.filename == str(tmp_path / "a.ini")
