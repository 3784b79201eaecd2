"""Tests for the cssquery command line."""

import io

import pytest

from cssquery.__main__ import main

from .conftest import COLLECTION_XML


@pytest.fixture
def xml_path(tmp_path):
    path = tmp_path / "collection.xml"
    path.write_text(COLLECTION_XML)
    return str(path)


def run(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


class TestCli:
    def test_text_output(self, xml_path, capsys):
        main([xml_path, "--selector", "cd title", "--format", "text"])
        assert capsys.readouterr().out == "T1\nT2\n"

    def test_xml_output_first(self, xml_path, capsys):
        main([xml_path, "--selector", "cd.a", "--first"])
        assert capsys.readouterr().out == '<cd class="a">\n  <title>T1</title>\n</cd>\n'

    def test_count(self, xml_path, capsys):
        main([xml_path, "--selector", "title, cd", "--format", "count"])
        assert capsys.readouterr().out == "4\n"

    def test_default_selects_root_element(self, xml_path, capsys):
        main([xml_path, "--format", "count"])
        assert capsys.readouterr().out == "1\n"

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(COLLECTION_XML.encode())))
        main(["-", "--selector", "cd title", "--format", "text", "--first"])
        assert capsys.readouterr().out == "T1\n"

    def test_no_matches_exits_1(self, xml_path):
        assert run([xml_path, "--selector", "artist"]) == 1

    def test_strict_combinators(self, xml_path, capsys):
        assert run([xml_path, "--selector", "collection > title", "--strict-combinators", "--format", "count"]) == 1
        assert capsys.readouterr().out == "0\n"
        main([xml_path, "--selector", "collection > title", "--format", "count"])
        assert capsys.readouterr().out == "2\n"

    def test_bad_selector_exits_2(self, xml_path, capsys):
        assert run([xml_path, "--selector", "["]) == 2
        assert "position 1" in capsys.readouterr().err

    def test_namespace_selector_exits_2(self, xml_path, capsys):
        assert run([xml_path, "--selector", "svg|rect"]) == 2
        assert "Namespace" in capsys.readouterr().err

    def test_bad_xml_exits_2(self, tmp_path):
        path = tmp_path / "bad.xml"
        path.write_text("<a>")
        assert run([str(path), "--selector", "a"]) == 2

    def test_missing_file_exits_2(self, tmp_path):
        assert run([str(tmp_path / "nope.xml"), "--selector", "a"]) == 2

    def test_no_path_prints_help(self, capsys):
        assert run([]) == 1
        assert "usage: cssquery" in capsys.readouterr().err

    def test_declared_encoding_is_honoured(self, tmp_path, capsys):
        path = tmp_path / "latin1.xml"
        path.write_bytes(b'<?xml version="1.0" encoding="ISO-8859-1"?><c><t>caf\xe9</t></c>')
        main([str(path), "--selector", "t", "--format", "text"])
        assert capsys.readouterr().out == "café\n"

    def test_empty_selector_exits_2(self, xml_path, capsys):
        assert run([xml_path, "--selector", ""]) == 2
        assert "Empty selector" in capsys.readouterr().err
