import pytest

from discdb_api.errors import ParseError
from discdb_api.jsonl import append_line, dump_line, iter_lenient, parse_strict


def test_parse_strict_skips_blank_lines():
    text = '\n{"a": 1}\n   \n{"a": 2}\r\n'
    assert parse_strict(text) == [{"a": 1}, {"a": 2}]


def test_parse_strict_rejects_non_objects():
    with pytest.raises(ParseError, match="line 1"):
        parse_strict("[1]\n")


def test_iter_lenient_skips_bad_lines(caplog):
    text = '{"a": 1}\nnope\n"str"\n{"a": 2}\n'
    assert list(iter_lenient(text)) == [{"a": 1}, {"a": 2}]
    assert "line 2" in caplog.text


def test_dump_line_is_compact_and_utf8():
    assert dump_line({"title": "Amélie", "year": None}) == '{"title":"Amélie","year":null}'


def test_append_line_trims_existing_whitespace():
    assert append_line('{"a":1}\n\n', {"a": 2}) == '{"a":1}\n{"a":2}\n'
    assert append_line("", {"a": 1}) == '{"a":1}\n'
