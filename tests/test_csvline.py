import io

import pytest

from pluginsdk_tools.csvline import quote_value, read_fields, read_lines


def test_plain_fields_are_trimmed():
    assert read_fields("a, b ,c", 3) == ["a", "b", "c"]


def test_quoted_field_keeps_comma():
    assert read_fields('"x,y",z', 2) == ["x,y", "z"]


def test_doubled_quote_is_literal():
    assert read_fields('"a""b"', 1) == ['a"b']


def test_missing_fields_are_empty():
    fields = read_fields("only", 4)
    assert fields[0] == "only"
    assert fields[1:] == ["", "", ""]


def test_reading_stops_at_line_end():
    assert read_fields("a,b\r\nc", 3) == ["a", "b", ""]


def test_fewer_fields_than_present():
    assert read_fields("a,b,c", 2) == ["a", "b"]


def test_read_lines_skips_header_and_keeps_empty_lines():
    source = io.StringIO("header\n1\n\n2")
    assert read_lines(source) == ["1", "", "2"]


def test_read_lines_of_header_only():
    assert read_lines(io.StringIO("header\n")) == []


def test_quote_value_leaves_plain_value():
    assert quote_value("abc") == "abc"


@pytest.mark.parametrize("value", ["a,b", "CFoo::Bar(int, int)", ",", "x,"])
def test_quote_value_round_trip(value):
    quoted = quote_value(value)
    assert quoted.startswith('"') and quoted.endswith('"')
    assert read_fields(quoted + ",tail", 2) == [value.strip(), "tail"]