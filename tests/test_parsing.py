"""Tests for range response parsing."""

import pytest

from pwnguard.pwned import MalformedResponseError, parse_range_response


def test_format_api_response():
    body = "abcd1234abcd1234abcd1234abcd1234:11\nefgh5678efgh5678efgh5678efgh5678:9"
    assert parse_range_response(body) == {
        "abcd1234abcd1234abcd1234abcd1234": 11,
        "efgh5678efgh5678efgh5678efgh5678": 9,
    }


@pytest.mark.parametrize("body", ["", "   ", "\r\n\n", b""])
def test_empty_body_is_empty_table(body):
    assert parse_range_response(body) == {}


def test_crlf_and_surrounding_whitespace():
    body = "\r\n  AAA:1\r\nBBB : 2 \r\n\r\nCCC:3\r\n"
    assert parse_range_response(body) == {"AAA": 1, "BBB": 2, "CCC": 3}


def test_bytes_body_decoded():
    assert parse_range_response(b"AAA:5\nBBB:0") == {"AAA": 5, "BBB": 0}


def test_invalid_utf8_is_malformed():
    with pytest.raises(MalformedResponseError):
        parse_range_response(b"AAA:1\n\xff\xfe:2")


def test_repeated_selector_keeps_last_count():
    assert parse_range_response("AAA:1\nAAA:7") == {"AAA": 7}


@pytest.mark.parametrize("line", [
    "ABC",
    "ABC:x",
    "ABC:-1",
    "ABC:+1",
    "ABC:1.5",
    "A:B:C",
    ":5",
    "ABC:",
    "ABC:²",
])
def test_malformed_line_aborts_parse(line):
    body = f"AAA:1\n{line}\nBBB:2"
    with pytest.raises(MalformedResponseError) as exc:
        parse_range_response(body)
    assert exc.value.line_number == 2
    assert exc.value.line == line.strip()
