"""Tests for `services/gateway/app/forms.py`."""

import pytest

from services.gateway.app.errors import ParseError
from services.gateway.app.forms import form_to_document, parse_form

FORM = "application/x-www-form-urlencoded"


def test_parse_simple_form():
    assert parse_form(b"name=magnus&age=123", FORM) == {"name": ["magnus"], "age": ["123"]}


def test_parse_decodes_plus_and_percent_escapes():
    assert parse_form(b"msg=hello+world%21", FORM) == {"msg": ["hello world!"]}


def test_parse_keeps_blank_values():
    assert parse_form(b"empty=&flag", FORM) == {"empty": [""], "flag": [""]}


def test_parse_accepts_charset_parameter():
    assert parse_form(b"a=1", f"{FORM}; charset=utf-8") == {"a": ["1"]}


def test_missing_content_type_is_treated_as_form():
    assert parse_form(b"a=1", None) == {"a": ["1"]}


def test_empty_body_gives_empty_form():
    assert parse_form(b"", FORM) == {}


@pytest.mark.parametrize(
    "body",
    [b"a=%zz", b"a=1%", b"a=1;b=2", b"a=%ff", b"\xff\xfe=1"],
)
def test_malformed_bodies_raise_parse_error(body):
    with pytest.raises(ParseError):
        parse_form(body, FORM)


def test_non_form_content_type_raises_parse_error():
    with pytest.raises(ParseError, match="unsupported content type 'application/json'"):
        parse_form(b'{"a": 1}', "application/json")


def test_malformed_query_raises_parse_error():
    with pytest.raises(ParseError):
        parse_form(b"a=1", FORM, query="b=%g0")


def test_field_order_follows_first_appearance():
    form = parse_form(b"z=1&a=2&z=3", FORM, query="m=4&a=5")

    assert list(form) == ["z", "a", "m"]
    assert form == {"z": ["1", "3"], "a": ["2", "5"], "m": ["4"]}


def test_form_to_document_copies_value_lists():
    form = {"tag": ["a", "b"]}

    document = form_to_document(form)
    document["tag"].append("c")

    assert form == {"tag": ["a", "b"]}
