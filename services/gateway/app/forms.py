"""URL-encoded form parsing for the write endpoint.

The body is decoded strictly: anything a browser or `curl -d` would not send is
a `ParseError` rather than a silently mangled document.
"""

from urllib.parse import parse_qsl
import re

from .errors import ParseError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _pairs(raw: str) -> list[tuple[str, str]]:
    if ";" in raw:
        raise ParseError("invalid semicolon separator in query")

    bad = _BAD_ESCAPE.search(raw)
    if bad:
        raise ParseError(f"invalid URL escape {raw[bad.start():bad.start() + 3]!r}")

    try:
        return parse_qsl(raw, keep_blank_values=True, errors="strict")
    except UnicodeDecodeError as exc:
        raise ParseError(f"invalid UTF-8 in form value: {exc}") from exc


def parse_form(body: bytes, content_type: str | None = None, query: str = "") -> dict[str, list[str]]:
    """Parse a form body plus the URL query string.

    Body values come first, then query values, each field keeping every value
    in the order it appeared. A missing content type is read as a form.

    Args:
        body: Raw request body.
        content_type: The request's Content-Type header, if any.
        query: The raw URL query string.

    Returns:
        dict: Field name -> list of values, in first-seen field order.

    Raises:
        ParseError: On a non-form content type, invalid UTF-8, a bad percent
            escape or a `;` separator.
    """
    media_type = (content_type or FORM_CONTENT_TYPE).split(";", 1)[0].strip().lower()
    if media_type != FORM_CONTENT_TYPE:
        raise ParseError(f"unsupported content type {media_type!r}")

    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"invalid UTF-8 in form body: {exc}") from exc

    form: dict[str, list[str]] = {}
    for source in (text, query):
        for key, value in _pairs(source):
            form.setdefault(key, []).append(value)
    return form


def form_to_document(form: dict[str, list[str]]) -> dict[str, list[str]]:
    """Build a document storing each field's values as an array."""
    return {name: list(values) for name, values in form.items()}
