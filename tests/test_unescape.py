import json

import pytest

from jsonnetkit.unescape import UnescapeError, unescape


def test_plain_text_is_unchanged():
    text = "no escapes here at all"
    assert unescape(text) == text


def test_newline_escape():
    assert unescape("Hello\\nWorld") == "Hello\nWorld"


def test_quote_escapes():
    assert unescape('Hello, \\"world\\"!') == 'Hello, "world"!'
    assert unescape("Hello \\'world\\'!") == "Hello 'world'!"


def test_escaped_backslashes():
    assert unescape("\\\\\\\\") == "\\\\"


def test_unicode_escape():
    assert unescape("\\u0041") == "A"


def test_surrogate_pair():
    assert unescape("\\ud83d\\ude00") == "\U0001f600"


def test_hex_escape():
    assert unescape("\\x0a") == "\n"


@pytest.mark.parametrize(
    "original",
    [
        "tab\tand\rreturn",
        "bell\b and feed\f",
        'quote " and backslash \\',
        "caf\u00e9 \u4e2d\u6587",
        "emoji \U0001f600 and \U0001d11e",
        "",
    ],
)
def test_round_trip_with_json_escapes(original):
    encoded = json.dumps(original, ensure_ascii=True)[1:-1]
    assert unescape(encoded) == original


@pytest.mark.parametrize(
    "bad",
    [
        "\\",
        "abc\\",
        "\\q",
        "\\u12",
        "\\u12g4",
        "\\udc00",
        "\\ud800",
        "\\ud800x",
        "\\ud800\\n",
        "\\ud800\\u0041",
        "\\x4",
        "\\xzz",
    ],
)
def test_malformed_escapes_raise(bad):
    with pytest.raises(UnescapeError):
        unescape(bad)


def test_error_is_value_error():
    with pytest.raises(ValueError):
        unescape("\\z")