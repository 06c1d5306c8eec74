"""
Utility functions for mapping templates ($util.*).

Provides the string and encoding helpers API Gateway exposes to templates.
None of these raise on bad input: a failed decode or parse hands back the
original value so the template always renders something.
"""

import base64
import binascii
import json
import re
from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote_plus, unquote_plus


def compact_json(value: Any) -> str:
    """
    Serialize a value as compact JSON.

    Key insertion order is kept and non-ASCII text is written as-is, which is
    how the gateway's own serializer behaves.

    Examples:
        {"a": 1, "b": [1, 2]} -> '{"a":1,"b":[1,2]}'
        "Grüße" -> '"Grüße"'
    """
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def is_structured(value: Any) -> bool:
    """True for JSON objects and arrays."""
    return isinstance(value, (Mapping, list, tuple))


def to_text(value: Any) -> str:
    """
    Return the natural text form of a value.

    Objects and arrays become compact JSON, booleans are lowercase and
    None becomes the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_structured(value):
        return compact_json(value)
    return str(value)


# Escapes applied in order; backslash must stay first so the backslashes
# inserted by later steps are not escaped again.
_JS_ESCAPES = (
    ("\\", "\\\\"),
    ("'", "\\'"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)

# A '%' that does not start a two-digit hex escape
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class UtilFunctions:
    """Implements the $util namespace."""

    @staticmethod
    def escapeJavaScript(value: Any) -> str:
        """
        Escape a value for embedding in a JavaScript or JSON string literal.

        Objects and arrays are serialized to compact JSON before escaping.

        Examples:
            It's "ok" -> It\\'s \\"ok\\"
            {"a": "b"} -> {\\"a\\":\\"b\\"}
        """
        text = to_text(value)
        for target, replacement in _JS_ESCAPES:
            text = text.replace(target, replacement)
        return text

    @staticmethod
    def base64Encode(value: Any) -> str:
        """Base64-encode the UTF-8 bytes of a value's text form."""
        text = to_text(value)
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    @staticmethod
    def base64Decode(value: Any) -> str:
        """
        Decode Base64 text to a UTF-8 string, returning the input unchanged on failure.

        Trailing '=' padding is optional.
        """
        text = to_text(value)
        padded = text + "=" * (-len(text) % 4)
        try:
            return base64.b64decode(padded, validate=True).decode("utf-8")
        except (binascii.Error, ValueError):
            return text

    @staticmethod
    def urlEncode(value: Any) -> str:
        """
        Form-encode a value (space becomes '+').

        Leaves only A-Z, a-z, 0-9 and '.', '-', '*', '_' unescaped.
        """
        return quote_plus(to_text(value), safe="*").replace("~", "%7E")

    @staticmethod
    def urlDecode(value: Any) -> str:
        """Decode form-encoded text, returning the input unchanged on failure."""
        text = to_text(value)
        if _BAD_PERCENT_ESCAPE.search(text):
            return text
        try:
            return unquote_plus(text, errors="strict")
        except UnicodeDecodeError:
            return text

    @staticmethod
    def parseJson(value: Any) -> Optional[Any]:
        """
        Parse JSON text into a native value.

        Blank or null input yields None; text that does not parse is
        returned as it was given.
        """
        if value is None:
            return None
        if not isinstance(value, str):
            return value
        if not value.strip():
            return None
        try:
            return json.loads(value)
        except ValueError:
            return value
