"""Character reference (entity) decoding and encoding.

Thin helpers over the standard library ``html`` module:

- decode_entity: one reference body (``amp``, ``#123``, ``#x7B``) to text
- decode_light: best-effort decoding of every reference in a string
- encode_light: hexadecimal references for a chosen subset of characters

Decoding never raises. Unknown or malformed references are left as written.

"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable
from html.entities import html5

# A reference as it may appear in a directive attribute or label
REFERENCE = re.compile(r"&(#(?:\d{1,7}|x[\da-f]{1,6})|[\da-z]{1,31});", re.IGNORECASE)


def decode_entity(name: str) -> str | None:
    """Decode the body of one character reference.

    Args:
        name: Reference body without ``&`` and ``;`` (``"amp"``, ``"#58"``,
            ``"#x3A"``)

    Returns:
        The decoded text, or None when ``name`` is not a known reference.

    Example:
        >>> decode_entity("amp"), decode_entity("#x3A"), decode_entity("nope")
        ('&', ':', None)

    """
    if not name:
        return None
    if name[0] == "#":
        digits = name[1:]
        if digits[:1] in ("x", "X"):
            valid = 1 < len(digits) <= 7 and all(c in "0123456789abcdefABCDEF" for c in digits[1:])
        else:
            valid = 0 < len(digits) <= 7 and digits.isascii() and digits.isdigit()
        # html.unescape applies the HTML replacement rules (NUL, surrogates,
        # out-of-range and the windows-1252 remaps).
        return html.unescape(f"&{name};") if valid else None
    return html5.get(f"{name};")


def _decode_match(match: re.Match[str]) -> str:
    decoded = decode_entity(match.group(1))
    return match.group(0) if decoded is None else decoded


def decode_light(value: str) -> str:
    """Decode every recognizable character reference in ``value``.

    Example:
        >>> decode_light("a&amp;b&#xA;c &bogus; &")
        'a&b\\nc &bogus; &'

    """
    if "&" not in value:
        return value
    return REFERENCE.sub(_decode_match, value)


def has_reference(value: str) -> bool:
    """Whether decoding ``value`` would change it."""
    return decode_light(value) != value


def encode_light(value: str, subset: Iterable[str]) -> str:
    """Replace characters in ``subset`` with hexadecimal character references.

    Example:
        >>> encode_light('say "hi"\\n', ['"', "\\n"])
        'say &#x22;hi&#x22;&#xA;'

    """
    characters = "".join(dict.fromkeys(subset))
    if not characters:
        return value
    expression = re.compile(f"[{re.escape(characters)}]")
    return expression.sub(lambda match: f"&#x{ord(match.group(0)):X};", value)


__all__ = ["REFERENCE", "decode_entity", "decode_light", "encode_light", "has_reference"]
