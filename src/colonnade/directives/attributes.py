"""Directive attribute lists: folding parsed pairs and encoding mappings.

Reading produces an ordered list of ``(key, value)`` pairs, one per
``#id``, ``.class``, ``key`` or ``key=value`` entry; fold_attributes turns
it into the final mapping. Writing goes the other way with the shortest
faithful spelling: ``#id`` and ``.class`` shortcuts where the value allows,
quoted ``key="value"`` otherwise.

Example:
    >>> fold_attributes([("class", "a"), ("id", "x"), ("class", "b")])
    {'class': 'a b', 'id': 'x'}
    >>> encode_attributes({"id": "x", "class": "a b", "key": "v"})
    '{#x .a.b key="v"}'

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from colonnade.entities import encode_light, has_reference

# Values that can be written as #value or .value
SHORTCUT = re.compile(r"[^\t\n\r \"#'.<=>`}]+")

_CLASS_SEPARATOR = re.compile(r"[\t\n\r ]+")

type AttributePairs = list[tuple[str, str]]


def fold_attributes(pairs: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Flatten pairs into a mapping.

    Later keys overwrite earlier ones, except ``class``: a class value is
    appended (space separated) to a non-empty existing class.
    """
    attributes: dict[str, str] = {}
    for key, value in pairs:
        if key == "class" and attributes.get("class"):
            attributes["class"] += " " + value
        else:
            attributes[key] = value
    return attributes


def is_shortcut(value: str) -> bool:
    """Whether ``value`` reads back unchanged from a ``#``/``.`` shortcut."""
    return SHORTCUT.fullmatch(value) is not None and not has_reference(value)


def _quoted(key: str, value: str, quote: str) -> str:
    if not value:
        return key
    subset = [quote, "\n", "\r"]
    if has_reference(value):
        subset.append("&")
    return f"{key}={quote}{encode_light(value, subset)}{quote}"


def encode_attributes(attributes: Mapping[str, str | None] | None, quote: str = '"') -> str:
    """Encode ``attributes`` as ``{...}``, or ``""`` when nothing is left.

    Order: the id, then class shortcuts, then classes that need quoting,
    then every other key in mapping order. ``None`` values are skipped;
    empty values are written as a bare key.

    Args:
        attributes: Attribute mapping (may be None)
        quote: ``"`` or ``'``, used around explicit values

    """
    if not attributes:
        return ""

    identifier = ""
    classes = ""
    classes_full = ""
    values: list[str] = []

    for key, raw in attributes.items():
        if raw is None:
            continue
        value = str(raw)
        if key == "id":
            identifier = "#" + value if is_shortcut(value) else _quoted("id", value, quote)
        elif key == "class":
            shortcuts: list[str] = []
            full: list[str] = []
            for name in _CLASS_SEPARATOR.split(value.strip("\t\n\r ")):
                (shortcuts if is_shortcut(name) else full).append(name)
            classes = "." + ".".join(shortcuts) if shortcuts else ""
            classes_full = _quoted("class", " ".join(full), quote) if full else ""
        else:
            values.append(_quoted(key, value, quote))

    parts = [part for part in (identifier, classes, classes_full) if part] + values
    return "{" + " ".join(parts) + "}" if parts else ""


__all__ = [
    "SHORTCUT",
    "AttributePairs",
    "encode_attributes",
    "fold_attributes",
    "is_shortcut",
]
