"""HTML character entity decoding.

Handles the three reference syntaxes found in scraped article markup:

- named entities from a fixed table (``&amp;``, ``&mdash;``, ...)
- decimal references (``&#8212;``)
- hexadecimal references (``&#x2014;`` / ``&#X2014;``)

All three are resolved in a single left-to-right scan, so text produced by
one substitution is never decoded again (``&amp;lt;`` becomes ``&lt;``, not
``<``). Anything that does not resolve to a valid code point is left exactly
as it was.
"""

import re
from types import MappingProxyType
from typing import Optional

MAX_CODE_POINT = 0x10FFFF

ENTITY_TABLE = MappingProxyType({
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": "\"",
    "&#34;": "\"",
    "&#39;": "'",
    "&apos;": "'",
    "&ndash;": "–",
    "&mdash;": "—",
    "&lsquo;": "'",
    "&rsquo;": "'",
    "&ldquo;": "\"",
    "&rdquo;": "\"",
    "&hellip;": "…",
    "&bull;": "•",
    "&middot;": "·",
    "&copy;": "©",
    "&reg;": "®",
    "&trade;": "™",
    "&euro;": "€",
    "&pound;": "£",
    "&yen;": "¥",
    "&cent;": "¢",
    "&deg;": "°",
    "&plusmn;": "±",
    "&times;": "×",
    "&divide;": "÷",
    "&ne;": "≠",
    "&le;": "≤",
    "&ge;": "≥",
    "&para;": "¶",
    "&sect;": "§",
})

_NAMED = "|".join(re.escape(entity) for entity in ENTITY_TABLE)
_DECIMAL = r"&#([0-9]+);"
_HEX = r"&#[xX]([0-9A-Fa-f]+);"

_NAMED_RE = re.compile(_NAMED)
_DECIMAL_RE = re.compile(_DECIMAL)
_HEX_RE = re.compile(_HEX)
# Named alternatives come first so the table wins for "&#34;" and "&#39;"
_ANY_RE = re.compile(f"(?P<named>{_NAMED})|{_DECIMAL}|{_HEX}")


def code_point_to_char(value: int) -> Optional[str]:
    """Return the character for a numeric reference, or None when invalid."""
    if value < 1 or value > MAX_CODE_POINT:
        return None
    # Lone surrogates cannot be written out as UTF-8
    if 0xD800 <= value <= 0xDFFF:
        return None
    return chr(value)


def _numeric(digits: str, base: int) -> Optional[str]:
    try:
        value = int(digits, base)
    except ValueError:
        # int() refuses very long digit strings
        return None
    return code_point_to_char(value)


def _replace_decimal(match: re.Match) -> str:
    return _numeric(match.group(1), 10) or match.group(0)


def _replace_hex(match: re.Match) -> str:
    return _numeric(match.group(1), 16) or match.group(0)


def _replace_any(match: re.Match) -> str:
    named = match.group("named")
    if named is not None:
        return ENTITY_TABLE[named]
    if match.group(2) is not None:
        return _numeric(match.group(2), 10) or match.group(0)
    return _numeric(match.group(3), 16) or match.group(0)


def decode_named(text: str) -> str:
    """Replace entities from ENTITY_TABLE only."""
    return _NAMED_RE.sub(lambda m: ENTITY_TABLE[m.group(0)], text)


def decode_decimal(text: str) -> str:
    """Replace in-range ``&#NNNN;`` references only."""
    return _DECIMAL_RE.sub(_replace_decimal, text)


def decode_hex(text: str) -> str:
    """Replace in-range ``&#xHHHH;`` references only."""
    return _HEX_RE.sub(_replace_hex, text)


def decode(text: str) -> str:
    """Decode named, decimal and hexadecimal references in one pass.

    Args:
        text: Text that may contain entity references

    Returns:
        Text with every resolvable reference replaced; malformed or
        out-of-range references are kept verbatim
    """
    if "&" not in text:
        return text
    return _ANY_RE.sub(_replace_any, text)
