"""Text normalization for extracted content regions.

Turns a region of markup into plain paragraphs: block breaks become
paragraph boundaries, remaining tags are dropped, entities are decoded and
short boilerplate lines (menu items, share buttons, bylines) are filtered.
"""

import re

from .entities import decode

MIN_LINE_LENGTH = 10
MAX_TEXT_LENGTH = 50000
PARAGRAPH_SEPARATOR = "\n\n"

_BLOCK_BREAK_RE = re.compile(r"<br\s*/?>|<p\s*/?>|</p\s*>", re.IGNORECASE)


def break_blocks(text: str) -> str:
    """Replace ``<br>``, ``<p>`` and ``</p>`` with newlines."""
    return _BLOCK_BREAK_RE.sub("\n", text)


def strip_tags(text: str) -> str:
    """Replace every ``<...>`` span with a single space.

    The space keeps words on either side of a removed tag apart. A ``<``
    with nothing before the next ``>`` is not a tag and is kept.
    """
    pieces = []
    pos = 0
    search = 0
    while True:
        lt = text.find("<", search)
        if lt == -1:
            break
        gt = text.find(">", lt + 1)
        if gt == -1:
            break
        if gt == lt + 1:
            search = lt + 1
            continue
        pieces.append(text[pos:lt])
        pieces.append(" ")
        pos = search = gt + 1
    if not pieces:
        return text
    pieces.append(text[pos:])
    return "".join(pieces)


def clean_lines(text: str, min_length: int = MIN_LINE_LENGTH) -> str:
    """Collapse whitespace per line and drop lines under ``min_length`` chars."""
    lines = []
    for line in text.split("\n"):
        line = " ".join(line.split())
        if line and len(line) >= min_length:
            lines.append(line)
    return PARAGRAPH_SEPARATOR.join(lines)


def normalize(region: str) -> str:
    """Convert a content region into plain text paragraphs.

    The result is cut at ``MAX_TEXT_LENGTH`` characters with no regard for
    word or sentence boundaries, so it may end mid-sentence.
    """
    text = break_blocks(region)
    text = strip_tags(text)
    text = decode(text)
    text = clean_lines(text)
    return text[:MAX_TEXT_LENGTH]
