"""Removal of non-content markup (scripts, styles, comments).

This runs before content-region selection: inline scripts and styles are
often large enough to push a decorative container past the region length
threshold.
"""

import string
from typing import List, Tuple

# str.lower() can change string length for some non-ASCII characters, which
# would break offset mapping between the shadow copy and the original.
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def ascii_lower(text: str) -> str:
    """Lowercase A-Z only, keeping every offset aligned with the input."""
    return text.translate(_ASCII_LOWER)


def _remove_blocks(doc: str, opener: str, closer: str, opener_ends_at_gt: bool) -> str:
    lowered = ascii_lower(doc)
    pieces: List[str] = []
    pos = 0
    while True:
        start = lowered.find(opener, pos)
        if start == -1:
            break
        body_start = start + len(opener)
        if opener_ends_at_gt:
            gt = lowered.find(">", body_start)
            if gt == -1:
                break
            body_start = gt + 1
        end = lowered.find(closer, body_start)
        if end == -1:
            # Unterminated: no later opener can find a closer either
            break
        pieces.append(doc[pos:start])
        pos = end + len(closer)
    if not pieces:
        return doc
    pieces.append(doc[pos:])
    return "".join(pieces)


_NOISE: Tuple[Tuple[str, str, bool], ...] = (
    ("<script", "</script>", True),
    ("<style", "</style>", True),
    ("<!--", "-->", False),
)


def strip(doc: str) -> str:
    """Remove script blocks, style blocks and HTML comments.

    Matching is case-insensitive and spans line breaks. Each block ends at
    the first closing marker after it opens. Constructs that are never
    closed are left in place.
    """
    for opener, closer, opener_ends_at_gt in _NOISE:
        doc = _remove_blocks(doc, opener, closer, opener_ends_at_gt)
    return doc
