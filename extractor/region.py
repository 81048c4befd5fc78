"""Heuristic selection of the main content region of a page.

The selector walks an ordered list of matchers and returns the span captured
by the first one that yields more than ``MIN_REGION_LENGTH`` characters. It
stops at the first satisfying matcher instead of ranking candidates. If none
qualifies it falls back to the ``<body>`` span and then to the whole
document.

Matching is plain text scanning, not a tree walk: a span runs from the end
of the opening tag to the first closing tag of the same name, so nested
containers of the same tag cut the span short.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .noise import ascii_lower

logger = logging.getLogger(__name__)

MIN_REGION_LENGTH = 200
CONTENT_TOKENS = ("article", "content", "story", "post", "entry")


def _tag_span(lowered: str, tag: str, start: int) -> Optional[Tuple[int, int]]:
    """Return (inner_start, inner_end) for the element opening at ``start``."""
    gt = lowered.find(">", start + len(tag) + 1)
    if gt == -1:
        return None
    end = lowered.find(f"</{tag}>", gt + 1)
    if end == -1:
        return None
    return gt + 1, end


def _attribute_values(open_tag: str, attribute: str):
    """Yield every double-quoted value of ``attribute="..."`` in an opening tag."""
    marker = f'{attribute}="'
    pos = open_tag.find(marker)
    while pos != -1:
        value_start = pos + len(marker)
        value_end = open_tag.find('"', value_start)
        if value_end == -1:
            return
        yield open_tag[value_start:value_end]
        pos = open_tag.find(marker, value_start)


@dataclass(frozen=True)
class TagMatcher:
    """First ``<tag ...>`` element, up to the next ``</tag>``."""
    tag: str

    @property
    def name(self) -> str:
        return f"<{self.tag}>"

    def find(self, doc: str, lowered: str) -> Optional[str]:
        start = lowered.find(f"<{self.tag}")
        if start == -1:
            return None
        span = _tag_span(lowered, self.tag, start)
        if span is None:
            return None
        return doc[span[0]:span[1]]


@dataclass(frozen=True)
class AttributeMatcher:
    """First container whose attribute value mentions one of ``tokens``."""
    attribute: str
    tokens: Tuple[str, ...] = CONTENT_TOKENS
    tag: str = "div"

    @property
    def name(self) -> str:
        return f"<{self.tag} {self.attribute}~{'|'.join(self.tokens)}>"

    def _qualifies(self, open_tag: str) -> bool:
        for value in _attribute_values(open_tag, self.attribute):
            if any(token in value for token in self.tokens):
                return True
        return False

    def find(self, doc: str, lowered: str) -> Optional[str]:
        opener = f"<{self.tag}"
        pos = lowered.find(opener)
        while pos != -1:
            gt = lowered.find(">", pos + len(opener))
            if gt == -1:
                return None
            if self._qualifies(lowered[pos:gt]):
                end = lowered.find(f"</{self.tag}>", gt + 1)
                if end == -1:
                    return None
                return doc[gt + 1:end]
            # Openers inside a rejected tag see a suffix of it and cannot qualify
            pos = lowered.find(opener, gt + 1)
        return None


DEFAULT_MATCHERS = (
    TagMatcher("article"),
    TagMatcher("main"),
    AttributeMatcher("class"),
    AttributeMatcher("id"),
)

_BODY = TagMatcher("body")


def select_region(doc: str,
                  matchers: Sequence = DEFAULT_MATCHERS,
                  min_length: int = MIN_REGION_LENGTH) -> str:
    """Return the substring most likely to hold the page's main text.

    Args:
        doc: Markup with noise already stripped
        matchers: Ordered matchers; the first that captures more than
            ``min_length`` characters wins
        min_length: Captured spans of this length or shorter are skipped

    Returns:
        The selected region, the ``<body>`` contents, or ``doc`` itself
    """
    lowered = ascii_lower(doc)
    for matcher in matchers:
        captured = matcher.find(doc, lowered)
        if captured is not None and len(captured) > min_length:
            logger.debug(f"Content region matched {matcher.name} ({len(captured)} chars)")
            return captured

    body = _BODY.find(doc, lowered)
    if body is not None:
        logger.debug("No content region matched, using <body>")
        return body

    logger.debug("No content region or <body> found, using whole document")
    return doc
