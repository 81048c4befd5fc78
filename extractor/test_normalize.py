import re

import pytest

from extractor.normalize import (
    MAX_TEXT_LENGTH,
    break_blocks,
    normalize,
    strip_tags,
)


def test_short_paragraph_is_dropped():
    assert normalize("<p>short</p><p>this line is long enough</p>") == "this line is long enough"


def test_minimum_line_length_boundary():
    assert normalize("<p>abcdefghij</p>") == "abcdefghij"
    assert normalize("<p>abcdefghi</p>") == ""
    # Length is measured after whitespace collapse
    assert normalize("<p>abc    def   g</p>") == ""


def test_paragraphs_joined_with_blank_line():
    html = "first line!<br>second line<BR/>third line<br />fourth line<P>fifth line</p >"
    assert normalize(html) == "first line!\n\nsecond line\n\nthird line\n\nfourth line\n\nfifth line"


def test_whitespace_is_collapsed():
    assert normalize("<p>  lots   of\t\tspace  here  </p>") == "lots of space here"


def test_removed_tags_do_not_join_words():
    assert normalize("alpha</span><span>beta gamma") == "alpha beta gamma"


def test_entities_are_decoded():
    assert normalize("<p>Fish &amp; chips &mdash; tasty</p>") == "Fish & chips — tasty"
    assert normalize("a&nbsp;&nbsp;b is spaced") == "a b is spaced"


def test_output_has_no_tags():
    html = '<div class="x"><b>Bold statement here</b><i>x</i><a href="/y">link text here</a></div>'
    text = normalize(html)
    assert not re.search(r"<[^>]+>", text)
    assert text == "Bold statement here x link text here"


def test_truncation_is_a_hard_cut():
    text = normalize("word " * 12000)
    assert len(text) == MAX_TEXT_LENGTH
    assert normalize("a" * 60000) == "a" * MAX_TEXT_LENGTH


def test_break_blocks():
    assert break_blocks("a<br>b<br/>c<br  />d<p>e</p>f") == "a\nb\nc\nd\ne\nf"
    assert break_blocks('<p class="lead">x') == '<p class="lead">x'


def test_strip_tags_edge_cases():
    assert strip_tags("a<>b") == "a<>b"
    assert strip_tags("a < b") == "a < b"
    assert strip_tags("x<b>y</b>z") == "x y z"
    assert strip_tags("<<b>x") == " x"
    assert strip_tags("") == ""


@pytest.mark.parametrize("html", [
    "text <b unclosed tag here",
    "<a<b>>nested brackets text",
    '<a title="x>y">link text here</a>',
    "<<<>>> stacked brackets",
    "<div><p><span>deep nesting text</span></p></div>",
    "a < b > c and more words",
    "<>>< empty brackets text",
    '<img src=x onerror="a>b"/>caption text',
    "</p\n>multiline paragraph<br\n/>tags here and there",
])
def test_no_tag_survives_awkward_markup(html):
    assert not re.search(r"<[^>]+>", normalize(html))
