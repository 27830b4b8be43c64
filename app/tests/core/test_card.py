"""Tests for the social card renderer."""
from io import BytesIO
import pytest
from PIL import Image, ImageDraw, ImageFont, ImageOps

from app.core.card import (
    CARD_HEIGHT,
    CARD_WIDTH,
    ELLIPSIS,
    FONT_SIZE_HEADING,
    FONT_SIZE_HEADING_MIN,
    HEADING_BOTTOM,
    HEADING_TOP,
    LOGO_SIZE,
    PADDING,
    TITLE_MAX_LENGTH,
    compose_card,
    _line_height,
    fit_lines,
    layout_heading,
    render_card,
    truncate_heading,
    wrap_text,
)
from app.core.exceptions import CardGenerationError, CardRenderError

# pylint: disable=C0116


@pytest.fixture
def heading_font(font_data):
    return ImageFont.truetype(BytesIO(font_data), 50)


@pytest.mark.parametrize("title, expected", [
    ("Hello World", "Hello World"),
    ("a", "a"),
    ("a" * TITLE_MAX_LENGTH, "a" * TITLE_MAX_LENGTH),
    ("a" * (TITLE_MAX_LENGTH + 1), "a" * TITLE_MAX_LENGTH + "..."),
    ("a" * 150, "a" * 140 + "..."),
])
def test_truncate_heading(title, expected):
    assert truncate_heading(title) == expected


def test_truncate_heading_never_exceeds_limit():
    heading = truncate_heading("word " * 200)
    assert len(heading) == TITLE_MAX_LENGTH + len(ELLIPSIS)
    assert heading.endswith(ELLIPSIS)


@pytest.mark.parametrize("heading", [
    "Hello World",
    "a" * 140 + "...",
    "A much longer title that will need to be wrapped over several lines of the card " * 2,
    "",
])
def test_render_card_dimensions(heading, font_data):
    png = render_card(heading, font_data, "Revi's Blog", "https://revi-blog.rev.earth")
    img = Image.open(BytesIO(png))
    assert img.format == "PNG"
    assert img.size == (CARD_WIDTH, CARD_HEIGHT) == (800, 400)
    assert img.mode == "RGB"


def test_render_card_invalid_font():
    with pytest.raises(CardRenderError):
        render_card("Hello World", b"not a font", "Revi's Blog", "https://revi-blog.rev.earth")


def test_card_render_error_is_a_generation_error():
    assert issubclass(CardRenderError, CardGenerationError)


def test_compose_card_draws_every_row(font_data):
    img = compose_card("Hello World", font_data, "Revi's Blog", "https://revi-blog.rev.earth")
    # Non white pixels become non zero once inverted
    logo_box = (PADDING, PADDING, PADDING + LOGO_SIZE, PADDING + LOGO_SIZE)
    label_box = (PADDING + LOGO_SIZE, PADDING, CARD_WIDTH - PADDING, PADDING + LOGO_SIZE)
    heading_box = (PADDING, PADDING + LOGO_SIZE, CARD_WIDTH - PADDING, CARD_HEIGHT - PADDING - 40)
    footer_box = (PADDING, CARD_HEIGHT - PADDING - 30, CARD_WIDTH - PADDING, CARD_HEIGHT)
    for box in (logo_box, label_box, heading_box, footer_box):
        assert ImageOps.invert(img.crop(box)).getbbox() is not None, box
    # Nothing is drawn in the right padding
    assert ImageOps.invert(img.crop((CARD_WIDTH - PADDING // 2, 0, CARD_WIDTH, CARD_HEIGHT))).getbbox() is None


def test_compose_card_logo_uses_brand_color(font_data):
    img = compose_card("Hello World", font_data, "Revi's Blog", "https://revi-blog.rev.earth")
    colors = img.crop((PADDING, PADDING, PADDING + LOGO_SIZE, PADDING + LOGO_SIZE)).getcolors(LOGO_SIZE ** 2)
    # Some pixel of the mark is clearly blue
    assert any(b > r + 60 for _, (r, _g, b) in colors)


def test_wrap_text_fits_width(heading_font):
    text = "The quick brown fox jumps over the lazy dog and keeps on running"
    lines = wrap_text(text, heading_font, 400)
    assert len(lines) > 1
    assert all(heading_font.getlength(line) <= 400 for line in lines)
    assert " ".join(lines) == text


def test_wrap_text_splits_long_words(heading_font):
    word = "a" * 60
    lines = wrap_text(word, heading_font, 300)
    assert len(lines) > 1
    assert all(heading_font.getlength(line) <= 300 for line in lines)
    assert "".join(lines) == word


def test_wrap_text_empty(heading_font):
    assert not wrap_text("", heading_font, 300)
    assert not wrap_text("   ", heading_font, 300)


def test_fit_lines(heading_font):
    lines = ["one", "two", "three"]
    assert fit_lines(lines, heading_font, 700, 3) == lines
    assert fit_lines(lines, heading_font, 700, 5) == lines
    assert fit_lines(lines, heading_font, 700, 2) == ["one", "two..."]
    assert not fit_lines(lines, heading_font, 700, 0)


def test_fit_lines_ellipsis_stays_within_width(heading_font):
    line = "a" * 20
    width = round(heading_font.getlength(line))
    fitted = fit_lines([line, "more"], heading_font, width, 1)
    assert fitted[0].endswith(ELLIPSIS)
    assert heading_font.getlength(fitted[0]) <= width


CONTENT_WIDTH = CARD_WIDTH - PADDING * 2
REALISTIC_TITLES = [
    "Setting up credentials authentication with NextAuth and Prisma",
    "Why I moved my blog from Gatsby to Next.js",
    "A practical guide to caching API responses in a serverless world, part two",
    "Notes on writing, shipping and maintaining small open source libraries for a decade",
]


def test_line_height_follows_font_size(heading_font):
    assert _line_height(heading_font) == 60


def test_heading_region_holds_two_lines_at_full_size():
    assert (HEADING_BOTTOM - HEADING_TOP) // 60 >= 2


def test_layout_heading_keeps_full_size_for_short_titles(font_data):
    font, lines = layout_heading("Hello World", font_data, CONTENT_WIDTH, HEADING_BOTTOM - HEADING_TOP)
    assert font.size == FONT_SIZE_HEADING
    assert lines == ["Hello World"]


@pytest.mark.parametrize("title", REALISTIC_TITLES)
def test_layout_heading_shows_the_whole_title(title, font_data):
    region_height = HEADING_BOTTOM - HEADING_TOP
    font, lines = layout_heading(title, font_data, CONTENT_WIDTH, region_height)
    assert " ".join(lines) == title
    assert FONT_SIZE_HEADING_MIN <= font.size <= FONT_SIZE_HEADING
    assert len(lines) * _line_height(font) <= region_height
    assert all(font.getlength(line) <= CONTENT_WIDTH for line in lines)


def test_layout_heading_shrinks_long_titles(font_data):
    font, _ = layout_heading(REALISTIC_TITLES[0], font_data, CONTENT_WIDTH, HEADING_BOTTOM - HEADING_TOP)
    assert font.size < FONT_SIZE_HEADING


def test_layout_heading_fits_a_truncated_title(font_data):
    heading = truncate_heading("lorem ipsum " * 20)
    assert len(heading) == TITLE_MAX_LENGTH + len(ELLIPSIS)
    _, lines = layout_heading(heading, font_data, CONTENT_WIDTH, HEADING_BOTTOM - HEADING_TOP)
    assert " ".join(lines) == heading


def test_layout_heading_drops_lines_at_min_size(font_data):
    font, lines = layout_heading("word " * 200, font_data, CONTENT_WIDTH, 100)
    assert font.size == FONT_SIZE_HEADING_MIN
    assert len(lines) == 100 // _line_height(font)
    assert lines[-1].endswith(ELLIPSIS)


@pytest.mark.parametrize("title", REALISTIC_TITLES)
def test_compose_card_draws_the_whole_title(title, font_data, mocker):
    text_spy = mocker.spy(ImageDraw.ImageDraw, "text")
    compose_card(title, font_data, "Revi's Blog", "https://revi-blog.rev.earth")
    drawn = [call.args[-1] for call in text_spy.call_args_list]
    heading_lines = [text for text in drawn if text not in ("Revi's Blog", "https://revi-blog.rev.earth")]
    assert " ".join(heading_lines) == title


def test_truncate_heading_counts_code_points():
    # One character each, even outside the BMP
    assert truncate_heading("🎉" * TITLE_MAX_LENGTH) == "🎉" * TITLE_MAX_LENGTH
    assert truncate_heading("🎉" * (TITLE_MAX_LENGTH + 1)) == "🎉" * TITLE_MAX_LENGTH + ELLIPSIS
