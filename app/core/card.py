"""
Social card rendering.

A card is an 800x400 PNG made of three stacked rows on a white background:

- the logo mark and the site label,
- the heading (the post title, truncated when too long),
- the site URL as a footer.

Every text layer uses the same bold font, passed in as raw bytes so the caller decides
where it comes from (see ``app.core.fonts``).
"""
from io import BytesIO
from PIL import Image, ImageDraw, ImageFont

from app.core.exceptions import CardRenderError
from app.core.logo import render_logo
from app.core.utils import image_to_png

CARD_WIDTH = 800
CARD_HEIGHT = 400
PADDING = 48

LOGO_SIZE = 50
LABEL_GAP = 16
CONTENT_PADDING_Y = 40

FONT_SIZE_LABEL = 24
FONT_SIZE_HEADING = 50
FONT_SIZE_HEADING_MIN = 20
FONT_SIZE_HEADING_STEP = 2
FONT_SIZE_FOOTER = 16
LINE_SPACING = 1.2

HEADING_TOP = PADDING + LOGO_SIZE + CONTENT_PADDING_Y
HEADING_BOTTOM = CARD_HEIGHT - PADDING - round(FONT_SIZE_FOOTER * LINE_SPACING) - CONTENT_PADDING_Y

TITLE_MAX_LENGTH = 140
ELLIPSIS = "..."

BACKGROUND_COLOR = (255, 255, 255)
TEXT_COLOR = (0, 0, 0)


def truncate_heading(title: str) -> str:
    """
    Returns the heading to draw for a title.

    Titles longer than ``TITLE_MAX_LENGTH`` characters are cut and suffixed with
    ``ELLIPSIS``, shorter ones are returned unchanged.
    """
    if len(title) > TITLE_MAX_LENGTH:
        return f"{title[:TITLE_MAX_LENGTH]}{ELLIPSIS}"
    return title


def _load_font(font_data: bytes, size: int) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(BytesIO(font_data), size)


def _line_height(font: ImageFont.FreeTypeFont) -> int:
    return round(font.size * LINE_SPACING)


def _split_word(word: str, font: ImageFont.FreeTypeFont, max_width: int) -> list[str]:
    parts = []
    current = ""
    for char in word:
        if current and font.getlength(current + char) > max_width:
            parts.append(current)
            current = char
        else:
            current += char
    if current:
        parts.append(current)
    return parts


def wrap_text(text: str, font: ImageFont.FreeTypeFont, max_width: int) -> list[str]:
    """
    Word-wraps ``text`` so every line fits in ``max_width`` pixels.

    Words wider than a full line are split between characters.
    """
    lines = []
    current = ""
    for word in text.split():
        pieces = [word] if font.getlength(word) <= max_width else _split_word(word, font, max_width)
        for piece in pieces:
            candidate = f"{current} {piece}" if current else piece
            if current and font.getlength(candidate) > max_width:
                lines.append(current)
                current = piece
            else:
                current = candidate
    if current:
        lines.append(current)
    return lines


def fit_lines(lines: list[str], font: ImageFont.FreeTypeFont, max_width: int, max_lines: int) -> list[str]:
    """
    Keeps the first ``max_lines`` lines, marking the last one with an ellipsis when
    some text had to be dropped.
    """
    if len(lines) <= max_lines:
        return lines
    if max_lines <= 0:
        return []
    kept = lines[:max_lines]
    last = kept[-1]
    while last and font.getlength(last + ELLIPSIS) > max_width:
        last = last[:-1]
    kept[-1] = last.rstrip() + ELLIPSIS
    return kept


def layout_heading(heading: str, font_data: bytes, max_width: int, max_height: int) -> tuple[ImageFont.FreeTypeFont, list[str]]:
    """
    Picks the heading font size and the lines to draw.

    The size starts at ``FONT_SIZE_HEADING`` and steps down to ``FONT_SIZE_HEADING_MIN``
    until the wrapped heading fits in ``max_width`` x ``max_height``. At the smallest
    size, lines that still do not fit are dropped (see ``fit_lines``).

    :return tuple: The font and the lines, top to bottom.
    """
    size = FONT_SIZE_HEADING
    while True:
        font = _load_font(font_data, size)
        lines = wrap_text(heading, font, max_width)
        max_lines = max(0, max_height // _line_height(font))
        if len(lines) <= max_lines or size <= FONT_SIZE_HEADING_MIN:
            return font, fit_lines(lines, font, max_width, max_lines)
        size = max(FONT_SIZE_HEADING_MIN, size - FONT_SIZE_HEADING_STEP)


def compose_card(heading: str, font_data: bytes, site_name: str, site_url: str) -> Image.Image:
    """
    Draws the card and returns it as a Pillow image.

    :param str heading: The (already truncated) heading.
    :param bytes font_data: The bold TrueType font.
    :param str site_name: The label drawn next to the logo.
    :param str site_url: The footer text.
    :return Image: An RGB image of ``CARD_WIDTH`` x ``CARD_HEIGHT``.
    """
    font_label = _load_font(font_data, FONT_SIZE_LABEL)
    font_footer = _load_font(font_data, FONT_SIZE_FOOTER)
    content_width = CARD_WIDTH - PADDING * 2

    img = Image.new("RGB", (CARD_WIDTH, CARD_HEIGHT), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(img)

    # Header
    logo = render_logo(LOGO_SIZE)
    img.paste(logo, (PADDING, PADDING), logo)
    header_middle = PADDING + LOGO_SIZE // 2
    draw.text(
        (PADDING + LOGO_SIZE + LABEL_GAP, header_middle), site_name,
        font=font_label, fill=TEXT_COLOR, anchor="lm"
    )

    # Footer
    footer_bottom = CARD_HEIGHT - PADDING
    draw.text((PADDING, footer_bottom), site_url, font=font_footer, fill=TEXT_COLOR, anchor="ld")

    # Heading, between the header and the footer
    font_heading, lines = layout_heading(heading, font_data, content_width, HEADING_BOTTOM - HEADING_TOP)
    line_height = _line_height(font_heading)
    for idx, line in enumerate(lines):
        draw.text(
            (PADDING, HEADING_TOP + idx * line_height), line,
            font=font_heading, fill=TEXT_COLOR, anchor="la"
        )
    return img


def render_card(heading: str, font_data: bytes, site_name: str, site_url: str) -> bytes:
    """
    Renders a social card as PNG.

    :param str heading: The (already truncated) heading.
    :param bytes font_data: The bold TrueType font.
    :param str site_name: The label drawn next to the logo.
    :param str site_url: The footer text.
    :return bytes: The PNG data.
    :raises CardRenderError: If Pillow fails to load the font, draw or encode the card.
    """
    try:
        return image_to_png(compose_card(heading, font_data, site_name, site_url))
    except (OSError, ValueError, TypeError) as e:
        raise CardRenderError(f"Unable to render card: {e}") from e
