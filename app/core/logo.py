"""
The blog logo mark.

The mark is a fixed two-path vector drawing (512x512 view box, round caps and joins,
stroke width 15). The path data only uses straight segments, so it is parsed here and
drawn with Pillow instead of going through a full SVG renderer.
"""
import re
from PIL import Image, ImageDraw, ImageColor

from app.core.config import settings

LOGO_VIEWBOX = 512
LOGO_STROKE_WIDTH = 15

LOGO_PATHS = (
    "M256.073 256.042 471.207 380.25M40.792 380.249l215.099-124.186M256 63.447V7.5"
    "M256 256.042V98.447M228.542 456.94 256 504.5l215.208-372.749-341.889-.001"
    "M94.319 131.75H40.793l170.304 294.976M327.808 380.25h143.399l-71.723-124.229"
    "M112.516 256.021 40.792 380.249h143.346M327.592 131.5 256 7.5l-71.592 124",
    "m318.25 239.427 45.569 78.823-215.639-.001L256 131.75l44.663 77.255",
)

# Rendered bigger then downsampled, Pillow lines are not anti-aliased
_SUPERSAMPLE = 4

_TOKEN_RE = re.compile(r"[A-Za-z]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def parse_path_data(d: str) -> list[list[tuple[float, float]]]:
    """
    Parses SVG path data made of straight segments into polylines.

    Supports the ``M``, ``L``, ``H``, ``V`` and ``Z`` commands, absolute and relative,
    including implicit line-to pairs following a move-to.

    :param str d: The path data (the ``d`` attribute).
    :return list: One list of ``(x, y)`` points per sub-path.
    :raises ValueError: On an unsupported command or a dangling coordinate.
    """
    tokens = _TOKEN_RE.findall(d)
    polylines: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    x = y = 0.0
    start = (0.0, 0.0)
    command = None
    i = 0

    def _number() -> float:
        nonlocal i
        if i >= len(tokens) or tokens[i].isalpha():
            raise ValueError(f"Missing coordinate for command '{command}' in path data")
        value = float(tokens[i])
        i += 1
        return value

    while i < len(tokens):
        token = tokens[i]
        if token.isalpha():
            if command is None and token not in "Mm":
                raise ValueError("Path data must start with a move-to command")
            command = token
            i += 1
            if command in "Zz":
                if current:
                    current.append(start)
                    x, y = start
                continue
        elif command is None:
            raise ValueError("Path data must start with a move-to command")

        match command:
            case "M" | "m":
                nx, ny = _number(), _number()
                if command == "m":
                    nx, ny = x + nx, y + ny
                if len(current) > 1:
                    polylines.append(current)
                current = [(nx, ny)]
                start = (nx, ny)
                # Extra pairs after a move-to are line-to commands
                command = "L" if command == "M" else "l"
            case "L" | "l":
                nx, ny = _number(), _number()
                if command == "l":
                    nx, ny = x + nx, y + ny
                current.append((nx, ny))
            case "H" | "h":
                nx, ny = _number(), y
                if command == "h":
                    nx += x
                current.append((nx, ny))
            case "V" | "v":
                nx, ny = x, _number()
                if command == "v":
                    ny += y
                current.append((nx, ny))
            case _:
                raise ValueError(f"Unsupported path command '{command}'")
        x, y = nx, ny

    if len(current) > 1:
        polylines.append(current)
    return polylines


def _draw_polyline(draw: ImageDraw.ImageDraw, points, color, width: int):
    draw.line(points, fill=color, width=width, joint="curve")
    radius = width / 2
    for px, py in (points[0], points[-1]):
        draw.ellipse((px - radius, py - radius, px + radius, py + radius), fill=color)


def render_logo(size: int, color: str | None = None) -> Image.Image:
    """
    Renders the logo mark on a transparent square.

    :param int size: Width and height of the output image, in pixels.
    :param str color: Stroke color. Defaults to ``settings.LOGO_COLOR``.
    :return Image: An RGBA image of ``size`` x ``size``.
    """
    if size <= 0:
        raise ValueError("Logo size must be positive")
    rgba = ImageColor.getrgb(color or settings.LOGO_COLOR)
    canvas_size = size * _SUPERSAMPLE
    scale = canvas_size / LOGO_VIEWBOX
    width = max(1, round(LOGO_STROKE_WIDTH * scale))

    img = Image.new("RGBA", (canvas_size, canvas_size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    for d in LOGO_PATHS:
        for polyline in parse_path_data(d):
            points = [(px * scale, py * scale) for px, py in polyline]
            _draw_polyline(draw, points, rgba, width)
    return img.resize((size, size), Image.Resampling.LANCZOS)
