"""
This module contains miscellaneous utilities: path resolution relative to the app root,
the unique ID generator for the OpenAPI operations, and helpers to encode Pillow images
into HTTP responses.
"""
from io import BytesIO
import os
from fastapi import Response
from fastapi.routing import APIRoute
from PIL import Image

from app.core.config import settings


def app_path(path: str) -> str:
    """Returns the absolute path of the given path relative to the app root directory."""
    return os.path.normpath(os.path.join(settings.APP_ROOT_DIR, path))


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate a unique ID for a route by combining its first tag with its name."""
    tag = route.tags[0] if route.tags else "default"
    return f"{tag}-{route.name}"


def image_to_png(img: Image.Image) -> bytes:
    """
    Encodes a Pillow image as PNG.

    :param Image img: The image to encode.
    :return bytes: The PNG data.
    """
    img_io = BytesIO()
    img.save(img_io, 'PNG')
    img_io.seek(0)
    return img_io.getvalue()


def png_response(content: bytes, headers: dict | None = None) -> Response:
    """
    Wraps PNG data in an ``image/png`` response.

    :param bytes content: The PNG data.
    :param dict headers: Optional extra headers (e.g. Cache-Control).
    :return Response: The response.
    """
    return Response(content=content, media_type="image/png", headers=headers)
