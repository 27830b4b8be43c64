"""This module contains the API endpoint generating the social card (Open Graph) images."""
from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from fastapi.params import Query
from fastapi.responses import PlainTextResponse, Response

from app.core.card import render_card, truncate_heading
from app.core.config import logger, settings
from app.core.exceptions import CardGenerationError
from app.core.fonts import font_loader
from app.core.utils import png_response


router = APIRouter()

MISSING_TITLE_MESSAGE = "No title provided"
GENERATION_FAILED_MESSAGE = "Failed to generate image"


@router.get(
    "",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "The 800x400 card."},
        500: {"content": {"text/plain": {}}, "description": "Missing title or generation failure."},
    },
)
async def og_image(title: str | None = Query(default=None)):
    """
    Generate the social card image for a post.

    Parameters
    ----------
    title : str, optional
        The post title. Titles longer than 140 characters are truncated.

    Returns
    -------
    Response
        The PNG card (800x400), or a plain text 500 response when the title is
        missing or the image could not be generated.
    """
    if not title:
        return PlainTextResponse(MISSING_TITLE_MESSAGE, status_code=500)
    try:
        font_data = await font_loader.get()
        heading = truncate_heading(title)
        content = await run_in_threadpool(
            render_card, heading, font_data, settings.SITE_NAME, settings.SITE_URL)
    except CardGenerationError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return PlainTextResponse(GENERATION_FAILED_MESSAGE, status_code=500)
    except Exception:  # pylint: disable=W0718
        logger.exception("Unexpected error while generating a card")
        return PlainTextResponse(GENERATION_FAILED_MESSAGE, status_code=500)
    return png_response(content, headers={"Cache-Control": settings.OG_CACHE_CONTROL})
