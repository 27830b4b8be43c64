"""
Main entrypoint of the application

This module contains the main entrypoint of the application. It is responsible
for creating the FastAPI application and setting up the routes and middleware.
"""
from contextlib import asynccontextmanager
import os
import platform
import fastapi
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.openapi.docs import get_redoc_html
from starlette.middleware.cors import CORSMiddleware

from app.api.router import api_router, tags_metadata
from app.core.config import settings, logger
from app.core.fonts import font_loader
from app.core.logo import render_logo
from app.core.middleware import GlobalRateLimiterMiddleware
from app.core.utils import (
    app_path,
    custom_generate_unique_id,
    image_to_png,
    png_response,
)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover   # pylint: disable=unused-argument, redefined-outer-name
    """ Lifespan hook to run on application startup and shutdown. """
    logger.info("Starting up...")
    if settings.LOG_FILE_ENABLED:
        os.makedirs(app_path(os.path.join("data", "logs")), exist_ok=True)
    # Font
    logger.info("Loading the card font...")
    font_loader.prefetch()
    logger.success("Initialization completed.")
    yield  # This is when the application code will run
    logger.info("Shutting down...")
    logger.info("Shutdown completed.")


app = FastAPI(
    debug=settings.LOG_LEVEL == "DEBUG",
    title=settings.PROJECT_NAME,
    summary=f"Social card images for {settings.SITE_NAME}.",
    description=f"""
Generates the Open Graph images used when a post of [{settings.SITE_NAME}]({settings.SITE_URL})
is shared on social platforms.

> {settings.SITE_DESCRIPTION}

Call `{settings.API_STR}/og?title=<post title>` to get an 800x400 PNG card.
""",
    version="0.1.0",
    openapi_tags=tags_metadata,
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
    contact={
        "name": settings.SITE_AUTHOR,
        "url": settings.SITE_URL,
    },
    generate_unique_id_function=custom_generate_unique_id,
)

app.include_router(api_router, prefix=settings.API_STR)


# NOTE: The order of the middlewares is important
# It's in reverse order of execution (CORS->RateLimiter)
if settings.RATE_LIMITER_ENABLED:
    app.add_middleware(
        GlobalRateLimiterMiddleware,
        max_requests=settings.RATE_LIMITER_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMITER_WINDOW_SECONDS,
        limited_paths=(f"{settings.API_STR}/og",),
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


# ----- Exceptions Handler ----- #


@app.exception_handler(Exception)
async def _debug_exception_handler(request: Request, exc: Exception):  # pragma: no cover   # pylint: disable=unused-argument
    logger.critical(exc)
    return JSONResponse(
        status_code=500,
        content=jsonable_encoder({
            "error": str(exc),
            "support": settings.SITE_URL,
        })
    )


# ----- DOCS ----- #

@app.get("/docs", tags=["DOCS"], include_in_schema=False)
def _redoc_html(request: Request):
    return get_redoc_html(
        openapi_url=app.openapi_url,
        title=app.title + " - ReDoc",
        redoc_favicon_url=str(request.url_for("_favicon")),
    )


# ----- Debugging ----- #

@app.get("/ping", tags=["DEBUG"])
def _ping():
    logger.info("Pong!")
    return "pong"


@app.get("/version", tags=["DEBUG"])
def _version():
    return JSONResponse(jsonable_encoder({
        "FastAPI_Version": fastapi.__version__,
        "Project_Version": app.version,
        "Python_Version": platform.python_version(),
    }))


# ----- Brand ----- #

@app.get("/favicon.ico", tags=["BRAND"], include_in_schema=False)
async def _favicon():
    content = await run_in_threadpool(lambda: image_to_png(render_logo(64)))
    return png_response(content, headers={"Cache-Control": settings.OG_CACHE_CONTROL})


@app.get("/logo.png", tags=["BRAND"])
async def _logo():
    content = await run_in_threadpool(lambda: image_to_png(render_logo(512)))
    return png_response(content, headers={"Cache-Control": settings.OG_CACHE_CONTROL})
