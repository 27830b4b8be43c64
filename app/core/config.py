"""This module contains the settings for the application. It also sets up the logger."""
import sys
import os
from typing import Literal, Self
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pytz import utc
from loguru import logger as loguru_logger

logger = loguru_logger

app_root_dir = os.path.normpath(os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "..", ".."))


class _Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.path.normpath(os.path.join(app_root_dir, "app", ".env")),
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore"
    )

    PROJECT_NAME: str = Field(default="Revi's Blog OG")
    API_STR: str = Field(default="/api")

    # Site configuration (used by the social card)
    SITE_NAME: str = Field(default="Revi's Blog")
    SITE_URL: str = Field(default="https://revi-blog.rev.earth")
    SITE_DESCRIPTION: str = Field(
        default="Revi's blog covers a wide range of topics, discussing everything "
        "from tech and creativity to life and beyond."
    )
    SITE_AUTHOR: str = Field(default="Revi")

    LOG_LEVEL: Literal['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'] = Field(
        default='INFO'
    )
    LOG_FILE_ENABLED: bool = Field(default=False)
    LOG_FILE_LEVEL: Literal['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'] = Field(
        default='WARNING'
    )
    LOG_FILE_ROTATION: int | str = Field(default=24)
    LOG_FILE_RETENTION: int | str = Field(default=30)

    APP_ROOT_DIR: str = app_root_dir

    # NOTE: OG_FONT_FILE is relative to APP_ROOT_DIR, OG_FONT_URL wins when set
    OG_FONT_FILE: str = Field(
        default=os.path.join("app", "assets", "fonts", "SourceCodePro-Bold.ttf"))
    OG_FONT_URL: str | None = None
    OG_FONT_TIMEOUT: float = Field(default=10.0)
    OG_CACHE_CONTROL: str = Field(
        default="public, immutable, no-transform, max-age=31536000")

    LOGO_COLOR: str = Field(default="#2e78c9")

    # NOTE: Rendering is CPU bound, keep the limiter on in production
    RATE_LIMITER_ENABLED: bool = Field(default=True)
    RATE_LIMITER_MAX_REQUESTS: int = Field(default=300)
    RATE_LIMITER_WINDOW_SECONDS: int = Field(default=900)

    @model_validator(mode="after")
    def _strip_site_url(self) -> Self:
        self.SITE_URL = self.SITE_URL.rstrip("/")  # pylint: disable=C0103
        return self

    @model_validator(mode="after")
    def _validate_font_source(self) -> Self:
        if self.OG_FONT_URL is not None and not self.OG_FONT_URL.startswith(("http://", "https://")):
            logger.warning(
                f"OG_FONT_URL '{self.OG_FONT_URL}' is not an HTTP(S) URL, using OG_FONT_FILE instead.")
            self.OG_FONT_URL = None  # pylint: disable=C0103
        return self


settings = _Settings()


def _fix_timezone(record):
    utc_time = record["time"].astimezone(utc)
    record["time"] = utc_time


logger.configure(patcher=_fix_timezone)

logger.remove()
logger.add(
    sys.stderr,
    level=settings.LOG_LEVEL,
    colorize=True,
    format=(
        "<green>{time:YYYY/MM/DD HH:mm:ss zz}</green> | "
        "<level>{level:<8}</level> | "
        "<cyan>{module}:{function}:{line}</cyan> - "
        "<level>{message}</level>"
    ),
    enqueue=True,
    diagnose=True,
)

if settings.LOG_FILE_ENABLED:
    logger.add(
        os.path.normpath(os.path.join(
            app_root_dir, "data", "logs",
            "{time:YYYY_MM_DD_HH_mm_ss_ZZ!UTC}.log")),
        level=settings.LOG_FILE_LEVEL,
        rotation=f"{settings.LOG_FILE_ROTATION} hours" if isinstance(
            settings.LOG_FILE_ROTATION, int) else settings.LOG_FILE_ROTATION,
        retention=f"{settings.LOG_FILE_RETENTION} days" if isinstance(
            settings.LOG_FILE_RETENTION, int) else settings.LOG_FILE_RETENTION,
        compression="zip",
        delay=True,
        enqueue=True,
    )
