"""
Font asset loading for the social cards.

The card uses a single bold face. Its bytes are fetched once per process (from the
bundled file, or from ``OG_FONT_URL`` when configured) and shared by every request.
"""
import asyncio
import os

import httpx

from app.core.config import logger, settings
from app.core.exceptions import FontUnavailableError
from app.core.utils import app_path


async def _read_font_file(path: str) -> bytes:
    def _read() -> bytes:
        with open(path, "rb") as f:
            return f.read()
    try:
        return await asyncio.to_thread(_read)
    except OSError as e:
        raise FontUnavailableError(f"Unable to read font file '{path}': {e}") from e


async def _download_font(url: str, timeout: float) -> bytes:
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise FontUnavailableError(f"Unable to download font '{url}': {e}") from e
    return response.content


async def fetch_font() -> bytes:
    """
    Fetches the bold font bytes from the configured source.

    :return bytes: The raw TrueType data.
    :raises FontUnavailableError: If the font can not be read or downloaded, or is empty.
    """
    if settings.OG_FONT_URL:
        source = settings.OG_FONT_URL
        data = await _download_font(source, settings.OG_FONT_TIMEOUT)
    else:
        source = app_path(settings.OG_FONT_FILE)
        data = await _read_font_file(source)
    if not data:
        raise FontUnavailableError(f"Font '{source}' is empty.")
    logger.info(f"Font loaded from {os.path.basename(source)} ({len(data)} bytes)")
    return data


def _log_prefetch_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(f"Font prefetch failed, will retry on the next request: {exc}")


class FontLoader:
    """
    Memoized asynchronous initializer for the font bytes.

    The first caller starts the fetch, concurrent callers await the same in-flight
    task, and once resolved the bytes are served from memory for the lifetime of the
    process. A failed fetch is not memoized so a later request can try again.
    """

    def __init__(self, fetcher=fetch_font):
        self._fetcher = fetcher
        self._data: bytes | None = None
        self._task: asyncio.Task | None = None

    @property
    def loaded(self) -> bool:
        """Whether the font bytes are already available."""
        return self._data is not None

    def prefetch(self) -> None:
        """Starts the fetch in the background without waiting for it."""
        if self._data is None and self._task is None:
            self._task = asyncio.create_task(self._load(self._fetcher))
            self._task.add_done_callback(_log_prefetch_failure)

    async def get(self) -> bytes:
        """
        Returns the font bytes, fetching them on first use.

        :return bytes: The raw TrueType data.
        :raises FontUnavailableError: If the fetch failed.
        """
        if self._data is not None:
            return self._data
        if self._task is None:
            self._task = asyncio.create_task(self._load(self._fetcher))
        return await asyncio.shield(self._task)

    async def _load(self, fetcher) -> bytes:
        try:
            data = await fetcher()
        except Exception as e:
            self._release()
            if isinstance(e, FontUnavailableError):
                raise
            raise FontUnavailableError(str(e)) from e
        # A task left over from before a reset must not overwrite the new state
        if self._task is asyncio.current_task():
            self._data = data
        self._release()
        return data

    def _release(self) -> None:
        if self._task is asyncio.current_task():
            self._task = None

    def reset(self) -> None:
        """Forgets the cached font, the next call to ``get`` fetches it again."""
        self._data = None
        self._task = None


font_loader = FontLoader()
