"""
Module: compositor.images

Purpose:
    Asynchronous fetch and decode of panel artwork, cached by URL for the
    lifetime of one ImageLoader (one page-render session).

    Supported sources:
    - http:// and https:// URLs (aiohttp)
    - Local file paths and file:// URLs (aiofiles)
    - data: URLs with base64 payloads

    Decoding runs in the default executor so a large image never blocks
    the event loop while other panels are still downloading.

Key Classes:
    - ImageLoader: Per-session loader and cache
    - ImageLoadError: Fetch or decode failure for one URL

Dependencies:
    - aiohttp: HTTP fetch
    - aiofiles: Non-blocking local file reads
    - PIL: Decoding

Used By:
    - compositor.compositor: Panel artwork
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
import os
from typing import Optional, Sequence, Union

import aiofiles
import aiohttp
from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 30  # seconds


class ImageLoadError(Exception):
    """Image could not be fetched or decoded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to load image {_short(url)}: {reason}")
        self.url = url
        self.reason = reason


def _short(url: str, limit: int = 70) -> str:
    return url if len(url) <= limit else f"{url[:limit]}..."


def _decode(data: bytes) -> Image.Image:
    """Decode image bytes into a fully loaded RGB(A) image."""
    image = Image.open(io.BytesIO(data))
    image.load()
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
    return image


class ImageLoader:
    """
    Loads panel images, caching decoded results by URL.

    The cache is a plain dict owned by this loader; pass the same dict to
    several loaders to share it explicitly. Failures are not cached, so a
    later session may retry.

    Example:
        >>> loader = ImageLoader()
        >>> results = asyncio.run(loader.load_many(["a.png", "a.png", "b.png"]))
        >>> sorted(results)
        ['a.png', 'b.png']
    """

    def __init__(
        self,
        cache: Optional[dict[str, Image.Image]] = None,
        *,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ):
        self.cache: dict[str, Image.Image] = cache if cache is not None else {}
        self.timeout = timeout

    async def load(
        self,
        url: str,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> Image.Image:
        """
        Fetch and decode one image.

        Args:
            url: http(s) URL, file path, file:// URL or data: URL
            session: Shared HTTP session; a temporary one is opened when
                an http(s) URL is loaded without one

        Raises:
            ImageLoadError: If the source cannot be read or decoded
        """
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug(f"Image cache hit: {_short(url)}")
            return cached

        logger.debug(f"Image cache miss: {_short(url)}")
        if session is None and url.startswith(("http://", "https://")):
            async with aiohttp.ClientSession() as own_session:
                data = await self._read_bytes(url, own_session)
        else:
            data = await self._read_bytes(url, session)

        loop = asyncio.get_running_loop()
        try:
            image = await loop.run_in_executor(None, _decode, data)
        except (OSError, Image.DecompressionBombError) as e:
            raise ImageLoadError(url, f"decode failed ({type(e).__name__})") from e

        self.cache[url] = image
        return image

    async def load_many(
        self,
        urls: Sequence[str],
    ) -> dict[str, Union[Image.Image, ImageLoadError]]:
        """
        Load several images concurrently.

        Each URL is fetched at most once. A failure affects only its own
        entry, which holds the ImageLoadError instead of an image.

        Returns:
            Mapping url -> decoded image or ImageLoadError
        """
        unique = list(dict.fromkeys(urls))
        if not unique:
            return {}

        async with aiohttp.ClientSession() as session:
            results = await asyncio.gather(
                *(self.load(url, session) for url in unique),
                return_exceptions=True,
            )

        outcome: dict[str, Union[Image.Image, ImageLoadError]] = {}
        for url, result in zip(unique, results):
            if isinstance(result, (Image.Image, ImageLoadError)):
                outcome[url] = result
            elif isinstance(result, Exception):
                outcome[url] = ImageLoadError(url, f"{type(result).__name__}: {result}")
            else:
                # Cancellation and interpreter exits propagate
                raise result
        return outcome

    async def _read_bytes(
        self,
        url: str,
        session: Optional[aiohttp.ClientSession],
    ) -> bytes:
        if url.startswith(("http://", "https://")):
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            try:
                async with session.get(url, timeout=timeout) as response:
                    response.raise_for_status()
                    return await response.read()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise ImageLoadError(url, f"fetch failed ({type(e).__name__})") from e

        if url.startswith("data:"):
            header, sep, encoded = url.partition(",")
            if not sep or ";base64" not in header:
                raise ImageLoadError(url, "only base64 data URLs are supported")
            try:
                return base64.b64decode(encoded + "===")
            except (binascii.Error, ValueError) as e:
                raise ImageLoadError(url, "invalid base64 payload") from e

        path = url[len("file://"):] if url.startswith("file://") else url
        if not os.path.isfile(path):
            raise ImageLoadError(url, "file not found")
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise ImageLoadError(url, f"read failed ({type(e).__name__})") from e
