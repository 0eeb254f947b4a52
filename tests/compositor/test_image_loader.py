"""
Unit Tests for the Async Image Loader

HTTP sources are served by a local aiohttp test server.
"""

import asyncio
import base64

import pytest
from aiohttp import test_utils, web
from PIL import Image

from mangakit.compositor import Compositor, CompositorConfig
from mangakit.compositor.images import ImageLoader, ImageLoadError
from mangakit.layout import render_page


def _data_url(path) -> str:
    return "data:image/png;base64," + base64.b64encode(path.read_bytes()).decode("ascii")


class TestImageLoaderLoad:
    """Tests for ImageLoader.load."""

    def test_load_when_file_path_then_decoded_and_cached(self, sample_image):
        # Arrange
        loader = ImageLoader()

        # Act
        image = asyncio.run(loader.load(str(sample_image)))

        # Assert
        assert image.size == (200, 100)
        assert image.mode == "RGB"
        assert loader.cache[str(sample_image)] is image

    def test_load_when_file_url_then_decoded(self, sample_image):
        image = asyncio.run(ImageLoader().load(f"file://{sample_image}"))
        assert image.size == (200, 100)

    def test_load_when_data_url_then_decoded(self, sample_image):
        image = asyncio.run(ImageLoader().load(_data_url(sample_image)))
        assert image.getpixel((0, 0)) == (255, 0, 0)

    def test_load_when_data_url_unpadded_then_decoded(self, sample_image):
        url = _data_url(sample_image).rstrip("=")
        assert asyncio.run(ImageLoader().load(url)).size == (200, 100)

    def test_load_when_cached_then_source_not_read(self, sample_image):
        loader = ImageLoader()
        first = asyncio.run(loader.load(str(sample_image)))
        sample_image.unlink()
        assert asyncio.run(loader.load(str(sample_image))) is first

    def test_load_when_file_missing_then_raises(self, tmp_path):
        with pytest.raises(ImageLoadError, match="file not found"):
            asyncio.run(ImageLoader().load(str(tmp_path / "missing.png")))

    def test_load_when_not_an_image_then_decode_error(self, tmp_path):
        path = tmp_path / "notes.png"
        path.write_bytes(b"definitely not a png")
        with pytest.raises(ImageLoadError, match="decode failed"):
            asyncio.run(ImageLoader().load(str(path)))

    def test_load_when_data_url_not_base64_then_raises(self):
        with pytest.raises(ImageLoadError, match="base64"):
            asyncio.run(ImageLoader().load("data:text/plain,hello"))

    def test_load_when_failed_then_not_cached(self, tmp_path):
        loader = ImageLoader()
        with pytest.raises(ImageLoadError):
            asyncio.run(loader.load(str(tmp_path / "missing.png")))
        assert loader.cache == {}

    def test_load_when_palette_image_then_converted(self, tmp_path):
        path = tmp_path / "palette.png"
        Image.new("P", (10, 10)).save(path)
        assert asyncio.run(ImageLoader().load(str(path))).mode in ("RGB", "RGBA")


class TestImageLoaderLoadMany:
    """Tests for ImageLoader.load_many."""

    def test_load_many_when_duplicates_then_one_entry_per_url(self, sample_image):
        url = str(sample_image)
        results = asyncio.run(ImageLoader().load_many([url, url, url]))
        assert list(results) == [url]

    def test_load_many_when_one_fails_then_others_unaffected(self, sample_image, tmp_path):
        # Arrange
        good = str(sample_image)
        bad = str(tmp_path / "missing.png")

        # Act
        results = asyncio.run(ImageLoader().load_many([bad, good]))

        # Assert
        assert isinstance(results[bad], ImageLoadError)
        assert results[bad].url == bad
        assert results[good].size == (200, 100)

    def test_load_many_when_empty_then_empty(self):
        assert asyncio.run(ImageLoader().load_many([])) == {}

    def test_load_many_when_shared_cache_then_reused_across_loaders(self, sample_image):
        cache = {}
        asyncio.run(ImageLoader(cache).load_many([str(sample_image)]))
        sample_image.unlink()
        results = asyncio.run(ImageLoader(cache).load_many([str(sample_image)]))
        assert results[str(sample_image)].size == (200, 100)


def _art_app(png: bytes) -> web.Application:
    """Serves /art.png, 404s /missing.png and stalls on /slow.png."""
    async def art(request):
        return web.Response(body=png, content_type="image/png")

    async def slow(request):
        await asyncio.sleep(1)
        return web.Response(body=png, content_type="image/png")

    app = web.Application()
    app.router.add_get("/art.png", art)
    app.router.add_get("/slow.png", slow)
    return app


async def _with_server(png: bytes, action):
    server = test_utils.TestServer(_art_app(png))
    await server.start_server()
    try:
        return await action(server)
    finally:
        await server.close()


class TestImageLoaderHttp:
    """Tests for http(s) sources."""

    def test_load_when_http_ok_then_decoded_and_cached(self, sample_image):
        # Arrange
        loader = ImageLoader()

        async def fetch(server):
            url = str(server.make_url("/art.png"))
            return url, await loader.load(url)

        # Act
        url, image = asyncio.run(_with_server(sample_image.read_bytes(), fetch))

        # Assert
        assert image.size == (200, 100)
        assert loader.cache[url] is image

    def test_load_when_http_404_then_load_error(self, sample_image):
        async def fetch(server):
            await ImageLoader().load(str(server.make_url("/missing.png")))

        with pytest.raises(ImageLoadError, match="ClientResponseError"):
            asyncio.run(_with_server(sample_image.read_bytes(), fetch))

    def test_load_when_http_timeout_then_load_error(self, sample_image):
        loader = ImageLoader(timeout=0.1)

        async def fetch(server):
            await loader.load(str(server.make_url("/slow.png")))

        with pytest.raises(ImageLoadError, match="fetch failed"):
            asyncio.run(_with_server(sample_image.read_bytes(), fetch))
        assert loader.cache == {}

    def test_load_many_when_http_mixed_then_failures_per_url(self, sample_image):
        # Arrange
        async def fetch(server):
            good = str(server.make_url("/art.png"))
            bad = str(server.make_url("/missing.png"))
            return good, bad, await ImageLoader().load_many([good, bad])

        # Act
        good, bad, results = asyncio.run(_with_server(sample_image.read_bytes(), fetch))

        # Assert
        assert results[good].size == (200, 100)
        assert isinstance(results[bad], ImageLoadError)

    def test_compose_when_http_404_then_placeholder_and_page_drawn(
        self, sample_image, make_panel, default_page, caplog
    ):
        # Arrange
        compositor = Compositor(CompositorConfig())

        async def compose(server):
            rendered = render_page(default_page, [
                make_panel(0, image_url=str(server.make_url("/art.png"))),
                make_panel(1, image_url=str(server.make_url("/missing.png"))),
            ])
            return await compositor.compose(rendered)

        # Act
        image = asyncio.run(_with_server(sample_image.read_bytes(), compose))

        # Assert
        r, g, b = image.getpixel((100, 100))[:3]
        assert r > 240 and g < 20 and b < 20
        assert image.getpixel((700, 100)) == (224, 224, 224)
        assert "fetch failed" in caplog.text
