"""Top-level package for the manga page layout & composition engine.

Provides subpackages:
- mangakit.core – records, geometry and rendered-output models
- mangakit.layout – coordinate transforms, template registry, page renderer
- mangakit.bubbles – speech bubble placement engine
- mangakit.compositor – raster compositing and export
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("mangakit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 The mangakit authors. Licensed under the MIT License"

# layout before bubbles: bubbles.placement imports layout.config
from .layout import render_page  # noqa: E402
from .compositor import Compositor, compose_page_image  # noqa: E402

__all__: list[str] = ["__version__", "__copyright__", "render_page", "Compositor", "compose_page_image"]
