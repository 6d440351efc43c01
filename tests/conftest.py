import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import adaptive_images
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


def _gradient(size, mode="RGB"):
    """Image with varying pixels so encoders have real work to do."""
    small = Image.new("RGB", (32, 32))
    small.putdata([
        (x * 8, y * 8, (x + y) * 4)
        for y in range(32)
        for x in range(32)
    ])
    return small.resize(size, Image.Resampling.BILINEAR).convert(mode)


@pytest.fixture
def make_image():
    """Factory writing a gradient image of a given size and format."""
    def _make(path: Path, size=(320, 180), mode="RGB", fmt=None):
        path.parent.mkdir(parents=True, exist_ok=True)
        _gradient(size, mode).save(path, format=fmt)
        return path
    return _make


@pytest.fixture
def make_gif():
    """Factory writing a two-frame animated GIF."""
    def _make(path: Path, size=(64, 48)):
        path.parent.mkdir(parents=True, exist_ok=True)
        frames = [Image.new("P", size, color=i) for i in (1, 2)]
        frames[0].save(path, save_all=True, append_images=frames[1:], duration=100, loop=0)
        return path
    return _make


@pytest.fixture
def asset_tree(tmp_path: Path, make_image, make_gif):
    """
    Source tree with one image per supported format.

    assets/
    ├── hero.jpg         (1920x1080)
    ├── icons/logo.png   (600x600, RGBA)
    ├── loader.gif       (animated)
    └── photo.webp       (800x400)
    """
    root = tmp_path / "assets"
    make_image(root / "hero.jpg", size=(1920, 1080))
    make_image(root / "icons" / "logo.png", size=(600, 600), mode="RGBA")
    make_gif(root / "loader.gif")
    make_image(root / "photo.webp", size=(800, 400))
    return root
