"""
End-to-end naming contract tests

Every path the loader can request after a build must exist on disk:
the resolved derivative for any viewport and capability, and every
candidate in the prepared srcset.
"""

import itertools
from pathlib import Path

import pytest

from adaptive_images.core.models import ViewportContext
from adaptive_images.generator import GeneratorConfig, discover_sources, generate_derivatives
from adaptive_images.loader import (
    AdaptiveImageLoader,
    Capabilities,
    Placeholder,
    build_candidate_set,
    resolve_optimal_source,
)

WIDTHS = (0, 320, 480, 481, 768, 900, 1024, 1025, 2560)
RATIOS = (None, 1, 1.5, 2, 3)


@pytest.fixture
def built_tree(asset_tree):
    generate_derivatives(GeneratorConfig(source_root=asset_tree, write_manifest=False))
    return asset_tree


def _sources(root: Path):
    return [s.path.as_posix() for s in discover_sources(root)]


class TestNamingContract:
    """Generator output versus loader requests."""

    def test_resolved_paths_when_any_viewport_then_exist(self, built_tree):
        sources = _sources(built_tree)
        assert len(sources) == 4

        for src, width, ratio, webp in itertools.product(
            sources, WIDTHS, RATIOS, (True, False)
        ):
            path = resolve_optimal_source(src, ViewportContext(width, ratio), webp)
            assert Path(path).is_file(), f"{src} @ {width}x{ratio} webp={webp}: {path}"

    def test_candidate_urls_when_prepared_then_exist(self, built_tree):
        for src in _sources(built_tree):
            urls = build_candidate_set(src).urls
            assert len(urls) == 8
            for url in urls:
                assert Path(url).is_file(), url

    def test_loader_when_full_lifecycle_then_every_src_exists(self, built_tree):
        sizes = {"width": 400, "ratio": 2}
        loader = AdaptiveImageLoader(
            viewport=lambda: ViewportContext(sizes["width"], sizes["ratio"]),
            capabilities=Capabilities(webp=True, visibility_observer=False),
        )
        placeholders = [Placeholder({"data-src": src}) for src in _sources(built_tree)]

        loader.init(placeholders)
        for img in placeholders:
            assert Path(img.src).is_file()
            loader.on_load(img)

        sizes["width"], sizes["ratio"] = 1600, 1
        loader.on_resize()
        for img in placeholders:
            assert "-wide." in img.src
            assert Path(img.src).is_file()
