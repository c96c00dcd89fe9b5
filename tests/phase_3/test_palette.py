from __future__ import annotations

import re

import pytest

from simnet.communities import assign_palette, generate_palette, with_alpha
from simnet.config import PaletteConfig, load_config

HEX = re.compile(r"^#[0-9a-f]{6}$")


@pytest.fixture(name="palette")
def fixture_palette() -> PaletteConfig:
    return load_config().palette


@pytest.mark.parametrize("count", [1, 3, 10])
def test_small_counts_use_fixed_palette_prefix(palette: PaletteConfig, count: int) -> None:
    assert assign_palette(count, palette) == palette.fixed_colors[:count]


def test_zero_count_yields_no_colors(palette: PaletteConfig) -> None:
    assert assign_palette(0, palette) == []
    assert generate_palette(0, palette) == []


def test_large_counts_generate_distinct_colors(palette: PaletteConfig) -> None:
    colors = assign_palette(15, palette)
    assert len(colors) == 15
    assert len(set(colors)) == 15
    assert all(HEX.match(color) for color in colors)


def test_palette_is_deterministic(palette: PaletteConfig) -> None:
    assert assign_palette(12, palette) == assign_palette(12, palette)
    assert generate_palette(4, palette) == generate_palette(4, palette)


def test_palette_seed_changes_generated_colors(palette: PaletteConfig) -> None:
    reseeded = palette.model_copy(update={"seed": palette.seed + 1})
    assert generate_palette(12, palette) != generate_palette(12, reseeded)


@pytest.mark.parametrize(
    ("color", "expected"),
    [
        ("#666666", "rgba(102, 102, 102, 0.1)"),
        ("#03c75a", "rgba(3, 199, 90, 0.1)"),
        ("#fff", "rgba(255, 255, 255, 0.1)"),
        ("rgb(1, 2, 3)", "rgba(1, 2, 3, 0.1)"),
        ("rgba(1, 2, 3, 1)", "rgba(1, 2, 3, 0.1)"),
        ("not-a-color", "rgba(3, 199, 90, 0.1)"),
    ],
)
def test_with_alpha(color: str, expected: str) -> None:
    assert with_alpha(color, 0.1) == expected
