"""Community palette assignment and color helpers."""
from __future__ import annotations

import logging
import re
from typing import List, Tuple

import numpy as np
from sklearn.cluster import KMeans

from simnet.config import PaletteConfig

LOGGER = logging.getLogger(__name__)

_SRGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)
_D65_WHITE = np.array([0.95047, 1.0, 1.08883])
_LAB_EPSILON = (6.0 / 29.0) ** 3
_MAX_SAMPLING_ROUNDS = 20
_RGBA_ALPHA = re.compile(r"[\d.]+\)$")


def srgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert an ``(n, 3)`` array of sRGB values in ``[0, 1]`` to CIELAB (D65)."""

    linear = np.where(rgb <= 0.04045, rgb / 12.92, ((rgb + 0.055) / 1.055) ** 2.4)
    xyz = linear @ _SRGB_TO_XYZ.T / _D65_WHITE
    f = np.where(xyz > _LAB_EPSILON, np.cbrt(xyz), xyz / (3 * (6.0 / 29.0) ** 2) + 4.0 / 29.0)
    lightness = 116.0 * f[:, 1] - 16.0
    a = 500.0 * (f[:, 0] - f[:, 1])
    b = 200.0 * (f[:, 1] - f[:, 2])
    return np.stack([lightness, a, b], axis=1)


def rgb_to_hex(rgb: np.ndarray) -> str:
    channels = np.clip(np.rint(np.asarray(rgb) * 255.0), 0, 255).astype(int)
    return "#{:02x}{:02x}{:02x}".format(*channels)


def parse_hex(color: str) -> Tuple[int, int, int]:
    """Return the RGB channels of ``#rgb`` or ``#rrggbb``."""

    value = color.strip().lstrip("#")
    if len(value) == 3:
        value = "".join(channel * 2 for channel in value)
    if len(value) != 6:
        msg = f"Unsupported hex color: {color!r}"
        raise ValueError(msg)
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def with_alpha(color: str, alpha: float, *, fallback: str = "#03c75a") -> str:
    """Return ``color`` as an ``rgba(...)`` string with the given alpha.

    Hex, ``rgb(...)`` and ``rgba(...)`` inputs are supported; anything else
    yields the fallback color at that alpha.
    """

    alpha_text = f"{alpha:g}"
    cleaned = color.strip()
    if cleaned.startswith("#"):
        try:
            red, green, blue = parse_hex(cleaned)
        except ValueError:
            return with_alpha(fallback, alpha)
        return f"rgba({red}, {green}, {blue}, {alpha_text})"
    if cleaned.startswith("rgb("):
        return cleaned.replace("rgb(", "rgba(").replace(")", f", {alpha_text})")
    if cleaned.startswith("rgba("):
        return _RGBA_ALPHA.sub(f"{alpha_text})", cleaned)
    return with_alpha(fallback, alpha)


def _sample_candidates(count: int, settings: PaletteConfig, rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
    """Draw in-gamut colors whose chroma and lightness fall in the configured bounds."""

    target = max(settings.sample_count, count * 10)
    kept_rgb: List[np.ndarray] = []
    kept_lab: List[np.ndarray] = []
    total = 0
    for _ in range(_MAX_SAMPLING_ROUNDS):
        rgb = rng.random((settings.sample_count, 3))
        lab = srgb_to_lab(rgb)
        chroma = np.hypot(lab[:, 1], lab[:, 2])
        mask = (
            (chroma >= settings.chroma_min)
            & (chroma <= settings.chroma_max)
            & (lab[:, 0] >= settings.lightness_min)
            & (lab[:, 0] <= settings.lightness_max)
        )
        kept_rgb.append(rgb[mask])
        kept_lab.append(lab[mask])
        total += int(mask.sum())
        if total >= target:
            break
    rgb_samples = np.concatenate(kept_rgb)
    lab_samples = np.concatenate(kept_lab)
    if len(rgb_samples) < count:
        LOGGER.warning(
            "Only %d colors satisfy palette bounds for %d communities; sampling without bounds",
            len(rgb_samples),
            count,
        )
        rgb_samples = rng.random((target, 3))
        lab_samples = srgb_to_lab(rgb_samples)
    return rgb_samples, lab_samples


def _kmeans(samples: np.ndarray, count: int, settings: PaletteConfig) -> np.ndarray:
    model = KMeans(n_clusters=count, n_init=1, max_iter=settings.iterations, random_state=settings.seed)
    return model.fit(samples).cluster_centers_


def _snap_to_samples(centroids: np.ndarray, samples: np.ndarray) -> List[int]:
    """Return a distinct sample index for each centroid, nearest first."""

    chosen: List[int] = []
    taken: set[int] = set()
    for centroid in centroids:
        order = np.argsort(((samples - centroid) ** 2).sum(axis=1))
        for candidate in order:
            index = int(candidate)
            if index not in taken:
                taken.add(index)
                chosen.append(index)
                break
    return chosen


def _order_by_contrast(lab: np.ndarray) -> List[int]:
    """Greedy farthest-first ordering so early indices are the most distinct."""

    remaining = list(range(len(lab)))
    ordered = [remaining.pop(0)]
    while remaining:
        picked = lab[ordered]
        gaps = [float(((picked - lab[index]) ** 2).sum(axis=1).min()) for index in remaining]
        ordered.append(remaining.pop(int(np.argmax(gaps))))
    return ordered


def _generate(count: int, settings: PaletteConfig) -> Tuple[str, ...]:
    rng = np.random.default_rng(settings.seed)
    rgb_samples, lab_samples = _sample_candidates(count, settings, rng)
    centroids = _kmeans(lab_samples, count, settings)
    chosen = _snap_to_samples(centroids, lab_samples)
    ordering = _order_by_contrast(lab_samples[chosen])
    return tuple(rgb_to_hex(rgb_samples[chosen[index]]) for index in ordering)


def generate_palette(count: int, settings: PaletteConfig) -> List[str]:
    """Generate ``count`` perceptually distinct colors.

    Colors are k-means centroids over CIELAB samples bounded in chroma and
    lightness, snapped back to sampled in-gamut colors. The generator is
    seeded with ``settings.seed`` so equal counts give equal lists.
    """

    if count <= 0:
        return []
    return list(_generate(count, settings))


def assign_palette(count: int, settings: PaletteConfig) -> List[str]:
    """Return one color per community index.

    Up to ``len(settings.fixed_colors)`` communities use the fixed palette,
    so index ``i`` always maps to the same color; larger counts switch to
    ``generate_palette``.
    """

    if count <= 0:
        return []
    if count <= len(settings.fixed_colors):
        return list(settings.fixed_colors[:count])
    LOGGER.info("Generating palette for %d communities (seed=%d)", count, settings.seed)
    return generate_palette(count, settings)
