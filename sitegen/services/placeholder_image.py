"""Deterministic placeholder images for posts, series and pages.

Each image is a low-poly triangle pattern rendered as SVG. The pattern is
driven by a small seeded PRNG keyed on a string (post title, series id or
page path), so the same key always produces the same file name and the
same bytes. That keeps rebuilds reproducible and cache-friendly.
"""

import hashlib
import logging
import math
import secrets
from collections.abc import Callable
from pathlib import Path

from sitegen.config import get_settings
from sitegen.models.node import ContentNode, ImageRef

logger = logging.getLogger(__name__)

IMAGE_WIDTH = 1200
IMAGE_HEIGHT = 630
CELL_SIZE = 75
# Fraction of a cell each grid point may drift
VARIANCE = 0.75

# Diverging ColorBrewer schemes (5-class)
PALETTES: dict[str, list[str]] = {
    "PuOr": ["#e66101", "#fdb863", "#f7f7f7", "#b2abd2", "#5e3c99"],
    "PRGn": ["#7b3294", "#c2a5cf", "#f7f7f7", "#a6dba0", "#008837"],
    "PiYG": ["#d01c8b", "#f1b6da", "#f7f7f7", "#b8e186", "#4dac26"],
    "RdBu": ["#ca0020", "#f4a582", "#f7f7f7", "#92c5de", "#0571b0"],
    "RdYlBu": ["#d7191c", "#fdae61", "#ffffbf", "#abd9e9", "#2c7bb6"],
    "Spectral": ["#d7191c", "#fdae61", "#ffffbf", "#abdda4", "#2b83ba"],
    "RdYlGn": ["#d7191c", "#fdae61", "#ffffbf", "#a6d96a", "#1a9641"],
}
COLOR_SCHEMES = list(PALETTES)

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


def xmur3(text: str) -> Callable[[], int]:
    """Hash a string into a generator of 32-bit seeds."""
    h = (1779033703 ^ len(text)) & _MASK32
    for ch in text:
        h = _imul(h ^ ord(ch), 3432918353)
        h = ((h << 13) | (h >> 19)) & _MASK32

    def next_seed() -> int:
        nonlocal h
        h = _imul(h ^ (h >> 16), 2246822507)
        h = _imul(h ^ (h >> 13), 3266489909)
        h ^= h >> 16
        return h

    return next_seed


class Mulberry32:
    """Small-state PRNG yielding floats in [0, 1).

    Not suitable for anything security related.
    """

    def __init__(self, seed: str | None = None) -> None:
        if not seed:
            seed = secrets.token_hex(8)
        self._state = xmur3(seed)()

    def random(self) -> float:
        a = (self._state + 0x6D2B79F5) & _MASK32
        self._state = a
        t = _imul(a ^ (a >> 15), 1 | a)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


def _interpolate(palette: list[str], t: float) -> str:
    """Pick a color at position t (0..1) along a palette gradient."""
    t = min(max(t, 0.0), 1.0)
    scaled = t * (len(palette) - 1)
    lo = int(math.floor(scaled))
    hi = min(lo + 1, len(palette) - 1)
    frac = scaled - lo
    r1, g1, b1 = _hex_to_rgb(palette[lo])
    r2, g2, b2 = _hex_to_rgb(palette[hi])
    r = round(r1 + (r2 - r1) * frac)
    g = round(g1 + (g2 - g1) * frac)
    b = round(b1 + (b2 - b1) * frac)
    return f"#{r:02x}{g:02x}{b:02x}"


def get_image_content(key: str) -> bytes:
    """Render the SVG placeholder pattern for a key."""
    rng = Mulberry32(key)
    palette = list(PALETTES[COLOR_SCHEMES[int(rng.random() * len(COLOR_SCHEMES))]])
    if rng.random() < 0.5:
        palette.reverse()

    # Grid overhangs the canvas by one cell so jittered edges stay covered
    cols = math.ceil(IMAGE_WIDTH / CELL_SIZE) + 2
    rows = math.ceil(IMAGE_HEIGHT / CELL_SIZE) + 2
    drift = VARIANCE * CELL_SIZE
    points = [
        [
            (
                (col - 1) * CELL_SIZE + (rng.random() - 0.5) * drift,
                (row - 1) * CELL_SIZE + (rng.random() - 0.5) * drift,
            )
            for col in range(cols + 1)
        ]
        for row in range(rows + 1)
    ]

    polygons: list[str] = []
    for row in range(rows):
        for col in range(cols):
            p00 = points[row][col]
            p10 = points[row][col + 1]
            p01 = points[row + 1][col]
            p11 = points[row + 1][col + 1]
            if rng.random() < 0.5:
                triangles = [(p00, p10, p11), (p00, p11, p01)]
            else:
                triangles = [(p00, p10, p01), (p10, p11, p01)]
            for tri in triangles:
                cx = sum(p[0] for p in tri) / 3
                cy = sum(p[1] for p in tri) / 3
                t = (cx / IMAGE_WIDTH) * 0.7 + (cy / IMAGE_HEIGHT) * 0.3
                t += (rng.random() - 0.5) * 0.1
                fill = _interpolate(palette, t)
                coords = " ".join(f"{x:.1f},{y:.1f}" for x, y in tri)
                polygons.append(
                    f'<polygon points="{coords}" fill="{fill}" '
                    f'stroke="{fill}" stroke-width="0.5"/>'
                )

    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{IMAGE_WIDTH}" '
        f'height="{IMAGE_HEIGHT}" viewBox="0 0 {IMAGE_WIDTH} {IMAGE_HEIGHT}">'
        + "".join(polygons)
        + "</svg>\n"
    )
    return svg.encode()


def get_image_path(key: str) -> str:
    """URL path of the placeholder image for a key."""
    settings = get_settings()
    digest = hashlib.sha256(key.encode()).hexdigest()[:16]
    return f"/{settings.generated_images_dir.strip('/')}/{digest}.svg"


def save_image(key: str) -> str:
    """Write the placeholder image for *key* under the static dir.

    Returns the URL path recorded on nodes.
    """
    settings = get_settings()
    url_path = get_image_path(key)
    target = Path(settings.static_dir) / url_path.lstrip("/")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(get_image_content(key))
    logger.debug("Wrote placeholder image %s for %r", url_path, key[:60])
    return url_path


def ensure_image(node: ContentNode, key: str) -> ImageRef:
    """Attach a placeholder image to *node* unless it already has one."""
    if node.image is None:
        node.image = ImageRef()
    if not node.image.path:
        node.image.path = save_image(key)
    return node.image
