"""Pillow drawing helpers: the particle surface, backdrop gradient and breathing rings."""
from __future__ import annotations

from typing import Optional, Sequence

from PIL import Image, ImageDraw


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """'#0ea5e9' or '0ea5e9' -> (14, 165, 233)."""
    c = color.lstrip("#")
    if len(c) == 3:
        c = "".join(ch * 2 for ch in c)
    return int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16)


def _rgba(color: str, opacity: float) -> tuple[int, int, int, int]:
    alpha = int(round(max(0.0, min(1.0, opacity)) * 255))
    return hex_to_rgb(color) + (alpha,)


class ImageSurface:
    """Transparent RGBA layer that particles are drawn onto each frame.

    Shapes write their color and alpha straight into the layer; composite()
    blends the layer over the background once per frame.
    """

    def __init__(self, width: int, height: int, background: Optional[Image.Image] = None):
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        if background is None:
            background = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 255))
        self.background = background.convert("RGBA").resize((self.width, self.height))
        self.layer = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))
        self._draw = ImageDraw.Draw(self.layer)

    def clear(self) -> None:
        self._draw.rectangle([0, 0, self.width, self.height], fill=(0, 0, 0, 0))

    def fill_circle(self, x: float, y: float, r: float, color: str, opacity: float = 1.0) -> None:
        self._draw.ellipse([x - r, y - r, x + r, y + r], fill=_rgba(color, opacity))

    def stroke_circle(self, x: float, y: float, r: float, color: str,
                      opacity: float = 1.0, width: int = 1) -> None:
        self._draw.ellipse([x - r, y - r, x + r, y + r],
                           outline=_rgba(color, opacity), width=width)

    def line(self, x0: float, y0: float, x1: float, y1: float, color: str,
             opacity: float = 1.0, width: int = 1) -> None:
        self._draw.line([(x0, y0), (x1, y1)], fill=_rgba(color, opacity), width=width)

    def composite(self) -> Image.Image:
        return Image.alpha_composite(self.background, self.layer)


def gradient(width: int, height: int, primary: str, secondary: str) -> Image.Image:
    """Diagonal (top-left to bottom-right) blend from primary to secondary."""
    width, height = max(1, int(width)), max(1, int(height))
    # Build a small horizontal ramp, stretch it, then rotate the diagonal in
    c0, c1 = hex_to_rgb(primary), hex_to_rgb(secondary)
    steps = 256
    ramp = Image.new("RGB", (steps, 1))
    for i in range(steps):
        t = i / (steps - 1)
        ramp.putpixel((i, 0), tuple(int(a + (b - a) * t) for a, b in zip(c0, c1)))
    diag = max(width, height) * 2
    img = ramp.resize((diag, diag)).rotate(-45, resample=Image.BICUBIC, expand=False)
    left, top = (diag - width) // 2, (diag - height) // 2
    return img.crop((left, top, left + width, top + height)).convert("RGBA")


def tint(color: str, base: str, alpha: float) -> str:
    """Hex colour of `color` laid over `base` at the given alpha."""
    c, b = hex_to_rgb(color), hex_to_rgb(base)
    r, g, bl = (round(y + (x - y) * alpha) for x, y in zip(c, b))
    return f"#{r:02x}{g:02x}{bl:02x}"


BACKDROP_ALPHA = (0x20 / 255, 0x40 / 255)  # primary, secondary


def backdrop(width: int, height: int, primary: str, secondary: str, base: str) -> Image.Image:
    """Pale environment gradient: both colours washed over the card colour."""
    a0, a1 = BACKDROP_ALPHA
    return gradient(width, height, tint(primary, base, a0), tint(secondary, base, a1))


# Six bands from dark outer glow to bright core
RING_PALETTE = [
    (13, 61, 61),
    (10, 92, 82),
    (15, 118, 110),
    (16, 153, 142),
    (20, 184, 166),
    (45, 212, 191),
]
RING_STEP = 0.18  # radius multiplier increment per ring


def draw_rings(img_w: int, img_h: int, core_r: float, bg: Sequence[int],
               palette: Sequence[Sequence[int]] = RING_PALETTE) -> Image.Image:
    """Draw concentric rings around a core of radius core_r."""
    img = Image.new("RGB", (img_w, img_h), tuple(bg))
    draw = ImageDraw.Draw(img)
    cx, cy = img_w // 2, img_h // 2
    n = len(palette)
    for i, rgb in enumerate(palette):
        factor = 1.0 + (n - 1 - i) * RING_STEP
        r = core_r * factor
        draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=tuple(rgb))
    return img


def rings_core_radius(img_w: int, img_h: int, scale: float, max_scale: float = 1.5,
                      pad: int = 8) -> float:
    """Core radius for a circle scale, sized so max_scale just fits the image."""
    outermost = 1.0 + (len(RING_PALETTE) - 1) * RING_STEP
    half = min(img_w, img_h) / 2
    max_r = max(1.0, (half - pad) / outermost)
    return max_r * scale / max_scale
