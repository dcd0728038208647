"""
Draw the Still Water icon: a drop falling onto concentric ripples.
Used for the window and tray icon; run standalone to write icon files.
"""
import math
import os

from PIL import Image, ImageDraw


BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
TEAL = (15, 118, 110)
DARK_TEAL = (13, 61, 61)
LIGHT_TEAL = (45, 212, 191)
FOAM = (204, 251, 241)
GRAY = (110, 118, 118)
DARK_GRAY = (70, 76, 76)
LIGHT_GRAY = (160, 166, 166)


def draw_drop(draw, cx, cy, r, fill, outline, width=1):
    """Teardrop: a circle of radius r with a point rising above it."""
    tip_y = cy - r * 2.2
    # Tangent points from the tip to the circle
    d = cy - tip_y
    a = math.asin(r / d)
    tx = r * math.cos(a)
    ty = cy - r * math.sin(a)
    draw.polygon([(cx, tip_y), (cx - tx, ty), (cx + tx, ty)], fill=fill)
    draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=fill)
    draw.line([(cx, tip_y), (cx - tx, ty)], fill=outline, width=width)
    draw.line([(cx, tip_y), (cx + tx, ty)], fill=outline, width=width)
    # Lower outline runs clockwise from the right tangent to the left one
    draw.arc([cx - r, cy - r, cx + r, cy + r], start=-math.degrees(a),
             end=180 + math.degrees(a), fill=outline, width=width)


def create_icon(size=64, paused=False):
    """Create one RGBA icon image at the given pixel size."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    s = size / 64  # designed at 64px base
    w = max(1, int(s))

    if paused:
        water, deep, bright, foam = GRAY, DARK_GRAY, LIGHT_GRAY, WHITE
    else:
        water, deep, bright, foam = TEAL, DARK_TEAL, LIGHT_TEAL, FOAM

    # ── Pool: flattened disc, dark edge ──
    cx, cy = size / 2, 42 * s
    rx, ry = 29 * s, 17 * s
    draw.ellipse([cx - rx, cy - ry, cx + rx, cy + ry], fill=deep)
    draw.ellipse([cx - rx + 2 * w, cy - ry + 2 * w, cx + rx - 2 * w, cy + ry - 2 * w], fill=water)

    # ── Ripples ──
    for i, k in enumerate((0.75, 0.5, 0.25)):
        color = bright if i % 2 == 0 else foam
        draw.ellipse([cx - rx * k, cy - ry * k, cx + rx * k, cy + ry * k],
                     outline=color, width=w)

    # ── Drop ──
    dr = 6 * s
    draw_drop(draw, cx, 24 * s, dr, fill=bright, outline=deep, width=w)
    # Highlight
    hr = max(1, dr / 3)
    hx, hy = cx - dr / 3, 24 * s - dr / 3
    draw.ellipse([hx - hr, hy - hr, hx + hr, hy + hr], fill=WHITE)

    return img


def generate_icon(directory="."):
    """Generate icon.ico and icon.png files in directory."""
    sizes = [16, 32, 48, 64, 128, 256]
    images = [create_icon(s) for s in sizes]
    # ICO: largest first, smaller sizes appended
    images[-1].save(os.path.join(directory, "icon.ico"), format="ICO",
                    append_images=images[:-1])
    images[-1].save(os.path.join(directory, "icon.png"), format="PNG")


if __name__ == "__main__":
    generate_icon()
    preview = create_icon(512)
    preview.save("icon_preview.png", format="PNG")
    print("Generated icon.ico, icon.png, and icon_preview.png (512px)")
