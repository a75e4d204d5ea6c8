"""
Color Extractor — Build a theme palette from a logo image.

The image is reduced to a small quantized palette with Pillow, and the
quantized colours are sorted into six swatches by saturation and lightness
(vibrant, dark vibrant, light vibrant, muted, dark muted, light muted). The
most common colour wins each swatch and no colour fills two swatches.

A light or dark theme is chosen from the dominant swatch, then:

    dark theme:  background = dark muted,  text = light muted, accent = vibrant
    light theme: background = light muted, text = dark muted,  accent = vibrant

primary/secondary are shifts of the background. If background and text
luminance differ by less than 0.4 the text falls back to near-white or
near-black.
"""

import colorsys
from typing import Dict, List, Optional, Tuple

from PIL import Image

RGB = Tuple[int, int, int]

SAMPLE_SIZE = (128, 128)
PALETTE_SIZE = 16
MIN_CONTRAST = 0.4

# (name, min lightness, max lightness, min saturation, max saturation)
SWATCH_RULES = (
    ("vibrant", 0.3, 0.7, 0.35, 1.0),
    ("dark_vibrant", 0.0, 0.45, 0.35, 1.0),
    ("light_vibrant", 0.55, 1.0, 0.35, 1.0),
    ("muted", 0.3, 0.7, 0.0, 0.4),
    ("dark_muted", 0.0, 0.45, 0.0, 0.4),
    ("light_muted", 0.55, 1.0, 0.0, 0.4),
)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return "#" + "".join(f"{max(0, min(255, round(c))):02x}" for c in (r, g, b))


def hex_to_rgb(hex_color: str) -> RGB:
    value = hex_color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def get_luminance(hex_color: str) -> float:
    r, g, b = (c / 255 for c in hex_to_rgb(hex_color))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def is_light(hex_color: str) -> bool:
    return get_luminance(hex_color) > 0.5


def darken(hex_color: str, amount: float) -> str:
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(r * (1 - amount), g * (1 - amount), b * (1 - amount))


def lighten(hex_color: str, amount: float) -> str:
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(
        r + (255 - r) * amount,
        g + (255 - g) * amount,
        b + (255 - b) * amount,
    )


def _quantized_colors(image_path: str) -> List[Tuple[int, RGB]]:
    """(pixel count, rgb) pairs for the image's reduced palette, most common first."""
    with Image.open(image_path) as img:
        img = img.convert("RGB")
        img.thumbnail(SAMPLE_SIZE)
        quantized = img.quantize(colors=PALETTE_SIZE)
        palette = quantized.getpalette()
        counts = quantized.getcolors() or []

    colors = []
    for count, index in counts:
        rgb = tuple(palette[index * 3:index * 3 + 3])
        colors.append((count, rgb))
    return sorted(colors, key=lambda item: item[0], reverse=True)


def classify_swatches(colors: List[Tuple[int, RGB]]) -> Dict[str, Optional[str]]:
    """Assign the most common matching colour to each swatch name."""
    swatches: Dict[str, Optional[str]] = {}
    used = set()

    for name, min_l, max_l, min_s, max_s in SWATCH_RULES:
        swatches[name] = None
        for _, rgb in colors:
            if rgb in used:
                continue
            _, lightness, saturation = colorsys.rgb_to_hls(*(c / 255 for c in rgb))
            if min_l <= lightness <= max_l and min_s <= saturation <= max_s:
                swatches[name] = rgb_to_hex(*rgb)
                used.add(rgb)
                break

    return swatches


def build_palette(swatches: Dict[str, Optional[str]]) -> Dict[str, str]:
    """Turn classified swatches into background/primary/secondary/accent/text."""
    dominant = swatches.get("vibrant") or swatches.get("dark_vibrant") or swatches.get("muted") or "#1a1a1a"
    use_dark_theme = not is_light(dominant)

    if use_dark_theme:
        background = swatches.get("dark_muted") or swatches.get("dark_vibrant") or darken(dominant, 0.8)
        text = swatches.get("light_muted") or swatches.get("light_vibrant") or "#e5e5e5"
        primary = darken(background, 0.3)
        secondary = lighten(background, 0.1)
        accent = swatches.get("vibrant") or swatches.get("light_vibrant") or "#d4af37"
    else:
        background = swatches.get("light_muted") or swatches.get("light_vibrant") or lighten(dominant, 0.9)
        text = swatches.get("dark_muted") or swatches.get("dark_vibrant") or "#1a1a1a"
        primary = lighten(background, 0.3)
        secondary = darken(background, 0.1)
        accent = swatches.get("vibrant") or swatches.get("dark_vibrant") or "#2563eb"

    if abs(get_luminance(background) - get_luminance(text)) < MIN_CONTRAST:
        text = "#f5f5f5" if use_dark_theme else "#0a0a0a"

    return {
        "background": background,
        "primary": primary,
        "secondary": secondary,
        "accent": accent,
        "text": text,
    }


def extract_colors_from_image(image_path: str) -> Dict[str, str]:
    """Extract a five-colour theme palette from an image file.

    Raises:
        OSError: If the image cannot be opened or decoded.
    """
    return build_palette(classify_swatches(_quantized_colors(image_path)))


# Default palette and layout for each preset
PRESET_PALETTES = {
    "penthouse": "after-midnight",
    "mosh-pit": "blood-chrome",
    "honky-tonk": "sawdust",
    "neon-stage": "highlighter",
    "front-porch": "porch-light",
    "boom-bap": "concrete-jungle",
    "garage": "xerox-punk",
    "gallery": "gallery-white",
}

PRESET_LAYOUTS = {
    "penthouse": {"layout": "bold", "nav": "sidebar", "animation": "dynamic"},
    "mosh-pit": {"layout": "bold", "nav": "hamburger", "animation": "none"},
    "honky-tonk": {"layout": "standard", "nav": "topbar", "animation": "subtle"},
    "neon-stage": {"layout": "editorial", "nav": "topbar", "animation": "dynamic"},
    "front-porch": {"layout": "standard", "nav": "topbar", "animation": "subtle"},
    "boom-bap": {"layout": "editorial", "nav": "hamburger", "animation": "subtle"},
    "garage": {"layout": "standard", "nav": "hamburger", "animation": "none"},
    "gallery": {"layout": "editorial", "nav": "topbar", "animation": "subtle"},
}
