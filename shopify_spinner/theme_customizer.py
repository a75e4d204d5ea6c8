"""
Theme Customizer — Generate a customized copy of a local theme from config.

Pipeline context:
    `spinner theme push --config store.yaml` calls customize_theme() to write
    a customized copy of the theme directory, then pushes that copy with the
    Shopify CLI. The source theme is never modified.

What gets applied to config/settings_data.json, in order:
  1. Preset: settings_data["presets"]["<Title Cased Preset>"] merged into
     "current". A preset the theme does not define falls back to the
     built-in layout/navigation/animation defaults for that preset.
  2. layout_style, navigation_style, animation_level overrides.
  3. Logo copied to assets/logo<ext>; optional colour extraction into the
     custom_* keys (custom_colors_enabled = True).
  4. logo_width, then accent_override (also sets custom_accent when custom
     colours are on).
  5. Legacy colors -> custom_* keys, only when no preset is set.
  6. content -> sections["hero-index"] / sections["footer"] settings,
     social links -> footer social_* settings.
"""

import json
import logging
import os
import shutil
from typing import Any, Dict

from .color_extractor import PRESET_LAYOUTS, PRESET_PALETTES, extract_colors_from_image
from .config_schema import StoreConfig

logger = logging.getLogger(__name__)

SETTINGS_DATA_PATH = os.path.join("config", "settings_data.json")
SOCIAL_NETWORKS = ("instagram", "twitter", "youtube", "tiktok", "spotify")
CUSTOM_COLOR_KEYS = ("background", "text", "primary", "secondary", "accent")


def preset_display_name(preset: str) -> str:
    """'mosh-pit' -> 'Mosh Pit'"""
    return " ".join(word[:1].upper() + word[1:] for word in preset.split("-"))


def _section_settings(sections: Dict[str, Any], key: str, section_type: str) -> Dict[str, Any]:
    section = sections.setdefault(key, {"type": section_type, "settings": {}})
    return section.setdefault("settings", {})


def _apply_preset(current: Dict[str, Any], presets: Dict[str, Any], preset: str) -> None:
    preset_settings = presets.get(preset_display_name(preset))
    if isinstance(preset_settings, dict):
        current.update(preset_settings)
        return

    defaults = PRESET_LAYOUTS[preset]
    current["layout_style"] = defaults["layout"]
    current["navigation_style"] = defaults["nav"]
    current["animation_level"] = defaults["animation"]
    current["color_palette"] = PRESET_PALETTES[preset]


def _apply_logo(current: Dict[str, Any], theme_settings, config_path: str, output_path: str) -> None:
    logo_path = os.path.join(os.path.dirname(os.path.abspath(config_path)), theme_settings.logo)
    if not os.path.exists(logo_path):
        logger.warning("Logo not found: %s", logo_path)
        return

    extension = os.path.splitext(logo_path)[1] or ".png"
    logo_dest = os.path.join(output_path, "assets", f"logo{extension}")
    os.makedirs(os.path.dirname(logo_dest), exist_ok=True)
    shutil.copyfile(logo_path, logo_dest)

    if not theme_settings.extract_colors_from_logo:
        return

    try:
        extracted = extract_colors_from_image(logo_path)
    except OSError as e:
        print(f"  ⚠ Could not extract colors from logo: {e}")
        return

    current["custom_colors_enabled"] = True
    for key in CUSTOM_COLOR_KEYS:
        current[f"custom_{key}"] = extracted[key]


def customize_theme(config_path: str, config: StoreConfig, theme_path: str, output_path: str) -> str:
    """Write a customized copy of theme_path to output_path.

    Args:
        config_path: Path of the store config (logo paths are relative to it).
        config: The validated store config.
        theme_path: Source theme directory (must contain config/settings_data.json).
        output_path: Destination directory; replaced if it already exists.

    Returns:
        The path of the written settings_data.json.

    Raises:
        FileNotFoundError: If the source theme has no settings_data.json.
    """
    if os.path.exists(output_path):
        shutil.rmtree(output_path)
    shutil.copytree(theme_path, output_path)

    settings_path = os.path.join(output_path, SETTINGS_DATA_PATH)
    with open(settings_path, encoding="utf-8") as f:
        settings_data = json.load(f)

    current = settings_data.setdefault("current", {})
    presets = settings_data.get("presets", {})
    theme_settings = config.theme.settings if config.theme else None

    if theme_settings is None:
        return settings_path

    if theme_settings.preset:
        _apply_preset(current, presets, theme_settings.preset)

    if theme_settings.layout_style:
        current["layout_style"] = theme_settings.layout_style
    if theme_settings.navigation_style:
        current["navigation_style"] = theme_settings.navigation_style
    if theme_settings.animation_level:
        current["animation_level"] = theme_settings.animation_level

    if theme_settings.logo:
        _apply_logo(current, theme_settings, config_path, output_path)

    if theme_settings.logo_width:
        current["logo_width"] = int(theme_settings.logo_width)

    if theme_settings.accent_override:
        current["accent_override"] = theme_settings.accent_override
        if current.get("custom_colors_enabled"):
            current["custom_accent"] = theme_settings.accent_override

    colors = theme_settings.colors
    if not theme_settings.preset and colors:
        values = {key: getattr(colors, key) for key in CUSTOM_COLOR_KEYS}
        if any(values.values()):
            current["custom_colors_enabled"] = True
            for key, value in values.items():
                if value:
                    current[f"custom_{key}"] = value

    sections = current.setdefault("sections", {})

    content = theme_settings.content
    if content:
        hero = _section_settings(sections, "hero-index", "hero")
        if content.hero_heading:
            hero["heading"] = content.hero_heading
        else:
            hero["heading"] = config.store.name
        if content.hero_subheading:
            hero["subheading"] = content.hero_subheading
        if content.hero_button_text:
            hero["button_text"] = content.hero_button_text

        footer = _section_settings(sections, "footer", "footer")
        if content.tagline:
            footer["tagline"] = content.tagline

    social = theme_settings.social
    if social:
        footer = _section_settings(sections, "footer", "footer")
        for network in SOCIAL_NETWORKS:
            url = getattr(social, network)
            if url:
                footer[f"social_{network}"] = url

    with open(settings_path, "w", encoding="utf-8") as f:
        json.dump(settings_data, f, indent=2)

    return settings_path
