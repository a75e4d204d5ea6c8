"""Tests for shopify_spinner.theme_customizer and color_extractor."""

import json
from unittest.mock import patch

import pytest
from PIL import Image

from shopify_spinner.color_extractor import (
    build_palette,
    classify_swatches,
    darken,
    extract_colors_from_image,
    get_luminance,
    lighten,
)
from shopify_spinner.config_parser import parse_config
from shopify_spinner.theme_customizer import customize_theme, preset_display_name

BASE_SETTINGS = {
    "current": {"layout_style": "standard", "custom_colors_enabled": False},
    "presets": {"Mosh Pit": {"color_scheme": "blood-chrome", "layout_style": "bold"}},
}


@pytest.fixture
def theme_dir(tmp_path):
    theme = tmp_path / "themes" / "spinner"
    (theme / "config").mkdir(parents=True)
    (theme / "config" / "settings_data.json").write_text(json.dumps(BASE_SETTINGS))
    (theme / "layout").mkdir()
    (theme / "layout" / "theme.liquid").write_text("<html></html>")
    return theme


def _config(theme_settings, name="Loud Records"):
    return parse_config({
        "store": {"name": name, "email": "a@example.com"},
        "theme": {"settings": theme_settings},
    })


def _customize(tmp_path, theme_dir, theme_settings):
    config_path = tmp_path / "store.yaml"
    config_path.write_text("")
    output = tmp_path / "out"
    customize_theme(str(config_path), _config(theme_settings), str(theme_dir), str(output))
    return json.loads((output / "config" / "settings_data.json").read_text()), output


# ---------------------------------------------------------------------------
# customize_theme
# ---------------------------------------------------------------------------

def test_preset_display_name():
    assert preset_display_name("mosh-pit") == "Mosh Pit"
    assert preset_display_name("garage") == "Garage"


def test_copies_theme_and_leaves_source_untouched(tmp_path, theme_dir):
    data, output = _customize(tmp_path, theme_dir, {"layout_style": "editorial"})

    assert (output / "layout" / "theme.liquid").read_text() == "<html></html>"
    assert data["current"]["layout_style"] == "editorial"
    assert json.loads((theme_dir / "config" / "settings_data.json").read_text()) == BASE_SETTINGS


def test_existing_output_is_replaced(tmp_path, theme_dir):
    output = tmp_path / "out"
    output.mkdir()
    (output / "stale.txt").write_text("old")
    _customize(tmp_path, theme_dir, {})
    assert not (output / "stale.txt").exists()


def test_preset_from_theme_presets(tmp_path, theme_dir):
    data, _ = _customize(tmp_path, theme_dir, {"preset": "mosh-pit", "navigation_style": "sidebar"})
    current = data["current"]
    assert current["color_scheme"] == "blood-chrome"
    assert current["layout_style"] == "bold"
    assert current["navigation_style"] == "sidebar"


def test_preset_missing_from_theme_uses_defaults(tmp_path, theme_dir):
    data, _ = _customize(tmp_path, theme_dir, {"preset": "penthouse"})
    current = data["current"]
    assert current["layout_style"] == "bold"
    assert current["navigation_style"] == "sidebar"
    assert current["animation_level"] == "dynamic"
    assert current["color_palette"] == "after-midnight"


def test_legacy_colors_without_preset(tmp_path, theme_dir):
    data, _ = _customize(tmp_path, theme_dir, {"colors": {"primary": "#111111", "text": "#eeeeee"}})
    current = data["current"]
    assert current["custom_colors_enabled"] is True
    assert current["custom_primary"] == "#111111"
    assert current["custom_text"] == "#eeeeee"
    assert "custom_background" not in current


def test_legacy_colors_ignored_with_preset(tmp_path, theme_dir):
    data, _ = _customize(tmp_path, theme_dir, {"preset": "mosh-pit", "colors": {"primary": "#111111"}})
    assert "custom_primary" not in data["current"]


def test_logo_copied_and_colors_extracted(tmp_path, theme_dir):
    (tmp_path / "logo.svg").write_text("<svg/>")
    palette = {
        "background": "#101010",
        "primary": "#0b0b0b",
        "secondary": "#272727",
        "accent": "#ff0000",
        "text": "#eeeeee",
    }
    with patch("shopify_spinner.theme_customizer.extract_colors_from_image", return_value=palette):
        data, output = _customize(
            tmp_path,
            theme_dir,
            {"logo": "logo.svg", "extract_colors_from_logo": True, "accent_override": "#00ff00", "logo_width": 180},
        )

    assert (output / "assets" / "logo.svg").read_text() == "<svg/>"
    current = data["current"]
    assert current["custom_colors_enabled"] is True
    assert current["custom_background"] == "#101010"
    assert current["logo_width"] == 180
    # accent_override wins over the extracted accent
    assert current["accent_override"] == "#00ff00"
    assert current["custom_accent"] == "#00ff00"


def test_unreadable_logo_is_a_warning(tmp_path, theme_dir, capsys):
    (tmp_path / "logo.png").write_text("not an image")
    data, output = _customize(tmp_path, theme_dir, {"logo": "logo.png", "extract_colors_from_logo": True})

    assert (output / "assets" / "logo.png").exists()
    assert data["current"]["custom_colors_enabled"] is False
    assert "Could not extract colors" in capsys.readouterr().out


def test_missing_logo_skipped(tmp_path, theme_dir):
    data, output = _customize(tmp_path, theme_dir, {"logo": "nope.png"})
    assert not (output / "assets").exists()


def test_content_and_social_sections(tmp_path, theme_dir):
    data, _ = _customize(
        tmp_path,
        theme_dir,
        {
            "content": {"hero_subheading": "Since 1999", "hero_button_text": "Shop", "tagline": "Play it loud"},
            "social": {"instagram": "https://instagram.com/loud", "spotify": "https://open.spotify.com/x"},
        },
    )
    sections = data["current"]["sections"]
    hero = sections["hero-index"]
    assert hero["type"] == "hero"
    assert hero["settings"] == {"heading": "Loud Records", "subheading": "Since 1999", "button_text": "Shop"}

    footer = sections["footer"]["settings"]
    assert footer["tagline"] == "Play it loud"
    assert footer["social_instagram"] == "https://instagram.com/loud"
    assert footer["social_spotify"] == "https://open.spotify.com/x"
    assert "social_twitter" not in footer


def test_no_theme_settings_keeps_file(tmp_path, theme_dir):
    config = parse_config({"store": {"name": "S", "email": "a@example.com"}})
    output = tmp_path / "out"
    customize_theme(str(tmp_path / "store.yaml"), config, str(theme_dir), str(output))
    assert json.loads((output / "config" / "settings_data.json").read_text()) == BASE_SETTINGS


# ---------------------------------------------------------------------------
# color_extractor
# ---------------------------------------------------------------------------

def test_luminance_and_shifts():
    assert get_luminance("#000000") == 0
    assert get_luminance("#ffffff") == pytest.approx(1.0)
    assert darken("#646464", 0.5) == "#323232"
    assert lighten("#000000", 1.0) == "#ffffff"


def test_classify_swatches():
    swatches = classify_swatches([(100, (255, 0, 0)), (50, (30, 30, 30))])
    assert swatches["vibrant"] == "#ff0000"
    assert swatches["dark_muted"] == "#1e1e1e"
    assert swatches["light_muted"] is None


def test_build_palette_dark_theme():
    palette = build_palette({"vibrant": "#ff0000", "dark_muted": "#1e1e1e"})
    assert palette["background"] == "#1e1e1e"
    assert palette["text"] == "#e5e5e5"
    assert palette["accent"] == "#ff0000"
    assert palette["primary"] == "#151515"


def test_build_palette_light_theme():
    palette = build_palette({"vibrant": "#ffff00", "light_muted": "#eeeeee", "dark_vibrant": "#333300"})
    assert palette["background"] == "#eeeeee"
    assert palette["text"] == "#333300"
    assert palette["accent"] == "#ffff00"


def test_build_palette_contrast_fix():
    palette = build_palette({"vibrant": "#ffff00", "light_muted": "#cccccc", "dark_muted": "#aaaaaa"})
    assert palette["text"] == "#0a0a0a"


def test_build_palette_no_swatches():
    palette = build_palette({})
    assert set(palette) == {"background", "primary", "secondary", "accent", "text"}
    assert palette["accent"] == "#d4af37"


def test_extract_colors_from_image(tmp_path):
    image = Image.new("RGB", (40, 40), (30, 30, 30))
    image.paste((255, 0, 0), (0, 0, 40, 25))
    path = tmp_path / "logo.png"
    image.save(path)

    palette = extract_colors_from_image(str(path))

    assert palette["accent"] == "#ff0000"
    assert palette["background"] == "#1e1e1e"
    assert all(value.startswith("#") and len(value) == 7 for value in palette.values())
