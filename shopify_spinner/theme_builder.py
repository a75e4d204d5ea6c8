"""
Theme Builder — Push config colours and fonts into the live theme.

The builder flattens the nested theme config into the settings keys used by
the theme's config/settings_data.json:

    colors.primary          -> colors_solid_button_labels, colors_accent_1
    colors.secondary        -> colors_accent_2
    typography.heading_font -> type_header_font
    typography.body_font    -> type_body_font

and upserts that file on the MAIN theme. The upload is a full overwrite of
settings_data.json with only these keys under "current"; any other settings
the live theme had are not preserved. Use the theme customizer (theme push
--config) for a merge with the theme's own settings.
"""

import json
from typing import Any, Dict, Optional

from .config_schema import ThemeConfig
from .errors import BuilderError
from .graphql_queries import THEME_FILES_UPSERT_MUTATION, THEME_UPDATE_MUTATION, THEMES_QUERY
from .user_errors import format_user_errors, unwrap_payload

SETTINGS_DATA_FILENAME = "config/settings_data.json"


class ThemeBuilder:
    """Configures the shop's main theme through a ShopifyClient."""

    def __init__(self, client, debug: bool = False):
        self.client = client
        self.debug = debug

    @staticmethod
    def build_settings_data(theme_config: Optional[ThemeConfig]) -> Dict[str, Any]:
        settings: Dict[str, Any] = {}
        theme_settings = theme_config.settings if theme_config else None

        colors = theme_settings.colors if theme_settings else None
        if colors and colors.primary:
            settings["colors_solid_button_labels"] = colors.primary
            settings["colors_accent_1"] = colors.primary
        if colors and colors.secondary:
            settings["colors_accent_2"] = colors.secondary

        typography = theme_settings.typography if theme_settings else None
        if typography and typography.heading_font:
            settings["type_header_font"] = typography.heading_font
        if typography and typography.body_font:
            settings["type_body_font"] = typography.body_font

        return {"current": settings}

    def get_main_theme_id(self) -> str:
        """Return the ID of the published (role MAIN) theme.

        Raises:
            BuilderError: If none of the first ten themes is MAIN.
        """
        data = self.client.query(THEMES_QUERY)

        for theme in (data.get("themes") or {}).get("nodes") or []:
            if theme.get("role") == "MAIN":
                return theme["id"]

        raise BuilderError("No main theme found")

    def upload_theme_settings(self, theme_id: str, settings_data: Dict[str, Any]) -> None:
        """Overwrite config/settings_data.json on a theme.

        Raises:
            BuilderError: If themeFilesUpsert returned userErrors.
        """
        data = self.client.mutate(
            THEME_FILES_UPSERT_MUTATION,
            {
                "themeId": theme_id,
                "files": [
                    {
                        "filename": SETTINGS_DATA_FILENAME,
                        "body": {"type": "TEXT", "value": json.dumps(settings_data, indent=2)},
                    }
                ],
            },
        )

        user_errors = (data.get("themeFilesUpsert") or {}).get("userErrors") or []
        if user_errors:
            raise BuilderError(f"Failed to upload theme settings: {format_user_errors(user_errors)}")

    def rename_theme(self, theme_id: str, name: str) -> Dict[str, Any]:
        """Rename a theme via themeUpdate and return the updated theme."""
        data = self.client.mutate(THEME_UPDATE_MUTATION, {"id": theme_id, "input": {"name": name}})
        return unwrap_payload(data.get("themeUpdate") or {}, "theme", "update theme", "theme")

    def configure_theme(self, theme_config: Optional[ThemeConfig]) -> str:
        """Find the main theme, build its settings and upload them.

        Returns:
            The ID of the theme that was configured.
        """
        theme_id = self.get_main_theme_id()
        settings_data = self.build_settings_data(theme_config)
        self.upload_theme_settings(theme_id, settings_data)

        if self.debug:
            print(f"  Uploaded {len(settings_data['current'])} theme settings to {theme_id}")

        return theme_id
