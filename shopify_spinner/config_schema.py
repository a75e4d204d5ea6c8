"""
Config Schema — pydantic models for store configuration YAML files.

A store config describes one store build:

    extends: ./base.yaml          # optional, resolved before validation
    store:    {name, email}       # required
    theme:    {source, settings}  # optional
    apps:     [{name, required}]  # optional
    settings: {currency, timezone, shipping, checkout}
    products: {source, create_collections}

Unknown keys are ignored. Validation is done on the fully merged document,
so a child config may omit anything its parent provides.
"""

from typing import List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# Theme presets shipped with the spinner theme
ThemePreset = Literal[
    "penthouse", "mosh-pit", "honky-tonk", "neon-stage",
    "front-porch", "boom-bap", "garage", "gallery",
]
LayoutStyle = Literal["standard", "editorial", "bold"]
NavigationStyle = Literal["topbar", "hamburger", "sidebar"]
AnimationLevel = Literal["none", "subtle", "dynamic"]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class StoreInfo(_ConfigModel):
    name: str
    email: EmailStr

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Store name is required")
        return value


class ThemeContent(_ConfigModel):
    hero_heading: Optional[str] = None
    hero_subheading: Optional[str] = None
    hero_button_text: Optional[str] = None
    tagline: Optional[str] = None


class ThemeSocial(_ConfigModel):
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    youtube: Optional[str] = None
    tiktok: Optional[str] = None
    spotify: Optional[str] = None

    @field_validator("instagram", "twitter", "youtube", "tiktok", "spotify")
    @classmethod
    def _must_be_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Invalid url")
        return value


class ThemeColors(_ConfigModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None
    background: Optional[str] = None
    accent: Optional[str] = None
    text: Optional[str] = None


class ThemeTypography(_ConfigModel):
    heading_font: Optional[str] = None
    body_font: Optional[str] = None


class ThemeVibe(_ConfigModel):
    name: Optional[str] = None
    palette_name: Optional[str] = None
    density: Optional[Literal["sparse", "balanced", "dense"]] = None
    motion: Optional[Literal["still", "subtle", "moderate", "dynamic"]] = None
    shapes: Optional[Literal["sharp", "rounded", "organic", "mixed"]] = None


class ThemeSettings(_ConfigModel):
    preset: Optional[ThemePreset] = None
    layout_style: Optional[LayoutStyle] = None
    navigation_style: Optional[NavigationStyle] = None
    animation_level: Optional[AnimationLevel] = None
    accent_override: Optional[str] = None
    logo: Optional[str] = None
    logo_width: Optional[float] = Field(default=None, ge=50, le=300)
    extract_colors_from_logo: Optional[bool] = None
    content: Optional[ThemeContent] = None
    social: Optional[ThemeSocial] = None
    # Legacy colour settings, used when no preset is chosen
    colors: Optional[ThemeColors] = None
    typography: Optional[ThemeTypography] = None
    vibe: Optional[ThemeVibe] = None


class ThemeConfig(_ConfigModel):
    source: str = "spinner"
    settings: Optional[ThemeSettings] = None


class AppConfig(_ConfigModel):
    name: str
    required: bool = False


class ShippingSettings(_ConfigModel):
    domestic_flat_rate: Optional[float] = None
    free_shipping_threshold: Optional[float] = None


class CheckoutSettings(_ConfigModel):
    require_phone: bool = False
    enable_tips: bool = False


class StoreSettings(_ConfigModel):
    currency: str = "USD"
    timezone: str = "America/Los_Angeles"
    shipping: Optional[ShippingSettings] = None
    checkout: Optional[CheckoutSettings] = None


class ProductsConfig(_ConfigModel):
    source: str
    create_collections: bool = True


class StoreConfig(_ConfigModel):
    extends: Optional[str] = None
    store: StoreInfo
    theme: Optional[ThemeConfig] = None
    apps: Optional[List[AppConfig]] = None
    settings: Optional[StoreSettings] = None
    products: Optional[ProductsConfig] = None
