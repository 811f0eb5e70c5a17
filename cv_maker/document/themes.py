from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

DEFAULT_THEME = "modern"


@dataclass(frozen=True)
class ThemeConfig:
    id: str
    name: str
    description: str
    font_family: str
    accent_color: str
    text_color: str
    muted_color: str
    base_font_size: int
    name_font_size: int


THEMES: Dict[str, ThemeConfig] = {
    "modern": ThemeConfig(
        id="modern",
        name="Modern",
        description="Clean sans-serif with blue accents",
        font_family="'Open Sans', sans-serif",
        accent_color="#2563eb",
        text_color="#1f2937",
        muted_color="#4b5563",
        base_font_size=9,
        name_font_size=22,
    ),
    "classic": ThemeConfig(
        id="classic",
        name="Classic",
        description="Elegant serif font, traditional layout",
        font_family="'Lora', serif",
        accent_color="#1f2937",
        text_color="#000000",
        muted_color="#4b5563",
        base_font_size=11,
        name_font_size=24,
    ),
    "minimal": ThemeConfig(
        id="minimal",
        name="Minimal",
        description="Ultra-clean with subtle styling",
        font_family="'Roboto', sans-serif",
        accent_color="#6b7280",
        text_color="#374151",
        muted_color="#6b7280",
        base_font_size=10,
        name_font_size=20,
    ),
}


def get_theme(theme_id: str) -> ThemeConfig:
    """Unknown theme ids fall back to the default theme."""
    return THEMES.get(theme_id, THEMES[DEFAULT_THEME])


def list_themes() -> List[ThemeConfig]:
    return list(THEMES.values())
