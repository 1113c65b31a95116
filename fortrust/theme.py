"""Colours and the dark and light browser themes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from string import hexdigits


@dataclass(frozen=True)
class Color:
    """An sRGB colour with straight (unmultiplied) alpha, components 0-255."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"colour component {name}={value!r} out of range")

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """Parse ``#rrggbb`` (leading ``#`` optional) into an opaque colour."""
        digits = text.lstrip("#")
        if len(digits) != 6 or any(ch not in hexdigits for ch in digits):
            raise ValueError(f"invalid hex colour: {text!r}")
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def lerp(self, other: "Color", t: float) -> "Color":
        """Blend towards ``other``; ``t`` is clamped to 0..1."""
        t = min(max(t, 0.0), 1.0)

        def mix(x: int, y: int) -> int:
            return int(x + (y - x) * t)

        return Color(
            mix(self.r, other.r),
            mix(self.g, other.g),
            mix(self.b, other.b),
            mix(self.a, other.a),
        )

    def gamma_multiply(self, factor: float) -> "Color":
        """Fade the colour by scaling its opacity by ``factor``."""
        if not math.isfinite(factor) or factor < 0:
            raise ValueError(f"invalid factor: {factor!r}")
        return Color(self.r, self.g, self.b, min(int(self.a * factor + 0.5), 255))


WHITE = Color(255, 255, 255)
TRANSPARENT = Color(0, 0, 0, 0)


def _check_strength(glass_strength: int) -> None:
    if not 0 <= glass_strength <= 255:
        raise ValueError(f"glass strength out of range: {glass_strength}")


@dataclass(frozen=True)
class Theme:
    """Named colours used by the browser shell."""

    glass_bg: Color
    glass_border: Color
    glass_hover: Color

    surface_deepest: Color
    surface_rail: Color
    surface_sidebar: Color
    surface_tab_bar: Color
    surface_card: Color
    surface_hover: Color

    accent_primary: Color
    accent_secondary: Color
    accent_shield: Color
    accent_shield_warn: Color
    accent_shield_off: Color

    text_primary: Color
    text_secondary: Color
    text_muted: Color
    text_placeholder: Color
    text_on_accent: Color

    tile_bg: Color
    tile_hover_overlay: Color
    tile_shadow: Color

    border_subtle: Color
    border_strong: Color
    accent_danger: Color

    @classmethod
    def dark(cls) -> "Theme":
        return cls.dark_with_glass_strength(82)

    @classmethod
    def dark_with_glass_strength(cls, glass_strength: int) -> "Theme":
        """The dark palette; the glass strength does not change it."""
        _check_strength(glass_strength)
        return cls(
            glass_bg=Color(20, 22, 30, 200),
            glass_border=Color(255, 255, 255, 18),
            glass_hover=Color(255, 255, 255, 12),
            surface_deepest=Color(13, 15, 18),
            surface_rail=Color(19, 22, 27),
            surface_sidebar=Color(24, 28, 34),
            surface_tab_bar=Color(29, 34, 42),
            surface_card=Color(35, 40, 48),
            surface_hover=Color(44, 50, 64),
            accent_primary=Color(79, 158, 255),
            accent_secondary=Color(60, 130, 220),
            accent_shield=Color(63, 176, 110),
            accent_shield_warn=Color(255, 170, 60),
            accent_shield_off=Color(120, 120, 130),
            text_primary=Color(221, 225, 234),
            text_secondary=Color(144, 152, 168),
            text_muted=Color(79, 86, 104),
            text_placeholder=Color(100, 100, 115),
            text_on_accent=WHITE,
            tile_bg=Color(35, 38, 52, 200),
            tile_hover_overlay=Color(255, 255, 255, 20),
            tile_shadow=Color(0, 0, 0, 80),
            border_subtle=Color(39, 45, 56),
            border_strong=Color(50, 57, 73),
            accent_danger=Color(255, 92, 92),
        )

    @classmethod
    def light(cls) -> "Theme":
        return cls.light_with_glass_strength(82)

    @classmethod
    def light_with_glass_strength(cls, glass_strength: int) -> "Theme":
        """The light palette; the glass strength does not change it."""
        _check_strength(glass_strength)
        return cls(
            glass_bg=Color(240, 240, 248, 210),
            glass_border=Color(0, 0, 0, 18),
            glass_hover=Color(0, 0, 0, 8),
            surface_deepest=Color(245, 245, 250),
            surface_rail=Color(235, 235, 242),
            surface_sidebar=Color(240, 240, 248),
            surface_tab_bar=Color(238, 238, 245),
            surface_card=Color(248, 248, 252),
            surface_hover=Color(220, 220, 230),
            accent_primary=Color(79, 158, 255),
            accent_secondary=Color(60, 130, 220),
            accent_shield=Color(63, 176, 110),
            accent_shield_warn=Color(255, 170, 60),
            accent_shield_off=Color(160, 160, 170),
            text_primary=Color(30, 32, 38),
            text_secondary=Color(110, 115, 130),
            text_muted=Color(160, 165, 178),
            text_placeholder=Color(180, 185, 198),
            text_on_accent=WHITE,
            tile_bg=Color(255, 255, 255, 230),
            tile_hover_overlay=Color(0, 0, 0, 12),
            tile_shadow=Color(0, 0, 0, 30),
            border_subtle=Color(210, 210, 220),
            border_strong=Color(180, 180, 190),
            accent_danger=Color(255, 70, 70),
        )