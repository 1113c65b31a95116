"""State of the privacy shield: per-site switches, counters and popup fade."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from fortrust.theme import Color, Theme

_FADE_RATE = 0.25
_HIDDEN_OPACITY = 0.01


class ShieldIndicator(Enum):
    """How the shield button presents itself."""

    OFF = "off"
    WARN = "warn"
    ACTIVE = "active"

    def color(self, theme: Theme) -> Color:
        """The accent colour the theme uses for this indicator."""
        if self is ShieldIndicator.OFF:
            return theme.accent_shield_off
        if self is ShieldIndicator.WARN:
            return theme.accent_shield_warn
        return theme.accent_shield


@dataclass
class ShieldState:
    """Shield switches and blocking counters for the browser shell."""

    enabled: bool = True
    ads_blocked: int = 0
    trackers_blocked: int = 0
    fingerprint_attempts: int = 0
    https_upgraded: bool = True
    popup_open: bool = False
    popup_opacity: float = 0.0
    # Per-site on/off overrides keyed by hostname.
    site_overrides: dict[str, bool] = field(default_factory=dict)
    current_site: str = ""

    def is_enabled_for(self, site: str) -> bool:
        """Whether shields are on for ``site``; falls back to ``enabled``."""
        return self.site_overrides.get(site, self.enabled)

    def set_for_site(self, site: str, on: bool) -> None:
        """Switch shields for one site; matching the global switch drops the override."""
        if on == self.enabled:
            self.site_overrides.pop(site, None)
        else:
            self.site_overrides[site] = on

    def set_current_site(self, on: bool) -> None:
        """The popup toggle: switch the current site and make it the global setting."""
        self.set_for_site(self.current_site, on)
        self.enabled = on

    def total_blocked(self) -> int:
        return self.ads_blocked + self.trackers_blocked

    def indicator(self) -> ShieldIndicator:
        if not self.is_enabled_for(self.current_site):
            return ShieldIndicator.OFF
        if self.total_blocked() == 0:
            return ShieldIndicator.WARN
        return ShieldIndicator.ACTIVE

    def toggle_popup(self) -> None:
        self.popup_open = not self.popup_open

    def advance_popup(self) -> bool:
        """Step the popup fade by one frame; False when it is closed and faded out."""
        if not self.popup_open and self.popup_opacity < _HIDDEN_OPACITY:
            return False
        target = 1.0 if self.popup_open else 0.0
        self.popup_opacity += (target - self.popup_opacity) * _FADE_RATE
        return True

    def https_text(self) -> str:
        return "Upgraded to HTTPS" if self.https_upgraded else "Already HTTPS"