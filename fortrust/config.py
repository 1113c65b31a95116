"""Browser configuration: privacy, performance and UI settings."""

from __future__ import annotations

from dataclasses import MISSING, asdict, dataclass, field, fields
from typing import Any, Mapping


def _uint(default: int, bits: int) -> Any:
    return field(default=default, metadata={"bits": bits})


@dataclass
class PrivacyConfig:
    """Request-level privacy protections."""

    block_ads: bool = True
    block_trackers: bool = True
    block_third_party_cookies: bool = True
    strip_tracking_query_params: bool = True
    https_only_mode: bool = True
    global_privacy_control: bool = True
    do_not_track: bool = True
    fingerprint_noise: bool = True
    per_profile_fingerprint_salt: int = _uint(0x464F_5254_5255_5354, 64)


@dataclass
class PerformanceConfig:
    """Memory budgets and tab lifecycle limits."""

    max_active_renderer_mb: int = _uint(96, 16)
    max_warm_renderer_mb: int = _uint(48, 16)
    max_total_tab_ram_mb: int = _uint(384, 32)
    warm_tab_limit: int = _uint(2, 64)
    suspend_background_after_ticks: int = _uint(4, 64)
    suspended_snapshot_kb: int = _uint(384, 16)
    lazy_renderer_start: bool = True


@dataclass
class UiConfig:
    """Appearance of the browser shell."""

    theme: str = "light"
    compact_density: bool = True
    show_privacy_panel: bool = True
    show_memory_meter: bool = True
    # One of "none", "watercolor", "forest".
    wallpaper: str = "watercolor"
    wallpaper_strength: int = _uint(84, 8)
    glass_strength: int = _uint(82, 8)
    motion_strength: int = _uint(70, 8)


def _section_from_dict(cls: type, data: Mapping[str, Any], section: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{section}: expected a mapping")
    values = {}
    for f in fields(cls):
        if f.name not in data:
            raise ValueError(f"{section}: missing field {f.name!r}")
        value = data[f.name]
        default = f.default if f.default is not MISSING else None
        expected = type(default)
        if expected is bool:
            if not isinstance(value, bool):
                raise ValueError(f"{section}.{f.name}: expected a boolean")
        elif expected is int:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{section}.{f.name}: expected an integer")
            bits = f.metadata.get("bits", 64)
            if not 0 <= value < (1 << bits):
                raise ValueError(f"{section}.{f.name}: {value} out of range")
        elif expected is str:
            if not isinstance(value, str):
                raise ValueError(f"{section}.{f.name}: expected a string")
        values[f.name] = value
    return cls(**values)


@dataclass
class BrowserConfig:
    """Complete browser configuration."""

    privacy: PrivacyConfig = field(default_factory=PrivacyConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    ui: UiConfig = field(default_factory=UiConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a nested plain-dict form suitable for JSON."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BrowserConfig":
        """Build a config from its dict form; every field must be present."""
        if not isinstance(data, Mapping):
            raise ValueError("expected a mapping")
        sections = {
            "privacy": PrivacyConfig,
            "performance": PerformanceConfig,
            "ui": UiConfig,
        }
        values = {}
        for name, section_cls in sections.items():
            if name not in data:
                raise ValueError(f"missing section {name!r}")
            values[name] = _section_from_dict(section_cls, data[name], name)
        return cls(**values)