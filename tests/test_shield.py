import pytest

from fortrust.shield import ShieldIndicator, ShieldState
from fortrust.theme import Theme


def test_defaults_enable_shields_everywhere():
    state = ShieldState()
    assert state.enabled is True
    assert state.is_enabled_for("example.com") is True
    assert state.site_overrides == {}


def test_override_applies_only_to_its_site():
    state = ShieldState()
    state.set_for_site("example.com", False)
    assert state.is_enabled_for("example.com") is False
    assert state.is_enabled_for("other.example.com") is True
    assert state.site_overrides == {"example.com": False}


def test_setting_site_to_global_value_removes_override():
    state = ShieldState()
    state.set_for_site("example.com", False)
    state.set_for_site("example.com", True)
    assert state.site_overrides == {}
    assert state.is_enabled_for("example.com") is True


def test_set_current_site_updates_global_switch():
    state = ShieldState(current_site="example.com")
    state.set_current_site(False)
    assert state.enabled is False
    assert state.is_enabled_for("example.com") is False
    assert state.is_enabled_for("example.org") is False
    assert state.site_overrides == {"example.com": False}


def test_set_current_site_back_on():
    state = ShieldState(current_site="example.com")
    state.set_current_site(False)
    state.set_current_site(True)
    assert state.enabled is True
    assert state.is_enabled_for("example.com") is True


def test_total_blocked_sums_ads_and_trackers():
    state = ShieldState(ads_blocked=3, trackers_blocked=4, fingerprint_attempts=9)
    assert state.total_blocked() == 7


@pytest.mark.parametrize(
    "enabled, ads, trackers, expected",
    [
        (False, 5, 5, ShieldIndicator.OFF),
        (True, 0, 0, ShieldIndicator.WARN),
        (True, 1, 0, ShieldIndicator.ACTIVE),
        (True, 0, 2, ShieldIndicator.ACTIVE),
    ],
)
def test_indicator(enabled, ads, trackers, expected):
    state = ShieldState(enabled=enabled, ads_blocked=ads, trackers_blocked=trackers)
    assert state.indicator() is expected


def test_indicator_respects_current_site_override():
    state = ShieldState(ads_blocked=2, current_site="example.com")
    state.set_for_site("example.com", False)
    assert state.indicator() is ShieldIndicator.OFF


def test_indicator_colors_come_from_theme():
    theme = Theme.dark()
    assert ShieldIndicator.OFF.color(theme) == theme.accent_shield_off
    assert ShieldIndicator.WARN.color(theme) == theme.accent_shield_warn
    assert ShieldIndicator.ACTIVE.color(theme) == theme.accent_shield


def test_toggle_popup_flips():
    state = ShieldState()
    state.toggle_popup()
    assert state.popup_open is True
    state.toggle_popup()
    assert state.popup_open is False


def test_closed_faded_popup_does_not_advance():
    state = ShieldState()
    assert state.advance_popup() is False
    assert state.popup_opacity == 0.0


def test_open_popup_fades_in_monotonically():
    state = ShieldState()
    state.toggle_popup()
    previous = state.popup_opacity
    for _ in range(40):
        assert state.advance_popup() is True
        assert previous < state.popup_opacity <= 1.0
        previous = state.popup_opacity
    assert state.popup_opacity > 0.99


def test_closed_popup_fades_out_and_stops():
    state = ShieldState(popup_opacity=1.0)
    steps = 0
    while state.advance_popup():
        steps += 1
        assert steps < 100
    assert state.popup_opacity < 0.01
    assert steps > 0


def test_https_text():
    assert ShieldState(https_upgraded=True).https_text() == "Upgraded to HTTPS"
    assert ShieldState(https_upgraded=False).https_text() == "Already HTTPS"