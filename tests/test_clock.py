import pytest

from fortrust.clock import UTC_OFFSET_HOURS, clock_components, clock_text


def test_epoch_is_offset_hour():
    assert clock_components(0) == (UTC_OFFSET_HOURS, 0, 0)


def test_text_is_zero_padded():
    assert clock_text(0) == (f"{UTC_OFFSET_HOURS:02}:00", "00")


def test_components_in_range():
    for t in (0, 59, 61, 3599, 3601, 86399, 1_700_000_123):
        h, m, s = clock_components(t)
        assert 0 <= h < 24
        assert 0 <= m < 60
        assert 0 <= s < 60


def test_daily_period():
    t = 1_234_567
    assert clock_components(t) == clock_components(t + 86400)


def test_seconds_follow_input():
    assert clock_components(59)[2] == 59
    assert clock_components(60)[1:] == (1, 0)


def test_text_widths():
    big, small = clock_text(1_700_000_123)
    assert len(big) == 5 and big[2] == ":"
    assert len(small) == 2


def test_current_time_has_valid_shape():
    h, m, s = clock_components()
    assert 0 <= h < 24 and 0 <= m < 60 and 0 <= s < 60


def test_negative_rejected():
    with pytest.raises(ValueError):
        clock_components(-1)