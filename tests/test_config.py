import pytest

from numberpairs.config import BeadLineConfig


def test_default_track_is_derived_from_the_counting_area():
    config = BeadLineConfig()
    assert config.min_x == 1.0
    assert config.max_x == 39.0
    assert config.track.length == 38.0


def test_from_physical_width():
    config = BeadLineConfig.from_physical_width(864.0, 21.5)
    assert config.track.min == 1.0
    assert config.track.max == 39.0


def test_divider_formula():
    config = BeadLineConfig()
    assert config.divider_for(0) == pytest.approx(15.0)
    assert config.divider_for(3) == pytest.approx(16.2)
    assert BeadLineConfig(divider_divisor=2.2).divider_for(3) == pytest.approx(16.3636, abs=1e-4)


def test_track_too_short_for_the_pool_is_rejected():
    with pytest.raises(ValueError):
        BeadLineConfig(max_x=20.0)


def test_invalid_slot_width_is_rejected():
    with pytest.raises(ValueError):
        BeadLineConfig(slot_width=0.0)


def test_from_physical_width_derives_max_x():
    config = BeadLineConfig.from_physical_width(864.0, 21.5, min_x=2.0)
    assert (config.min_x, config.max_x) == (2.0, 39.0)

    with pytest.raises(ValueError, match="max_x"):
        BeadLineConfig.from_physical_width(864.0, 21.5, max_x=30.0)
