from solarsite.core.numeric import clamp, round_half_up


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(64.5) == 65
    assert round(64.5) == 64
    assert round_half_up(65.25) == 65
    assert round_half_up(-0.5) == 0


def test_clamp():
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    assert clamp(2, 0, 3) == 2
