from bddbench.chrono import duration_ms, now


def test_now_is_monotonic():
    first = now()
    second = now()
    assert second >= first


def test_duration_of_same_point_is_zero():
    t = now()
    assert duration_ms(t, t) == 0


def test_duration_truncates_partial_milliseconds():
    assert duration_ms(0, 2_999_999) == 2


def test_duration_whole_milliseconds():
    assert duration_ms(1_000_000, 4_000_000) == 3


def test_duration_is_antisymmetric():
    assert duration_ms(5_500_000, 0) == -duration_ms(0, 5_500_000)


def test_duration_of_measured_interval_is_non_negative():
    before = now()
    after = now()
    assert duration_ms(before, after) >= 0