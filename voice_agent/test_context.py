import random
from datetime import datetime, timedelta, timezone

from voice_agent.context import AppContext, FixedSelector, MillisecondClock, RandomSelector, isoformat_ms


def test_isoformat_ms_truncates_to_milliseconds():
    moment = datetime(2025, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
    assert isoformat_ms(moment) == "2025-01-02T03:04:05.678Z"


def test_isoformat_ms_converts_to_utc():
    moment = datetime(2025, 1, 2, 5, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert isoformat_ms(moment) == "2025-01-02T03:00:00.000Z"


def test_millisecond_clock_follows_source():
    readings = iter([10, 20, 30])
    clock = MillisecondClock(source=lambda: next(readings))
    assert [clock(), clock(), clock()] == [10, 20, 30]


def test_millisecond_clock_bumps_repeated_readings():
    clock = MillisecondClock(source=lambda: 500)
    assert [clock(), clock(), clock()] == [500, 501, 502]


def test_millisecond_clock_never_goes_backwards():
    readings = iter([100, 90, 200])
    clock = MillisecondClock(source=lambda: next(readings))
    assert [clock(), clock(), clock()] == [100, 101, 200]


def test_random_selector_is_reproducible_with_seeded_rng():
    candidates = ["a", "b", "c"]
    first, second = RandomSelector(random.Random(3)), RandomSelector(random.Random(3))
    assert [first.choose(candidates) for _ in range(20)] == [second.choose(candidates) for _ in range(20)]


def test_random_selector_only_returns_candidates():
    selector = RandomSelector(random.Random(11))
    picks = {selector.choose(["a", "b", "c"]) for _ in range(100)}
    assert picks == {"a", "b", "c"}


def test_fixed_selector_wraps_index():
    assert FixedSelector(4).choose(["a", "b", "c"]) == "b"


def test_context_captures_start_at_creation():
    readings = iter([5.0, 7.5])
    context = AppContext(monotonic=lambda: next(readings))
    assert context.started_at == 5.0
    assert context.uptime() == 2


def test_context_timestamp_uses_clock():
    context = AppContext(clock=lambda: datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc))
    assert context.timestamp() == "2024-12-31T23:59:59.000Z"
