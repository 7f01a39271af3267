import pytest

from nightswatch.services.watch_controller import ListingRetryPolicy


def test_no_failures_uses_poll_interval():
    policy = ListingRetryPolicy(base_interval_ms=lambda: 1000, max_backoff_ms=30000)

    assert policy.next_delay_ms(0) == 1000


def test_backoff_doubles_per_consecutive_failure():
    policy = ListingRetryPolicy(base_interval_ms=lambda: 1000, max_backoff_ms=30000)

    assert [policy.next_delay_ms(n) for n in range(1, 6)] == [1000, 2000, 4000, 8000, 16000]


def test_backoff_is_capped():
    policy = ListingRetryPolicy(base_interval_ms=lambda: 1000, max_backoff_ms=30000)

    assert policy.next_delay_ms(6) == 30000
    assert policy.next_delay_ms(500) == 30000


def test_never_shorter_than_poll_interval():
    policy = ListingRetryPolicy(base_interval_ms=lambda: 60000, max_backoff_ms=30000)

    assert policy.next_delay_ms(3) == 60000


def test_follows_live_poll_interval():
    interval = {"ms": 100}
    policy = ListingRetryPolicy(base_interval_ms=lambda: interval["ms"], max_backoff_ms=10000)

    assert policy.next_delay_ms(2) == 200
    interval["ms"] = 500
    assert policy.next_delay_ms(2) == 1000
    assert policy.next_delay_seconds(2) == pytest.approx(1.0)


def test_rejects_non_positive_ceiling():
    with pytest.raises(ValueError):
        ListingRetryPolicy(base_interval_ms=lambda: 1000, max_backoff_ms=0)
