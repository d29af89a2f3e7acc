"""Tests for date_range mapper (pure functions, no I/O)."""

from datetime import date, datetime, timedelta, timezone

from app.mappers.date_range import count_nights, resolve_date_range


def test_two_nights():
    result = resolve_date_range(date(2025, 1, 1), date(2025, 1, 3))
    assert result.nights == 2
    assert result.complete is True


def test_iso_strings():
    assert count_nights("2025-01-01", "2025-01-04") == 3


def test_missing_check_in():
    result = resolve_date_range(None, date(2025, 1, 3))
    assert result.nights == 0
    assert result.complete is False


def test_missing_check_out():
    assert resolve_date_range("2025-01-01", None).complete is False


def test_empty_string_is_missing():
    assert resolve_date_range("", "2025-01-03").nights == 0


def test_unparseable_string():
    assert resolve_date_range("next friday", "2025-01-03").complete is False


def test_check_out_before_check_in_is_incomplete():
    result = resolve_date_range(date(2025, 1, 5), date(2025, 1, 3))
    assert result.nights == 0
    assert result.complete is False


def test_same_day_is_incomplete():
    result = resolve_date_range(date(2025, 1, 5), date(2025, 1, 5))
    assert result.nights == 0
    assert result.complete is False


def test_partial_day_counts_as_full_night():
    check_in = datetime(2025, 1, 1, 14, 0)
    check_out = datetime(2025, 1, 3, 15, 30)
    assert count_nights(check_in, check_out) == 3


def test_short_partial_day_is_one_night():
    assert count_nights(datetime(2025, 1, 1, 23, 0), datetime(2025, 1, 2, 1, 0)) == 1


def test_mixed_date_and_datetime():
    assert count_nights(date(2025, 1, 1), datetime(2025, 1, 2)) == 1


def test_mixed_naive_and_aware():
    aware = datetime(2025, 1, 3, tzinfo=timezone.utc)
    assert count_nights(datetime(2025, 1, 1), aware) == 2


def test_across_month_boundary():
    assert count_nights(date(2025, 1, 30), date(2025, 2, 2)) == 3


def test_mixed_naive_and_aware_keeps_offset():
    # 02:00 at +05:00 is 21:00 UTC the day before
    aware = datetime(2025, 1, 3, 2, 0, tzinfo=timezone(timedelta(hours=5)))
    assert count_nights(datetime(2025, 1, 1), aware) == 2
    assert count_nights(aware, datetime(2025, 1, 3)) == 1
