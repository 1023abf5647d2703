import doctest
import random
from datetime import date, timedelta

import pytest

from fittrack import aggregation as agg

TODAY = date(2024, 1, 10)


def _random_rows(seed, n=40, key="amount_ml"):
    rng = random.Random(seed)
    return [
        {"date": (TODAY - timedelta(days=rng.randint(0, 20))).isoformat(), key: rng.randint(0, 1000)}
        for _ in range(n)
    ]


def test_doctests():
    results = doctest.testmod(agg)
    assert results.failed == 0
    assert results.attempted > 0


@pytest.mark.parametrize("seed", range(5))
def test_chronological_series_is_sorted_by_date(seed):
    rows = _random_rows(seed, key="weight")
    series = agg.chronological_series(rows, value_key="weight", label_format="%Y-%m-%d")
    labels = [label for label, _ in series]
    assert labels == sorted(labels)
    assert len(series) == len(rows)


def test_chronological_series_keeps_input_order_for_same_date():
    rows = [
        {"date": "2024-01-10", "weight": 71},
        {"date": "2024-01-09", "weight": 69},
        {"date": "2024-01-10", "weight": 70},
    ]
    assert agg.chronological_series(rows, value_key="weight") == [
        ("Jan 09", 69), ("Jan 10", 71), ("Jan 10", 70),
    ]
    assert agg.latest_value(rows, value_key="weight") == 70


def test_chronological_series_accepts_date_objects():
    rows = [{"date": date(2024, 1, 10), "weight": 70.5}]
    assert agg.chronological_series(rows, value_key="weight") == [("Jan 10", 70.5)]


@pytest.mark.parametrize("seed", range(5))
def test_frequency_by_day_counts_only_the_window(seed):
    rows = _random_rows(seed)
    counts = agg.frequency_by_day(rows, TODAY, days=7)
    assert len(counts) == 7
    window_start = TODAY - timedelta(days=6)
    in_window = [r for r in rows if window_start <= date.fromisoformat(r["date"]) <= TODAY]
    assert sum(c for _, c in counts) == len(in_window)
    assert counts[-1][0] == "Jan 10"
    assert counts[0][0] == "Jan 04"


def test_frequency_by_day_with_no_rows_is_seven_zeros():
    counts = agg.frequency_by_day([], TODAY)
    assert [c for _, c in counts] == [0] * 7


def test_frequency_by_day_ignores_future_rows():
    rows = [{"date": "2024-01-11"}, {"date": "2024-01-10"}]
    assert agg.frequency_by_day(rows, TODAY)[-1] == ("Jan 10", 1)
    assert sum(c for _, c in agg.frequency_by_day(rows, TODAY)) == 1


@pytest.mark.parametrize("seed", range(5))
def test_daily_totals_sum_matches_included_dates(seed):
    rows = _random_rows(seed)
    totals = agg.daily_totals(rows, value_key="amount_ml", limit=7, label_format="%Y-%m-%d")
    dates = {label for label, _ in totals}
    assert len(totals) == min(7, len({r["date"] for r in rows}))
    assert sum(v for _, v in totals) == sum(r["amount_ml"] for r in rows if r["date"] in dates)
    # most recent dates, ascending
    assert [label for label, _ in totals] == sorted({r["date"] for r in rows})[-len(totals):]


def test_daily_totals_does_not_zero_fill():
    rows = [{"date": "2024-01-01", "amount_ml": 100}, {"date": "2024-01-05", "amount_ml": 200}]
    assert agg.daily_totals(rows, value_key="amount_ml") == [("Jan 01", 100), ("Jan 05", 200)]


def test_daily_totals_empty():
    assert agg.daily_totals([], value_key="amount_ml") == []


@pytest.mark.parametrize("ml", [0, 1, 250, 333, 1999.5])
def test_liters_round_trip(ml):
    assert agg.liters_to_ml(agg.ml_to_liters(ml)) == pytest.approx(ml)


def test_deadline_boundaries():
    assert agg.is_expired(TODAY, TODAY) is False
    assert agg.is_expired(TODAY - timedelta(days=1), TODAY) is True
    assert agg.is_expired(TODAY + timedelta(days=1), TODAY) is False


def test_goal_deadline_in_the_past_is_expired():
    assert agg.is_expired("2024-01-01", date(2024, 6, 1))


def test_total_for_day_and_has_entry_on():
    rows = [
        {"date": "2024-01-10", "amount_ml": 300},
        {"date": "2024-01-10", "amount_ml": 200},
        {"date": "2024-01-09", "amount_ml": 900},
    ]
    assert agg.total_for_day(rows, TODAY, value_key="amount_ml") == 500
    assert agg.has_entry_on(rows, TODAY)
    assert not agg.has_entry_on(rows, date(2024, 1, 8))


def test_latest_value_empty():
    assert agg.latest_value([], value_key="weight") is None
