"""
Data shaping between the record store and the charts.

Rows come straight from a store collection: dicts holding a date column
(``YYYY-MM-DD`` string or ``date``) and a numeric value column. Nothing here
touches the clock; callers pass ``today`` explicitly.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
from dateutil import parser as dateparser

SHORT_LABEL = "%b %d"
LONG_LABEL = "%B %d, %Y"
ML_PER_LITER = 1000.0

Row = Mapping[str, object]
Series = List[Tuple[str, float]]


# -------------------------------
# Date helpers
# -------------------------------

def ensure_date(obj) -> date:
    if isinstance(obj, pd.Timestamp):
        return obj.date()
    if isinstance(obj, datetime):
        return obj.date()
    if isinstance(obj, date):
        return obj
    return dateparser.parse(str(obj)).date()


def format_date_label(value, fmt: str = SHORT_LABEL) -> str:
    """
    >>> format_date_label("2024-01-10")
    'Jan 10'
    >>> format_date_label(date(2024, 3, 5), LONG_LABEL)
    'March 05, 2024'
    """
    return ensure_date(value).strftime(fmt)


def _frame(rows: Sequence[Row], date_key: str, value_key: str) -> pd.DataFrame:
    df = pd.DataFrame({
        "Date": [ensure_date(r[date_key]) for r in rows],
        "Value": pd.to_numeric(pd.Series([r[value_key] for r in rows], dtype=object)),
    })
    return df


# -------------------------------
# Series builders
# -------------------------------

def chronological_series(
    rows: Sequence[Row],
    date_key: str = "date",
    value_key: str = "value",
    label_format: str = SHORT_LABEL,
) -> Series:
    """
    Sort rows ascending by calendar date and return (label, value) pairs.

    Rows sharing a date keep their input order. An empty input gives an empty
    series, which charts show as "no data".

    >>> rows = [{"date": "2024-01-12", "weight": 71}, {"date": "2024-01-10", "weight": 70}]
    >>> chronological_series(rows, value_key="weight")
    [('Jan 10', 70), ('Jan 12', 71)]
    >>> chronological_series([], value_key="weight")
    []
    """
    if not rows:
        return []
    df = _frame(rows, date_key, value_key)
    df = df.sort_values("Date", kind="mergesort")
    return [(d.strftime(label_format), v) for d, v in zip(df["Date"], df["Value"].tolist())]


def frequency_by_day(
    rows: Iterable[Row],
    today,
    days: int = 7,
    date_key: str = "date",
    label_format: str = SHORT_LABEL,
) -> List[Tuple[str, int]]:
    """
    Count rows per day over the trailing ``days`` calendar days ending at
    ``today`` (inclusive). Always returns ``days`` pairs, oldest first; days
    without rows count 0 and rows outside the window are ignored.

    >>> rows = [{"date": "2024-01-10"}, {"date": "2024-01-10"}, {"date": "2024-01-01"}]
    >>> frequency_by_day(rows, date(2024, 1, 10), days=3)
    [('Jan 08', 0), ('Jan 09', 0), ('Jan 10', 2)]
    """
    end = ensure_date(today)
    window = [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    dates = [ensure_date(r[date_key]) for r in rows]
    counts = pd.Series(dates, dtype=object).value_counts()
    counts = counts.reindex(window, fill_value=0)
    return [(d.strftime(label_format), int(c)) for d, c in zip(window, counts.tolist())]


def daily_totals(
    rows: Sequence[Row],
    date_key: str = "date",
    value_key: str = "value",
    limit: Optional[int] = 7,
    label_format: str = SHORT_LABEL,
) -> Series:
    """
    Sum rows sharing a date, then keep the ``limit`` most recent dates in
    ascending order. Dates without rows are left out (no zero-fill).

    >>> rows = [
    ...     {"date": "2024-01-10", "amount_ml": 300},
    ...     {"date": "2024-01-08", "amount_ml": 250},
    ...     {"date": "2024-01-10", "amount_ml": 200},
    ... ]
    >>> daily_totals(rows, value_key="amount_ml")
    [('Jan 08', 250), ('Jan 10', 500)]
    >>> daily_totals(rows, value_key="amount_ml", limit=1)
    [('Jan 10', 500)]
    """
    if not rows:
        return []
    df = _frame(rows, date_key, value_key)
    totals = df.groupby("Date")["Value"].sum().sort_index()
    if limit:
        totals = totals.iloc[-limit:]
    return [(d.strftime(label_format), v) for d, v in zip(totals.index, totals.tolist())]


# -------------------------------
# Scalars
# -------------------------------

def ml_to_liters(ml: float) -> float:
    """
    >>> ml_to_liters(1500)
    1.5
    """
    return ml / ML_PER_LITER


def liters_to_ml(liters: float) -> float:
    return liters * ML_PER_LITER


def scale_series(series: Series, factor: float) -> Series:
    return [(label, value * factor) for label, value in series]


def is_expired(deadline, today) -> bool:
    """
    A goal is expired once its deadline is strictly before today.

    >>> is_expired("2024-01-01", date(2024, 6, 1))
    True
    >>> is_expired("2024-06-01", date(2024, 6, 1))
    False
    """
    return ensure_date(deadline) < ensure_date(today)


def sleep_quality(hours: float) -> str:
    """
    >>> [sleep_quality(h) for h in (5.5, 6.5, 8)]
    ['poor', 'fair', 'good']
    """
    if hours < 6:
        return "poor"
    if hours < 7:
        return "fair"
    return "good"


def total_for_day(rows: Iterable[Row], day, date_key: str = "date", value_key: str = "value") -> float:
    day = ensure_date(day)
    return sum(r[value_key] for r in rows if ensure_date(r[date_key]) == day)


def has_entry_on(rows: Iterable[Row], day, date_key: str = "date") -> bool:
    day = ensure_date(day)
    return any(ensure_date(r[date_key]) == day for r in rows)


def latest_value(rows: Sequence[Row], date_key: str = "date", value_key: str = "value"):
    """Value of the most recent row, last in input order on ties; None if empty."""
    series = chronological_series(rows, date_key, value_key)
    if not series:
        return None
    return series[-1][1]
