from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from pesotrack.models.constants import CATEGORIES
from pesotrack.services.money import round2

"""Aggregation helpers behind the dashboard, history, tracking and savings views.

Scopes implemented:
    - Totals and budget usage percentage / level
    - Category breakdown
    - Day-over-day savings and its summary
    - Daily average and selectable history dates

Design notes:
    Everything here is pure: callers fetch records through the data layer and
    pass them in, so each function can be unit tested with plain objects.
"""


class ExpenseLike(Protocol):
    amount: float
    category: str
    date: date


_CATEGORY_ORDER = {c: i for i, c in enumerate(CATEGORIES)}


# ---------------- Totals & usage -----------------
def total_amount(records: Iterable[ExpenseLike]) -> float:
    return round2(sum(r.amount for r in records))


def usage_percentage(total_expenses: float, total_budget: float) -> float:
    if total_budget <= 0:
        return 0.0
    return round2(total_expenses / total_budget * 100)


def usage_level(percent: float, warn_pct: int = 70, danger_pct: int = 90) -> str:
    if percent > danger_pct:
        return "danger"
    if percent > warn_pct:
        return "warning"
    return "normal"


@dataclass(frozen=True)
class BudgetUsage:
    budget: float
    total_expenses: float
    remaining: float
    percent_used: float
    level: str


def compute_budget_usage(
    budget: float,
    records: Sequence[ExpenseLike],
    warn_pct: int = 70,
    danger_pct: int = 90,
) -> BudgetUsage:
    """Compare a record set against a budget amount (missing budget -> 0).

    ``remaining`` is signed: overspending yields a negative value.
    """
    total = total_amount(records)
    pct = usage_percentage(total, budget)
    return BudgetUsage(
        budget=round2(budget),
        total_expenses=total,
        remaining=round2(budget - total),
        percent_used=pct,
        level=usage_level(pct, warn_pct, danger_pct),
    )


# ---------------- Category Breakdown -----------------
@dataclass(frozen=True)
class CategoryBreakdownItem:
    category: str
    amount: float
    percentage: float


def compute_category_breakdown(
    records: Iterable[ExpenseLike],
) -> list[CategoryBreakdownItem]:
    """Return per-category totals with their share of the grand total.

    Sorted by amount descending (ties in category display order). Categories
    with no records are omitted rather than zero-filled.
    """
    sums: Dict[str, float] = defaultdict(float)
    for r in records:
        sums[r.category] += r.amount
    grand = sum(sums.values())
    ordered = sorted(
        sums.items(),
        key=lambda kv: (-kv[1], _CATEGORY_ORDER.get(kv[0], len(_CATEGORY_ORDER))),
    )
    return [
        CategoryBreakdownItem(
            category=category,
            amount=round2(amount),
            percentage=round2(amount / grand * 100) if grand > 0 else 0.0,
        )
        for category, amount in ordered
    ]


# ---------------- Day-over-day savings -----------------
@dataclass(frozen=True)
class DailySavings:
    date: date
    previous_day_expenses: float
    day_expenses: float
    saved: float
    comparison_percent: Optional[float]
    category_breakdown: list[CategoryBreakdownItem] = field(default_factory=list)


def group_by_day(records: Iterable[ExpenseLike]) -> Dict[date, List[ExpenseLike]]:
    buckets: Dict[date, List[ExpenseLike]] = defaultdict(list)
    for r in records:
        buckets[r.date].append(r)
    return buckets


def compute_daily_savings(
    records: Iterable[ExpenseLike], as_of: date | None = None, days: int = 7
) -> list[DailySavings]:
    """Return savings entries for the ``days`` days ending at ``as_of``, newest first.

    saved(D) = total(D-1) - total(D). A day is listed only when it or its
    predecessor has spending. Records outside ``[as_of - days, as_of]`` are
    ignored.
    """
    as_of = as_of or date.today()
    if days <= 0:
        return []
    buckets = group_by_day(records)
    entries: list[DailySavings] = []
    for offset in range(days):
        day = as_of - timedelta(days=offset)
        prev = day - timedelta(days=1)
        day_records = buckets.get(day, [])
        day_total = total_amount(day_records)
        prev_total = total_amount(buckets.get(prev, []))
        if day_total <= 0 and prev_total <= 0:
            continue
        entries.append(
            DailySavings(
                date=day,
                previous_day_expenses=prev_total,
                day_expenses=day_total,
                saved=round2(prev_total - day_total),
                comparison_percent=round2(day_total / prev_total * 100)
                if prev_total > 0
                else None,
                category_breakdown=compute_category_breakdown(day_records),
            )
        )
    return entries


@dataclass(frozen=True)
class SavingsSummary:
    today_saved: float
    total_saved: float
    average_daily_savings: float
    best_saved: float
    best_date: Optional[date]
    days_counted: int
    # saved(entry) - saved(next older entry); None for the oldest entry
    trend_deltas: list[Optional[float]]


def summarize_savings(
    entries: Sequence[DailySavings], as_of: date | None = None
) -> SavingsSummary:
    as_of = as_of or date.today()
    if not entries:
        return SavingsSummary(
            today_saved=0.0,
            total_saved=0.0,
            average_daily_savings=0.0,
            best_saved=0.0,
            best_date=None,
            days_counted=0,
            trend_deltas=[],
        )
    total = round2(sum(e.saved for e in entries))
    today = next((e.saved for e in entries if e.date == as_of), 0.0)
    # First max in newest-first order, i.e. the most recent best day.
    best = max(entries, key=lambda e: e.saved)
    deltas: list[Optional[float]] = [
        round2(entries[i].saved - entries[i + 1].saved) for i in range(len(entries) - 1)
    ]
    deltas.append(None)
    return SavingsSummary(
        today_saved=today,
        total_saved=total,
        average_daily_savings=round2(total / len(entries)),
        best_saved=best.saved,
        best_date=best.date,
        days_counted=len(entries),
        trend_deltas=deltas,
    )


# ---------------- Dashboard & history helpers -----------------
def daily_average(total_expenses: float, days_elapsed: int) -> float:
    if days_elapsed <= 0 or total_expenses <= 0:
        return 0.0
    return round2(total_expenses / days_elapsed)


def selectable_dates(as_of: date | None = None, days: int = 7) -> list[date]:
    """The ``days`` most recent calendar days ending at ``as_of``, newest first."""
    as_of = as_of or date.today()
    return [as_of - timedelta(days=i) for i in range(max(days, 0))]
