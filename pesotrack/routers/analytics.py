from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel

from pesotrack.core.config import Settings
from pesotrack.db.dal import Database
from pesotrack.models.budget import UsageLevel
from pesotrack.models.expense import ExpenseOut, row_to_expense_out
from pesotrack.services.aggregation import (
    compute_budget_usage,
    compute_category_breakdown,
    compute_daily_savings,
    daily_average,
    selectable_dates,
    summarize_savings,
)
from pesotrack.services import months
from pesotrack.services.session import get_app_settings, get_current_owner, get_db

router = APIRouter(prefix="/analytics", tags=["analytics"])


class CategoryBreakdownItem(BaseModel):
    category: str
    amount: float
    percentage: float


class MonthNavigation(BaseModel):
    month: str
    label: str
    previous: str
    next: Optional[str] = None
    is_current: bool


class Dashboard(BaseModel):
    month: str
    total_budget: float
    total_expenses: float
    total_savings: float
    remaining: float
    percent_used: float
    level: UsageLevel
    daily_average: float
    category_breakdown: List[CategoryBreakdownItem]
    recent_expenses: List[ExpenseOut]
    navigation: MonthNavigation


class DayHistory(BaseModel):
    date: date
    month: str
    budget: float
    total_expenses: float
    remaining: float
    percent_used: float
    level: UsageLevel
    expenses: List[ExpenseOut]
    category_summary: List[CategoryBreakdownItem]
    available_dates: List[date]


class DailySavingsItem(BaseModel):
    date: date
    previous_day_expenses: float
    day_expenses: float
    saved: float
    comparison_percent: Optional[float] = None
    trend_delta: Optional[float] = None
    category_breakdown: List[CategoryBreakdownItem]


class SavingsReport(BaseModel):
    as_of: date
    days: int
    today_saved: float
    total_saved: float
    average_daily_savings: float
    best_saved: float
    best_date: Optional[date] = None
    entries: List[DailySavingsItem]


def _breakdown(items) -> List[CategoryBreakdownItem]:
    return [
        CategoryBreakdownItem(
            category=i.category, amount=i.amount, percentage=i.percentage
        )
        for i in items
    ]


def _navigation(month: str, today: date) -> MonthNavigation:
    return MonthNavigation(
        month=month,
        label=months.month_label(month),
        previous=months.previous_month(month),
        next=months.next_month(month, today),
        is_current=month == months.current_month_key(today),
    )


def _checked_month(month: str, today: date) -> str:
    try:
        future = months.is_future_month(month, today)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if future:
        raise HTTPException(status_code=400, detail="month cannot be in the future")
    return month


@router.get(
    "/months/{month}/navigation",
    response_model=MonthNavigation,
    summary="Previous/next month keys (next is clamped at the current month)",
)
async def month_navigation_endpoint(
    month: str = Path(..., description="Month key (YYYY-MM)"),
    as_of: Optional[date] = Query(None, description="Optional 'today' override"),
    owner_id: str = Depends(get_current_owner),
):
    today = as_of or date.today()
    return _navigation(_checked_month(month, today), today)


@router.get(
    "/dashboard",
    response_model=Dashboard,
    summary="Monthly overview: budget, spending, savings and category split",
)
async def dashboard_endpoint(
    month: Optional[str] = Query(None, description="Month key (defaults to current)"),
    as_of: Optional[date] = Query(None, description="Optional 'today' override"),
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Aggregate one month of records for the dashboard.

    Savings are ``budget - expenses`` (negative when overspent). The daily
    average divides the month's spending by the days of the month elapsed so
    far (all days for past months).
    """
    today = as_of or date.today()
    month = _checked_month(month or months.current_month_key(today), today)
    budget_row = db.get_budget(owner_id, month)
    budget = float(budget_row["amount"]) if budget_row else 0.0
    expenses = [row_to_expense_out(r) for r in db.list_expenses(owner_id, month=month)]
    usage = compute_budget_usage(
        budget, expenses, settings.budget_warn_pct, settings.budget_danger_pct
    )
    return Dashboard(
        month=month,
        total_budget=usage.budget,
        total_expenses=usage.total_expenses,
        total_savings=usage.remaining,
        remaining=usage.remaining,
        percent_used=usage.percent_used,
        level=usage.level,
        daily_average=daily_average(
            usage.total_expenses, months.days_elapsed_in_month(month, today)
        ),
        category_breakdown=_breakdown(compute_category_breakdown(expenses)),
        recent_expenses=expenses[: settings.recent_expenses_limit],
        navigation=_navigation(month, today),
    )


@router.get(
    "/history",
    response_model=DayHistory,
    summary="One day's expenses against that month's budget",
)
async def history_endpoint(
    day: Optional[date] = Query(None, description="Day to inspect (defaults to today)"),
    as_of: Optional[date] = Query(None, description="Optional 'today' override"),
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    today = as_of or date.today()
    day = day or today
    if day > today:
        raise HTTPException(status_code=400, detail="day cannot be in the future")
    month = months.month_key(day)
    budget_row = db.get_budget(owner_id, month)
    budget = float(budget_row["amount"]) if budget_row else 0.0
    expenses = [row_to_expense_out(r) for r in db.list_expenses(owner_id, day=day)]
    usage = compute_budget_usage(
        budget, expenses, settings.budget_warn_pct, settings.budget_danger_pct
    )
    return DayHistory(
        date=day,
        month=month,
        budget=usage.budget,
        total_expenses=usage.total_expenses,
        remaining=usage.remaining,
        percent_used=usage.percent_used,
        level=usage.level,
        expenses=expenses,
        category_summary=_breakdown(compute_category_breakdown(expenses)),
        available_dates=selectable_dates(today, settings.history_days),
    )


@router.get(
    "/savings",
    response_model=SavingsReport,
    summary="Day-over-day savings for the last N days",
)
async def savings_endpoint(
    days: Optional[int] = Query(None, ge=1, le=31, description="Window size in days"),
    as_of: Optional[date] = Query(None, description="Last day of the window"),
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """saved(D) = spending(D-1) - spending(D); positive means spending went down.

    The window needs one extra day before its first day so the oldest entry
    has a predecessor to compare against.
    """
    today = as_of or date.today()
    window = days or settings.savings_days
    rows = db.list_expenses(
        owner_id, start_date=today - timedelta(days=window), end_date=today
    )
    entries = compute_daily_savings(
        [row_to_expense_out(r) for r in rows], as_of=today, days=window
    )
    summary = summarize_savings(entries, as_of=today)
    return SavingsReport(
        as_of=today,
        days=window,
        today_saved=summary.today_saved,
        total_saved=summary.total_saved,
        average_daily_savings=summary.average_daily_savings,
        best_saved=summary.best_saved,
        best_date=summary.best_date,
        entries=[
            DailySavingsItem(
                date=e.date,
                previous_day_expenses=e.previous_day_expenses,
                day_expenses=e.day_expenses,
                saved=e.saved,
                comparison_percent=e.comparison_percent,
                trend_delta=delta,
                category_breakdown=_breakdown(e.category_breakdown),
            )
            for e, delta in zip(entries, summary.trend_deltas)
        ],
    )
