from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from pesotrack.core.config import Settings
from pesotrack.db.dal import Database
from pesotrack.models.budget import BudgetAmountIn, BudgetOut, BudgetStatus, row_to_budget_out
from pesotrack.models.expense import row_to_expense_out
from pesotrack.services.aggregation import compute_budget_usage
from pesotrack.services.months import parse_month_key
from pesotrack.services.session import get_app_settings, get_current_owner, get_db

router = APIRouter(prefix="/budgets", tags=["budgets"])


class BudgetChange(BaseModel):
    budget: BudgetOut
    status: BudgetStatus


def _validated_month(month: str) -> str:
    try:
        parse_month_key(month)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return month


def budget_status(
    db: Database, owner_id: str, month: str, settings: Settings
) -> BudgetStatus:
    """Month budget against the month's expenses; a missing budget counts as 0."""
    row = db.get_budget(owner_id, month)
    amount = float(row["amount"]) if row else 0.0
    expenses = [row_to_expense_out(r) for r in db.list_expenses(owner_id, month=month)]
    usage = compute_budget_usage(
        amount, expenses, settings.budget_warn_pct, settings.budget_danger_pct
    )
    return BudgetStatus(
        month=month,
        budget_id=row["id"] if row else None,
        amount=usage.budget,
        total_expenses=usage.total_expenses,
        remaining=usage.remaining,
        percent_used=usage.percent_used,
        level=usage.level,
    )


@router.get(
    "/{month}", response_model=BudgetStatus, summary="Budget status for a month"
)
async def get_budget_status(
    month: str = Path(..., description="Month key (YYYY-MM)", examples=["2026-10"]),
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return budget_status(db, owner_id, _validated_month(month), settings)


@router.put(
    "/{month}", response_model=BudgetChange, summary="Set (replace) a month's budget"
)
async def set_budget(
    payload: BudgetAmountIn,
    month: str = Path(..., description="Month key (YYYY-MM)", examples=["2026-10"]),
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    month = _validated_month(month)
    try:
        row = db.set_budget(owner_id, month, payload.amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return BudgetChange(
        budget=row_to_budget_out(row),
        status=budget_status(db, owner_id, month, settings),
    )


@router.post(
    "/{month}/add", response_model=BudgetChange, summary="Add to a month's budget"
)
async def add_to_budget(
    payload: BudgetAmountIn,
    month: str = Path(..., description="Month key (YYYY-MM)", examples=["2026-10"]),
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    month = _validated_month(month)
    try:
        row = db.add_to_budget(owner_id, month, payload.amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return BudgetChange(
        budget=row_to_budget_out(row),
        status=budget_status(db, owner_id, month, settings),
    )
