from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field
from .constants import MAX_AMOUNT

UsageLevel = Literal["normal", "warning", "danger"]


class BudgetAmountIn(BaseModel):
    amount: float = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        allow_inf_nan=False,
        strict=True,
        description="Budget amount (must be > 0)",
    )


class BudgetOut(BaseModel):
    id: str
    owner_id: str
    amount: float = Field(..., ge=0)
    month: str
    created_at: datetime


class BudgetStatus(BaseModel):
    """Budget of one month compared against that month's expenses.

    A month without a budget record reports ``budget_id=None`` and an
    amount of zero.
    """

    month: str
    budget_id: Optional[str] = None
    amount: float = Field(0, ge=0)
    total_expenses: float = 0
    remaining: float = 0
    percent_used: float = 0
    level: UsageLevel = "normal"


def row_to_budget_out(row: dict) -> BudgetOut:
    return BudgetOut(
        id=row["id"],
        owner_id=row["owner_id"],
        amount=row["amount"],
        month=row["month"],
        created_at=datetime.fromisoformat(row["created_at"].replace("Z", "")),
    )
