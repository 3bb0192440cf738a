from __future__ import annotations
import datetime as dt
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .constants import CATEGORIES, DEFAULT_CATEGORY, MAX_AMOUNT


class ExpenseIn(BaseModel):
    description: str
    amount: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False, strict=True)
    category: str = DEFAULT_CATEGORY
    date: dt.date = Field(default_factory=dt.date.today)

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("description cannot be empty")
        return v.strip()

    @field_validator("category")
    @classmethod
    def valid_category(cls, v: str) -> str:
        if v not in CATEGORIES:
            raise ValueError("unsupported category")
        return v

    @field_validator("date")
    @classmethod
    def date_not_future(cls, v: dt.date) -> dt.date:
        if v > dt.date.today():
            raise ValueError("date cannot be in the future")
        return v


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    description: str
    amount: float
    category: str
    date: dt.date
    created_at: dt.datetime


def row_to_expense_out(row: dict) -> ExpenseOut:
    return ExpenseOut(
        id=row["id"],
        owner_id=row["owner_id"],
        description=row["description"],
        amount=row["amount"],
        category=row["category"],
        date=dt.date.fromisoformat(row["date"]),
        created_at=dt.datetime.fromisoformat(row["created_at"].replace("Z", "")),
    )
