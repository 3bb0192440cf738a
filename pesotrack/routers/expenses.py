from fastapi import APIRouter, Depends, HTTPException, Query
from datetime import date
from typing import List, Optional
import logging

from pesotrack.db.dal import Database
from pesotrack.models.constants import CATEGORIES
from pesotrack.models.expense import ExpenseIn, ExpenseOut, row_to_expense_out
from pesotrack.services.months import parse_month_key
from pesotrack.services.session import get_current_owner, get_db

router = APIRouter(prefix="/expenses", tags=["expenses"])
logger = logging.getLogger("pesotrack.expenses")


# Routes -----------------------------------------------------------
@router.post(
    "/", response_model=ExpenseOut, status_code=201, summary="Create an expense"
)
async def create_expense(
    payload: ExpenseIn,
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
):
    # 1. Persist (amount/category/date already validated by ExpenseIn)
    try:
        expense_id = db.insert_expense(owner_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    # 2. Fetch row to build response
    row = db.get_expense(owner_id, expense_id)
    if not row:
        raise HTTPException(status_code=500, detail="expense not found after insert")
    logger.info("expense %s created", expense_id)
    return row_to_expense_out(row)


@router.get(
    "/", response_model=List[ExpenseOut], summary="List expenses with optional filters"
)
async def list_expenses_endpoint(
    day: Optional[date] = Query(None, description="Filter: exact date"),
    month: Optional[str] = Query(None, description="Filter: month key YYYY-MM"),
    start_date: Optional[date] = Query(
        None, description="Filter: start date inclusive"
    ),
    end_date: Optional[date] = Query(None, description="Filter: end date inclusive"),
    category: Optional[str] = Query(None, description="Filter by category"),
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
):
    # 1. Date ordering validation
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400, detail="start_date cannot be after end_date"
        )
    # 2. Month / category validation
    if month is not None:
        try:
            parse_month_key(month)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
    if category is not None and category not in CATEGORIES:
        raise HTTPException(status_code=400, detail="unsupported category")
    # 3. Fetch (newest first)
    rows = db.list_expenses(
        owner_id,
        day=day,
        month=month,
        start_date=start_date,
        end_date=end_date,
        category=category,
    )
    return [row_to_expense_out(r) for r in rows]


@router.get("/{expense_id}", response_model=ExpenseOut, summary="Fetch one expense")
async def get_expense(
    expense_id: str,
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
):
    row = db.get_expense(owner_id, expense_id)
    if not row:
        raise HTTPException(status_code=404, detail="expense not found")
    return row_to_expense_out(row)


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
async def delete_expense(
    expense_id: str,
    owner_id: str = Depends(get_current_owner),
    db: Database = Depends(get_db),
):
    try:
        db.delete_expense(owner_id, expense_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="expense not found")
    logger.info("expense %s deleted", expense_id)
    return None
