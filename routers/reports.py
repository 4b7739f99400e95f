from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from database import get_db
from schemas import Summary, MonthlySpending
import services

router = APIRouter(tags=["reports"])


@router.get("/summary", response_model=Summary)
async def summary(
        start_date: Optional[str] = Query(None, alias="startDate"),
        end_date: Optional[str] = Query(None, alias="endDate"),
        category: Optional[str] = None,
        db: AsyncSession = Depends(get_db)
):
    """Income, expense and balance over the filtered transactions"""
    return await services.get_summary(db, start_date, end_date, category)


@router.get("/reports/monthly", response_model=List[MonthlySpending])
async def monthly_report(db: AsyncSession = Depends(get_db)):
    """Expense totals grouped by month and category"""
    return await services.get_monthly_report(db)
