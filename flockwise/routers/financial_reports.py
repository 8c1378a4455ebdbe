import logging
from datetime import date
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import flockwise.crud.financial_reports as crud_reports
from flockwise.crud.batch import get_batch
from flockwise.crud.flock import get_flock
from flockwise.database import get_db
from flockwise.schemas.financial_reports import (
    CashFlowReport,
    CostAnalysisReport,
    Period,
    ProfitLossReport,
    ReportType,
    SummaryReport,
)
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user

router = APIRouter(prefix="/finance/reports", tags=["Financial Reports"])
logger = logging.getLogger("financial_reports")


@router.get("/", response_model=Union[SummaryReport, ProfitLossReport, CashFlowReport, CostAnalysisReport])
def get_financial_report(
    report_type: ReportType = Query("summary", alias="type"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """
    Generate a financial report.

    - summary: totals, profit margin, per-category sums and paid/pending split
    - profit_loss: the same totals with each category's transactions
    - cash_flow: paid transactions only, bucketed by month
    - cost_analysis: figures for one flock and/or batch with cost per bird/egg and ROI
    """
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must be on or before end_date")
    period = Period(start_date=start_date, end_date=end_date)

    if report_type == "cost_analysis":
        flock = get_flock(db, flock_id) if flock_id else None
        batch = get_batch(db, batch_id) if batch_id else None
        if flock_id and flock is None:
            raise HTTPException(status_code=404, detail="Flock not found")
        if batch_id and batch is None:
            raise HTTPException(status_code=404, detail="Batch not found")
        income, expense = crud_reports.fetch_ledger(db, start_date, end_date, flock_id, batch_id)
        eggs = crud_reports.count_eggs(db, flock.id, start_date, end_date) if flock is not None else 0
        return crud_reports.cost_analysis(income, expense, period, flock=flock, batch=batch, eggs_in_period=eggs)

    income, expense = crud_reports.fetch_ledger(db, start_date, end_date)
    logger.info(f"Generating {report_type} report over {len(income)} income and {len(expense)} expense rows")
    if report_type == "summary":
        return crud_reports.summarize(income, expense, period)
    if report_type == "profit_loss":
        return crud_reports.profit_and_loss(income, expense, period)
    return crud_reports.cash_flow(income, expense, period)
