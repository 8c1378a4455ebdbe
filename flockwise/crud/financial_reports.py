"""
Financial report folds over income and expense ledger rows.

Fetching is kept apart from aggregation: `fetch_*` helpers run the date and
scope filtered queries, and `summarize`, `profit_and_loss`, `cash_flow` and
`cost_analysis` are pure functions of the rows they are handed.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from flockwise.models.batch import Batch
from flockwise.models.finance import ExpenseTransaction, IncomeTransaction
from flockwise.models.flock import Flock
from flockwise.models.production import EggCollection
from flockwise.schemas import financial_reports as schemas
from flockwise.utils.formatting import percentage, safe_ratio

PENDING_STATUSES = ("pending", "partial")


def _total(rows: Iterable) -> Decimal:
    return sum((Decimal(r.amount) for r in rows), Decimal(0))


def _by_category(rows: Iterable) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for row in rows:
        totals[row.category] += Decimal(row.amount)
    return dict(totals)


def _totals(income: Decimal, expense: Decimal) -> schemas.Totals:
    net = income - expense
    return schemas.Totals(
        total_income=income,
        total_expense=expense,
        net_profit=net,
        profit_margin=percentage(net, income),
    )


def _paid_pending(rows: Sequence) -> schemas.PaidPending:
    return schemas.PaidPending(
        paid=_total(r for r in rows if r.payment_status == "paid"),
        pending=_total(r for r in rows if r.payment_status in PENDING_STATUSES),
    )


def summarize(income_rows: Sequence, expense_rows: Sequence, period: schemas.Period) -> schemas.SummaryReport:
    return schemas.SummaryReport(
        period=period,
        summary=_totals(_total(income_rows), _total(expense_rows)),
        income_by_category=_by_category(income_rows),
        expense_by_category=_by_category(expense_rows),
        payment_status=schemas.PaymentStatusSplit(
            income=_paid_pending(income_rows),
            expense=_paid_pending(expense_rows),
        ),
    )


def _category_section(rows: Sequence) -> schemas.CategorySection:
    grouped: Dict[str, List] = defaultdict(list)
    for row in sorted(rows, key=lambda r: (r.transaction_date, r.id)):
        grouped[row.category].append(row)
    categories = {
        category: schemas.CategoryGroup(
            total=_total(members),
            transactions=[schemas.LedgerRow.model_validate(m) for m in members],
        )
        for category, members in grouped.items()
    }
    return schemas.CategorySection(
        categories=categories,
        total=sum((group.total for group in categories.values()), Decimal(0)),
    )


def profit_and_loss(income_rows: Sequence, expense_rows: Sequence, period: schemas.Period) -> schemas.ProfitLossReport:
    income = _category_section(income_rows)
    expenses = _category_section(expense_rows)
    net = income.total - expenses.total
    return schemas.ProfitLossReport(
        period=period,
        income=income,
        expenses=expenses,
        net_profit=net,
        profit_margin=percentage(net, income.total),
    )


def cash_flow(income_rows: Sequence, expense_rows: Sequence, period: schemas.Period) -> schemas.CashFlowReport:
    """Cash actually moved: only paid rows count, bucketed by calendar month."""
    paid_income = [r for r in income_rows if r.payment_status == "paid"]
    paid_expense = [r for r in expense_rows if r.payment_status == "paid"]

    months: Dict[str, Dict[str, Decimal]] = defaultdict(lambda: {"income": Decimal(0), "expense": Decimal(0)})
    for row in paid_income:
        months[f"{row.transaction_date:%Y-%m}"]["income"] += Decimal(row.amount)
    for row in paid_expense:
        months[f"{row.transaction_date:%Y-%m}"]["expense"] += Decimal(row.amount)

    cash_in = _total(paid_income)
    cash_out = _total(paid_expense)
    return schemas.CashFlowReport(
        period=period,
        summary=schemas.CashFlowTotals(
            total_cash_in=cash_in,
            total_cash_out=cash_out,
            net_cash_flow=cash_in - cash_out,
        ),
        monthly_data={
            month: schemas.MonthlyCashFlow(
                income=values["income"],
                expense=values["expense"],
                net_cash_flow=values["income"] - values["expense"],
            )
            for month, values in sorted(months.items())
        },
    )


def cost_analysis(
    income_rows: Sequence,
    expense_rows: Sequence,
    period: schemas.Period,
    flock: Optional[Flock] = None,
    batch: Optional[Batch] = None,
    eggs_in_period: int = 0,
) -> schemas.CostAnalysisReport:
    """
    Cost metrics for one flock and/or batch.

    Cost per bird uses the batch population when a batch is given, otherwise
    the flock's; cost per egg only applies to a flock. A metric is None when its
    denominator is not positive.
    """
    total_income = _total(income_rows)
    total_expense = _total(expense_rows)
    totals = _totals(total_income, total_expense)

    cost_per_bird = None
    cost_per_egg = None
    if flock is not None:
        cost_per_bird = safe_ratio(total_expense, flock.current_stock, 2)
        cost_per_egg = safe_ratio(total_expense, eggs_in_period, 4)
    if batch is not None:
        cost_per_bird = safe_ratio(total_expense, batch.current_stock, 2)

    return schemas.CostAnalysisReport(
        period=period,
        flock=schemas.Subject(id=flock.id, name=flock.flock_name) if flock is not None else None,
        batch=schemas.Subject(id=batch.id, name=batch.batch_name) if batch is not None else None,
        financials=totals,
        expense_breakdown=_by_category(expense_rows),
        metrics=schemas.CostMetrics(
            cost_per_bird=cost_per_bird,
            cost_per_egg=cost_per_egg,
            roi=safe_ratio(totals.net_profit * 100, total_expense, 2),
        ),
    )


# --- fetching ---

def _ledger_query(db: Session, model, start_date: Optional[date], end_date: Optional[date],
                  flock_id: Optional[int] = None, batch_id: Optional[int] = None):
    query = db.query(model)
    if start_date:
        query = query.filter(model.transaction_date >= start_date)
    if end_date:
        query = query.filter(model.transaction_date <= end_date)
    if flock_id:
        query = query.filter(model.flock_id == flock_id)
    if batch_id:
        query = query.filter(model.batch_id == batch_id)
    return query.order_by(model.transaction_date, model.id)


def fetch_ledger(db: Session, start_date: Optional[date] = None, end_date: Optional[date] = None,
                 flock_id: Optional[int] = None, batch_id: Optional[int] = None):
    income = _ledger_query(db, IncomeTransaction, start_date, end_date, flock_id, batch_id).all()
    expense = _ledger_query(db, ExpenseTransaction, start_date, end_date, flock_id, batch_id).all()
    return income, expense


def count_eggs(db: Session, flock_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None) -> int:
    query = db.query(func.coalesce(func.sum(EggCollection.total_eggs_count), 0)).filter(EggCollection.flock_id == flock_id)
    if start_date:
        query = query.filter(EggCollection.collection_date >= start_date)
    if end_date:
        query = query.filter(EggCollection.collection_date <= end_date)
    return int(query.scalar())
