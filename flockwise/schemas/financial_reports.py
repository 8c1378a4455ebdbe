from datetime import date
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

ReportType = Literal["summary", "profit_loss", "cash_flow", "cost_analysis"]


class Period(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class LedgerRow(BaseModel):
    id: int
    transaction_date: date
    category: str
    amount: Decimal
    payment_status: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


# --- summary ---

class Totals(BaseModel):
    total_income: Decimal
    total_expense: Decimal
    net_profit: Decimal
    profit_margin: Decimal


class PaidPending(BaseModel):
    paid: Decimal
    pending: Decimal


class PaymentStatusSplit(BaseModel):
    income: PaidPending
    expense: PaidPending


class SummaryReport(BaseModel):
    report_type: Literal["summary"] = "summary"
    period: Period
    summary: Totals
    income_by_category: Dict[str, Decimal]
    expense_by_category: Dict[str, Decimal]
    payment_status: PaymentStatusSplit


# --- profit_loss ---

class CategoryGroup(BaseModel):
    total: Decimal
    transactions: List[LedgerRow]


class CategorySection(BaseModel):
    categories: Dict[str, CategoryGroup]
    total: Decimal


class ProfitLossReport(BaseModel):
    report_type: Literal["profit_loss"] = "profit_loss"
    period: Period
    income: CategorySection
    expenses: CategorySection
    net_profit: Decimal
    profit_margin: Decimal


# --- cash_flow ---

class CashFlowTotals(BaseModel):
    total_cash_in: Decimal
    total_cash_out: Decimal
    net_cash_flow: Decimal


class MonthlyCashFlow(BaseModel):
    income: Decimal
    expense: Decimal
    net_cash_flow: Decimal


class CashFlowReport(BaseModel):
    report_type: Literal["cash_flow"] = "cash_flow"
    period: Period
    summary: CashFlowTotals
    monthly_data: Dict[str, MonthlyCashFlow]


# --- cost_analysis ---

class Subject(BaseModel):
    id: int
    name: str


class CostMetrics(BaseModel):
    cost_per_bird: Optional[Decimal] = None
    cost_per_egg: Optional[Decimal] = None
    roi: Optional[Decimal] = None


class CostAnalysisReport(BaseModel):
    report_type: Literal["cost_analysis"] = "cost_analysis"
    period: Period
    flock: Optional[Subject] = None
    batch: Optional[Subject] = None
    financials: Totals
    expense_breakdown: Dict[str, Decimal]
    metrics: CostMetrics
