"""
Tests for income/expense records and the four financial report modes.
"""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from flockwise.crud import financial_reports
from flockwise.schemas.financial_reports import Period


def row(row_id, day, category, amount, payment_status="paid"):
    return SimpleNamespace(
        id=row_id,
        transaction_date=day,
        category=category,
        amount=Decimal(amount),
        payment_status=payment_status,
        description=None,
    )


PERIOD = Period()


@pytest.fixture
def record(client, staff_headers):
    def _record(kind, amount, category="Egg Sales", transaction_date="2025-05-10", **extra):
        payload = {
            "transaction_date": transaction_date,
            "category": category,
            "amount": amount,
            "payment_method": "cash",
            "payment_status": "paid",
        }
        payload.update(extra)
        response = client.post(f"/finance/{kind}/", json=payload, headers=staff_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _record


# =============================================================================
# PURE FOLDS
# =============================================================================

class TestSummaryFold:

    def test_net_profit_is_income_minus_expense(self):
        income = [row(1, date(2025, 5, 1), "Egg Sales", "1200"), row(2, date(2025, 5, 2), "Manure", "300", "pending")]
        expense = [row(1, date(2025, 5, 3), "Feed", "900"), row(2, date(2025, 5, 4), "Labour", "150", "partial")]

        report = financial_reports.summarize(income, expense, PERIOD)

        totals = report.summary
        assert totals.total_income - totals.total_expense == totals.net_profit
        assert totals.net_profit == Decimal("450")
        assert totals.profit_margin == Decimal("30.00")
        assert report.income_by_category == {"Egg Sales": Decimal("1200"), "Manure": Decimal("300")}
        assert report.payment_status.income.paid == Decimal("1200")
        assert report.payment_status.income.pending == Decimal("300")
        assert report.payment_status.expense.pending == Decimal("150")

    def test_profit_margin_is_zero_without_income(self):
        expense = [row(1, date(2025, 5, 3), "Feed", "900")]

        report = financial_reports.summarize([], expense, PERIOD)

        assert report.summary.net_profit == Decimal("-900")
        assert report.summary.profit_margin == Decimal("0")

    def test_profit_and_loss_groups_transactions(self):
        income = [row(1, date(2025, 5, 2), "Egg Sales", "100"), row(2, date(2025, 5, 1), "Egg Sales", "50")]
        expense = [row(1, date(2025, 5, 3), "Feed", "60")]

        report = financial_reports.profit_and_loss(income, expense, PERIOD)

        eggs = report.income.categories["Egg Sales"]
        assert eggs.total == Decimal("150")
        assert [t.id for t in eggs.transactions] == [2, 1]
        assert report.net_profit == Decimal("90")
        assert report.profit_margin == Decimal("60.00")


class TestCashFlowFold:

    def test_rows_are_bucketed_by_month(self):
        income = [row(1, date(2025, 3, 5), "Egg Sales", "400"), row(2, date(2025, 3, 28), "Egg Sales", "100")]
        expense = [row(1, date(2025, 4, 2), "Feed", "250")]

        report = financial_reports.cash_flow(income, expense, PERIOD)

        assert list(report.monthly_data) == ["2025-03", "2025-04"]
        assert report.monthly_data["2025-03"].net_cash_flow == Decimal("500")
        assert report.monthly_data["2025-04"].net_cash_flow == Decimal("-250")
        assert report.summary.net_cash_flow == Decimal("250")

    def test_unpaid_rows_are_not_cash(self):
        income = [row(1, date(2025, 3, 5), "Egg Sales", "400", "pending")]
        expense = [row(1, date(2025, 3, 6), "Feed", "250", "partial")]

        report = financial_reports.cash_flow(income, expense, PERIOD)

        assert report.monthly_data == {}
        assert report.summary.total_cash_in == Decimal("0")


class TestCostAnalysisFold:

    def test_metrics_are_empty_without_denominators(self):
        report = financial_reports.cost_analysis([], [], PERIOD)

        assert report.metrics.cost_per_bird is None
        assert report.metrics.cost_per_egg is None
        assert report.metrics.roi is None
        assert report.financials.profit_margin == Decimal("0")


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TestTransactions:

    def test_list_summary_by_category(self, client, staff_headers, record):
        record("income", "100")
        record("income", "50", payment_status="pending")
        record("income", "25", category="Manure")

        summary = client.get("/finance/income/", headers=staff_headers).json()["summary"]

        assert Decimal(summary["total"]) == Decimal("175")
        assert Decimal(summary["paid"]) == Decimal("125")
        assert Decimal(summary["pending"]) == Decimal("50")
        assert summary["transaction_count"] == 3
        assert summary["by_category"]["Egg Sales"]["count"] == 2

    def test_amount_must_be_positive(self, client, staff_headers):
        payload = {
            "transaction_date": "2025-05-10",
            "category": "Feed",
            "amount": "0",
            "payment_method": "cash",
            "payment_status": "paid",
        }

        response = client.post("/finance/expenses/", json=payload, headers=staff_headers)

        assert response.status_code == 400

    def test_duplicate_invoice_number_conflicts(self, client, staff_headers, record):
        record("expenses", "10", category="Feed", invoice_number="INV-1")
        payload = {
            "transaction_date": "2025-05-11",
            "category": "Feed",
            "amount": "20",
            "payment_method": "cash",
            "payment_status": "paid",
            "invoice_number": "INV-1",
        }

        response = client.post("/finance/expenses/", json=payload, headers=staff_headers)

        assert response.status_code == 409
        assert "details" in response.json()

    def test_only_managers_delete(self, client, staff_headers, manager_headers, record):
        income = record("income", "100")

        forbidden = client.delete(f"/finance/income/{income['id']}", headers=staff_headers)
        allowed = client.delete(f"/finance/income/{income['id']}", headers=manager_headers)

        assert forbidden.status_code == 403
        assert allowed.status_code == 200


# =============================================================================
# REPORT ENDPOINT
# =============================================================================

class TestReportEndpoint:
    """GET /finance/reports/?type=..."""

    def test_default_is_summary(self, client, staff_headers, record):
        record("income", "1000")
        record("expenses", "400", category="Feed")

        response = client.get("/finance/reports/", headers=staff_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["report_type"] == "summary"
        assert Decimal(body["summary"]["net_profit"]) == Decimal("600")
        assert Decimal(body["summary"]["profit_margin"]) == Decimal("60")

    def test_date_range_filters_rows(self, client, staff_headers, record):
        record("income", "1000", transaction_date="2025-04-30")
        record("income", "300", transaction_date="2025-05-01")

        response = client.get(
            "/finance/reports/",
            params={"type": "summary", "start_date": "2025-05-01", "end_date": "2025-05-31"},
            headers=staff_headers,
        )

        assert Decimal(response.json()["summary"]["total_income"]) == Decimal("300")

    def test_cash_flow_months(self, client, staff_headers, record):
        record("income", "100", transaction_date="2025-03-01")
        record("income", "200", transaction_date="2025-03-20")
        record("expenses", "50", category="Feed", transaction_date="2025-04-02")

        body = client.get("/finance/reports/", params={"type": "cash_flow"}, headers=staff_headers).json()

        assert sorted(body["monthly_data"]) == ["2025-03", "2025-04"]
        assert Decimal(body["monthly_data"]["2025-03"]["net_cash_flow"]) == Decimal("300")

    def test_unknown_type_is_rejected(self, client, staff_headers):
        response = client.get("/finance/reports/", params={"type": "balance_sheet"}, headers=staff_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_inverted_range_is_rejected(self, client, staff_headers):
        response = client.get(
            "/finance/reports/",
            params={"start_date": "2025-06-01", "end_date": "2025-05-01"},
            headers=staff_headers,
        )

        assert response.status_code == 400

    def test_cost_analysis_for_flock(self, client, staff_headers, record, create_flock):
        flock = create_flock(opening_stock=500)
        record("income", "1500", flock_id=flock["id"])
        record("expenses", "1000", category="Feed", flock_id=flock["id"])
        record("expenses", "999", category="Feed")
        eggs = {"flock_id": flock["id"], "collection_date": "2025-05-10", "good_eggs_count": 380, "broken_eggs_count": 20}
        assert client.post("/egg-collection/", json=eggs, headers=staff_headers).status_code == 201

        response = client.get(
            "/finance/reports/", params={"type": "cost_analysis", "flock_id": flock["id"]}, headers=staff_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["flock"]["id"] == flock["id"]
        assert Decimal(body["financials"]["total_expense"]) == Decimal("1000")
        assert Decimal(body["metrics"]["cost_per_bird"]) == Decimal("2.00")
        assert Decimal(body["metrics"]["cost_per_egg"]) == Decimal("2.5000")
        assert Decimal(body["metrics"]["roi"]) == Decimal("50.00")

    def test_cost_analysis_unknown_batch(self, client, staff_headers):
        response = client.get(
            "/finance/reports/", params={"type": "cost_analysis", "batch_id": 55}, headers=staff_headers
        )

        assert response.status_code == 404

    def test_cost_analysis_for_batch(self, client, staff_headers, record, create_batch):
        batch = create_batch()
        record("expenses", "500", category="Feed", batch_id=batch["id"])
        record("expenses", "700", category="Feed")

        response = client.get(
            "/finance/reports/", params={"type": "cost_analysis", "batch_id": batch["id"]}, headers=staff_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["batch"] == {"id": batch["id"], "name": batch["batch_name"]}
        assert body["flock"] is None
        assert Decimal(body["financials"]["total_expense"]) == Decimal("500")
        assert Decimal(body["metrics"]["cost_per_bird"]) == Decimal("0.50")
        assert body["metrics"]["cost_per_egg"] is None


# =============================================================================
# DAILY BANKING
# =============================================================================

def bank(client, headers, record_date, sales, banked, **extra):
    payload = {"record_date": record_date, "total_cash_sales": sales, "total_banked": banked}
    payload.update(extra)
    return client.post("/finance/banking/", json=payload, headers=headers)


class TestDailyBanking:
    """One reconciliation row per day; variance is cash sales minus banked."""

    def test_shortfall_is_kept_as_cash_on_hand(self, client, staff_headers):
        response = bank(client, staff_headers, "2025-05-10", "1200", "1000", bank_name="Farmers Bank")

        assert response.status_code == 201, response.text
        body = response.json()
        assert Decimal(body["variance"]) == Decimal("200")
        assert Decimal(body["cash_on_hand"]) == Decimal("200")
        assert body["status"] == "pending"
        assert body["verified_at"] is None

    def test_full_deposit_has_no_cash_on_hand(self, client, staff_headers):
        body = bank(client, staff_headers, "2025-05-10", "800", "800").json()

        assert Decimal(body["variance"]) == Decimal("0")
        assert body["cash_on_hand"] is None

    def test_one_record_per_day(self, client, staff_headers):
        assert bank(client, staff_headers, "2025-05-10", "100", "100").status_code == 201

        response = bank(client, staff_headers, "2025-05-10", "300", "300")

        assert response.status_code == 400
        assert response.json() == {"error": "Banking record already exists for this date"}

    def test_edit_recomputes_variance_and_stamps_verification(self, client, staff_headers):
        created = bank(client, staff_headers, "2025-05-10", "1200", "1000").json()

        response = client.put(
            f"/finance/banking/{created['id']}",
            json={"total_banked": "1150", "status": "verified"},
            headers=staff_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert Decimal(body["variance"]) == Decimal("50")
        assert body["verified_by"] == "staff@farm.test"
        assert body["verified_at"] is not None

    def test_list_summary(self, client, staff_headers):
        bank(client, staff_headers, "2025-05-10", "1200", "1000")
        bank(client, staff_headers, "2025-05-11", "500", "500", status="banked")
        bank(client, staff_headers, "2025-06-01", "900", "900")

        response = client.get(
            "/finance/banking/",
            params={"start_date": "2025-05-01", "end_date": "2025-05-31"},
            headers=staff_headers,
        )

        body = response.json()
        assert [r["record_date"] for r in body["records"]] == ["2025-05-11", "2025-05-10"]
        summary = body["summary"]
        assert Decimal(summary["total_cash_sales"]) == Decimal("1700")
        assert Decimal(summary["total_variance"]) == Decimal("200")
        assert Decimal(summary["total_cash_on_hand"]) == Decimal("200")
        assert summary["record_count"] == 2
        assert summary["pending_count"] == 1
        assert summary["banked_count"] == 1
        assert summary["verified_count"] == 0

    def test_only_managers_delete(self, client, staff_headers, manager_headers):
        created = bank(client, staff_headers, "2025-05-10", "100", "100").json()

        forbidden = client.delete(f"/finance/banking/{created['id']}", headers=staff_headers)
        allowed = client.delete(f"/finance/banking/{created['id']}", headers=manager_headers)

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert client.get(f"/finance/banking/{created['id']}", headers=staff_headers).status_code == 404
