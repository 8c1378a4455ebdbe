"""
Tests for the feed conversion ratio report.
"""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from flockwise.crud.fcr import classify_fcr, compute_fcr
from flockwise.models.batch import Batch


def make_batch(current_stock=1000, arrival=date(2025, 1, 1)):
    return Batch(
        id=1,
        batch_name="BATCH-001",
        doc_arrival_date=arrival,
        quantity_ordered=1000,
        quantity_received=1000,
        current_stock=current_stock,
    )


def feed(day, bags, cost):
    return SimpleNamespace(consumption_date=day, feed_quantity_bags=Decimal(bags), total_feed_cost=Decimal(cost))


def weighing(day, age, average):
    return SimpleNamespace(weighing_date=day, age_in_days=age, average_weight=Decimal(average))


# =============================================================================
# PURE COMPUTATION
# =============================================================================

class TestComputeFCR:
    """compute_fcr works on plain rows without a database."""

    def test_reference_batch_is_excellent(self):
        # 100 bags of 25 kg = 2500 kg; 2.2 kg birds gained 2.155 kg each
        rows = [feed(date(2025, 1, 10), "60", "57000"), feed(date(2025, 2, 1), "40", "38000")]
        weights = [weighing(date(2025, 2, 5), 35, "2.2")]

        report = compute_fcr(make_batch(), rows, weights, mortality_total=0, today=date(2025, 2, 5))

        metrics = report.metrics
        assert metrics.total_feed_consumed == Decimal("2500.00")
        assert metrics.weight_gain == Decimal("2.155")
        assert metrics.total_weight_gain == Decimal("2155.00")
        assert metrics.fcr == Decimal("1.16")
        assert metrics.performance == "Excellent"
        assert metrics.cost_per_kg == Decimal("44.08")
        assert metrics.daily_weight_gain == Decimal("61.6")
        assert report.batch.age_in_days == 35
        assert report.feed_records_count == 2
        assert report.weight_records_count == 1

    def test_no_weight_samples_gives_zero_not_error(self):
        rows = [feed(date(2025, 1, 10), "10", "9000")]

        report = compute_fcr(make_batch(), rows, [], mortality_total=0, today=date(2025, 1, 20))

        assert report.metrics.fcr == Decimal("0")
        assert report.metrics.cost_per_kg == Decimal("0")
        assert report.metrics.performance == "Not enough data"
        assert report.fcr_trend == []

    def test_empty_population_gives_zero(self):
        rows = [feed(date(2025, 1, 10), "10", "9000")]
        weights = [weighing(date(2025, 1, 20), 19, "0.9")]

        report = compute_fcr(make_batch(current_stock=0), rows, weights, mortality_total=1000, today=date(2025, 1, 20))

        assert report.metrics.fcr == Decimal("0")
        assert report.batch.mortality == 1000

    def test_trend_only_counts_feed_up_to_each_weighing(self):
        rows = [feed(date(2025, 1, 5), "20", "0"), feed(date(2025, 1, 25), "20", "0")]
        weights = [
            weighing(date(2025, 1, 15), 14, "0.545"),
            weighing(date(2025, 1, 29), 28, "1.045"),
        ]

        report = compute_fcr(make_batch(), rows, weights, mortality_total=0, today=date(2025, 1, 29))

        # 500 kg over 500 kg of gain, then 1000 kg over 1000 kg
        assert [point.fcr for point in report.fcr_trend] == [Decimal("1.00"), Decimal("1.00")]
        assert report.fcr_trend[0].weighing_date == date(2025, 1, 15)

    def test_daily_gain_is_zero_on_arrival_day(self):
        weights = [weighing(date(2025, 1, 1), 0, "0.05")]

        report = compute_fcr(make_batch(), [], weights, mortality_total=0, today=date(2025, 1, 1))

        assert report.metrics.daily_weight_gain == Decimal("0")

    @pytest.mark.parametrize("fcr, label", [
        ("0", "Not enough data"),
        ("1.6", "Excellent"),
        ("1.75", "Good"),
        ("2.0", "Average"),
        ("2.1", "Below Average"),
        ("2.5", "Poor"),
    ])
    def test_classification_thresholds(self, fcr, label):
        assert classify_fcr(Decimal(fcr)) == label


# =============================================================================
# ENDPOINT
# =============================================================================

class TestFCREndpoint:

    def test_batch_id_is_required(self, client, staff_headers):
        response = client.get("/fcr/", headers=staff_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_unknown_batch_returns_404(self, client, staff_headers):
        response = client.get("/fcr/", params={"batch_id": 77}, headers=staff_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Batch not found"}

    def test_report_from_recorded_data(self, client, staff_headers, create_batch):
        batch = create_batch()
        consumption = {
            "consumption_type": "batch",
            "batch_id": batch["id"],
            "consumption_date": "2025-01-20",
            "feed_quantity_bags": "100",
            "feed_price_per_bag": "950",
        }
        assert client.post("/feed/consumption/", json=consumption, headers=staff_headers).status_code == 201
        weight = {
            "batch_id": batch["id"],
            "weighing_date": "2025-02-05",
            "age_in_days": 35,
            "sample_size": 50,
            "average_weight": "2.2",
        }
        assert client.post("/weight-tracking/", json=weight, headers=staff_headers).status_code == 201

        response = client.get("/fcr/", params={"batch_id": batch["id"]}, headers=staff_headers)

        assert response.status_code == 200
        body = response.json()
        assert Decimal(body["metrics"]["fcr"]) == Decimal("1.16")
        assert body["metrics"]["performance"] == "Excellent"
        assert Decimal(body["metrics"]["total_feed_cost"]) == Decimal("95000")
        assert len(body["fcr_trend"]) == 1
