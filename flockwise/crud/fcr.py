"""
Feed conversion ratio for a broiler batch.

FCR is kilograms of feed eaten per kilogram of live weight gained. Feed is
recorded in bags of BAG_WEIGHT_KG; gain is the latest sampled average weight
minus the day-old chick weight, scaled to the batch's current population.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from flockwise.models.batch import Batch
from flockwise.models.feed import FeedConsumption
from flockwise.models.production import MortalityRecord, WeightRecord
from flockwise.schemas.fcr import FCRBatch, FCRBenchmarks, FCRMetrics, FCRReport, FCRTrendPoint
from flockwise.utils.formatting import round_decimal

BAG_WEIGHT_KG = Decimal("25")
INITIAL_WEIGHT_KG = Decimal("0.045")

BENCHMARKS = FCRBenchmarks(
    excellent=Decimal("1.6"),
    good=Decimal("1.8"),
    average=Decimal("2.0"),
    poor=Decimal("2.2"),
)


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    # 0 rather than a division error when there is no gain yet
    if denominator <= 0:
        return Decimal(0)
    return numerator / denominator


def classify_fcr(fcr: Decimal) -> str:
    if fcr <= 0:
        return "Not enough data"
    if fcr <= BENCHMARKS.excellent:
        return "Excellent"
    if fcr <= BENCHMARKS.good:
        return "Good"
    if fcr <= BENCHMARKS.average:
        return "Average"
    if fcr <= BENCHMARKS.poor:
        return "Below Average"
    return "Poor"


def compute_fcr(batch, feed_rows: Sequence, weight_rows: Sequence, mortality_total: int, today: date) -> FCRReport:
    """
    Build the FCR report from already fetched rows.

    `feed_rows` need consumption_date, feed_quantity_bags and total_feed_cost;
    `weight_rows` need weighing_date, age_in_days and average_weight and must be
    ordered by weighing date.
    """
    population = Decimal(batch.current_stock or 0)
    total_feed_kg = sum((Decimal(r.feed_quantity_bags) * BAG_WEIGHT_KG for r in feed_rows), Decimal(0))
    total_feed_cost = sum((Decimal(r.total_feed_cost) for r in feed_rows), Decimal(0))

    current_weight = INITIAL_WEIGHT_KG
    weight_gain = Decimal(0)
    if weight_rows:
        current_weight = Decimal(weight_rows[-1].average_weight)
        weight_gain = current_weight - INITIAL_WEIGHT_KG
    total_weight_gain = weight_gain * population

    fcr = _ratio(total_feed_kg, total_weight_gain)
    cost_per_kg = _ratio(total_feed_cost, total_weight_gain)

    age_in_days = batch.age_in_days(today)
    daily_weight_gain = weight_gain * 1000 / age_in_days if age_in_days > 0 else Decimal(0)

    trend = []
    for weight in weight_rows:
        feed_to_date = sum(
            (Decimal(r.feed_quantity_bags) * BAG_WEIGHT_KG for r in feed_rows if r.consumption_date <= weight.weighing_date),
            Decimal(0),
        )
        gain_at_point = (Decimal(weight.average_weight) - INITIAL_WEIGHT_KG) * population
        trend.append(FCRTrendPoint(
            weighing_date=weight.weighing_date,
            age_in_days=weight.age_in_days,
            average_weight=Decimal(weight.average_weight),
            fcr=round_decimal(_ratio(feed_to_date, gain_at_point), 2),
        ))

    rounded_fcr = round_decimal(fcr, 2)
    return FCRReport(
        batch=FCRBatch(
            id=batch.id,
            batch_name=batch.batch_name,
            age_in_days=age_in_days,
            initial_stock=batch.quantity_received,
            current_stock=batch.current_stock,
            mortality=mortality_total,
        ),
        metrics=FCRMetrics(
            total_feed_consumed=round_decimal(total_feed_kg, 2),
            total_feed_cost=round_decimal(total_feed_cost, 2),
            initial_weight=round_decimal(INITIAL_WEIGHT_KG, 3),
            current_weight=round_decimal(current_weight, 3),
            weight_gain=round_decimal(weight_gain, 3),
            total_weight_gain=round_decimal(total_weight_gain, 2),
            fcr=rounded_fcr,
            cost_per_kg=round_decimal(cost_per_kg, 2),
            daily_weight_gain=round_decimal(daily_weight_gain, 1),
            performance=classify_fcr(fcr),
        ),
        benchmarks=BENCHMARKS,
        fcr_trend=trend,
        feed_records_count=len(feed_rows),
        weight_records_count=len(weight_rows),
    )


def get_batch_fcr(db: Session, batch_id: int, today: date) -> Optional[FCRReport]:
    batch = db.query(Batch).filter(Batch.id == batch_id).first()
    if batch is None:
        return None
    feed_rows = (
        db.query(FeedConsumption)
        .filter(FeedConsumption.batch_id == batch_id)
        .order_by(FeedConsumption.consumption_date)
        .all()
    )
    weight_rows = (
        db.query(WeightRecord)
        .filter(WeightRecord.batch_id == batch_id)
        .order_by(WeightRecord.weighing_date)
        .all()
    )
    mortality_total = (
        db.query(func.coalesce(func.sum(MortalityRecord.mortality_count), 0))
        .filter(MortalityRecord.batch_id == batch_id)
        .scalar()
    )
    return compute_fcr(batch, feed_rows, weight_rows, int(mortality_total), today)
