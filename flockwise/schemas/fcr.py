from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel


class FCRBatch(BaseModel):
    id: int
    batch_name: str
    age_in_days: int
    initial_stock: int
    current_stock: int
    mortality: int


class FCRMetrics(BaseModel):
    total_feed_consumed: Decimal  # kg
    total_feed_cost: Decimal
    initial_weight: Decimal
    current_weight: Decimal
    weight_gain: Decimal
    total_weight_gain: Decimal
    fcr: Decimal
    cost_per_kg: Decimal
    daily_weight_gain: Decimal  # grams per bird per day
    performance: str


class FCRBenchmarks(BaseModel):
    excellent: Decimal
    good: Decimal
    average: Decimal
    poor: Decimal


class FCRTrendPoint(BaseModel):
    weighing_date: date
    age_in_days: int
    average_weight: Decimal
    fcr: Decimal


class FCRReport(BaseModel):
    batch: FCRBatch
    metrics: FCRMetrics
    benchmarks: FCRBenchmarks
    fcr_trend: List[FCRTrendPoint]
    feed_records_count: int
    weight_records_count: int
