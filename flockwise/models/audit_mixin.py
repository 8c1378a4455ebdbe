import os
from datetime import datetime

import pytz
from sqlalchemy import Column, DateTime, String

APP_TIMEZONE = pytz.timezone(os.getenv("APP_TIMEZONE", "Asia/Kolkata"))


def local_now() -> datetime:
    return datetime.now(APP_TIMEZONE)


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Timestamps are timezone-aware and taken in the farm's timezone
    (APP_TIMEZONE, Asia/Kolkata unless configured otherwise).
    """
    created_at = Column(DateTime(timezone=True), default=local_now)
    updated_at = Column(DateTime(timezone=True), onupdate=local_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
