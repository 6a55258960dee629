# app/services/analytics_service.py

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, Optional

from app.core.clock import as_utc, utcnow
from app.models.application import Application
from app.models.enums import ApplicationStatus

ANALYTICS_WINDOWS = (7, 30, 90)
MAX_DAILY_BUCKETS = 14


def aggregate(applications: Iterable[Application], days: int, now: Optional[datetime] = None) -> dict:
    """
    Plain grouping and counting over rows created within the last `days`.
    Daily buckets cover the last min(days, 14) calendar days and start at
    zero so empty days still show up.
    """
    if days not in ANALYTICS_WINDOWS:
        raise ValueError(f"Unsupported window {days}. Choose one of {ANALYTICS_WINDOWS}")

    now = as_utc(now or utcnow())
    since = now - timedelta(days=days)
    window = [app for app in applications if as_utc(app.created_at) >= since]

    today = now.date()
    bucket_days = min(days, MAX_DAILY_BUCKETS)
    daily = {
        (today - timedelta(days=offset)).isoformat(): 0
        for offset in reversed(range(bucket_days))
    }
    for app in window:
        key = as_utc(app.created_at).date().isoformat()
        if key in daily:
            daily[key] += 1

    by_status = Counter(ApplicationStatus(app.status).value for app in window)
    by_department = Counter(app.department for app in window)

    return {
        "days": days,
        "total": len(window),
        "daily": [{"date": day, "applications": count} for day, count in daily.items()],
        "by_status": dict(by_status),
        "by_department": dict(by_department),
    }
