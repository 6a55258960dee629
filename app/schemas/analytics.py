from pydantic import BaseModel
from typing import Dict, List

from app.schemas.application import ApplicationStats


class DailyBucket(BaseModel):
    date: str
    applications: int


class AnalyticsRead(BaseModel):
    days: int
    total: int
    daily: List[DailyBucket]
    by_status: Dict[str, int]
    by_department: Dict[str, int]
    stats: ApplicationStats
