from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class CourseMetrics(BaseModel):
    total_tasks: int
    turned_in: int
    returned: int
    submitted: int
    pending: int
    overdue: int
    on_time_estimate: int
    percent_on_time: int
    avg_delay_hours: int


class WindowSummary(BaseModel):
    delivered: int = 0
    on_time_percent: int = 0
    pending: int = 0
    overdue: int = 0


class CourseworkStatus(BaseModel):
    id: str
    title: str
    status: Literal["pending", "overdue", "delivered"]
    due: Optional[datetime] = None
    remaining: str = ""

    # delivered rows only
    state: Optional[str] = None
    submitted_at: Optional[datetime] = None
    on_time: Optional[bool] = None
    delay_hours: Optional[int] = None


class MetricsDetails(BaseModel):
    pending: list[CourseworkStatus] = []
    overdue: list[CourseworkStatus] = []
    delivered: list[CourseworkStatus] = []


class MetricsSummary(BaseModel):
    week: WindowSummary
    month: WindowSummary


class CourseMetricsReport(BaseModel):
    metrics: CourseMetrics
    details: MetricsDetails
    summary: MetricsSummary
