"""Dashboard models for aggregated metrics and the read-only subscription and revenue records."""

from typing import Literal, Optional, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.preferences import WebsitePreferences


class Subscription(BaseModel):
    """Subscription record as stored by the billing side."""
    user: str
    plan: Literal["Basic", "Pro", "Enterprise"]
    status: Literal["active", "inactive", "cancelled"] = "active"
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Revenue(BaseModel):
    """Revenue record as stored by the billing side."""
    amount: Union[int, float]
    source: str
    date: datetime = Field(default_factory=datetime.utcnow)


class MetricPoint(BaseModel):
    """A single chart point: a label and its value."""
    name: str
    value: Union[int, float]


class DashboardMetrics(BaseModel):
    """Headline counts and sums for the dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_users: int
    total_templates: int
    total_subscriptions: int
    active_subscriptions: int
    total_revenue: Union[int, float]


class DashboardUser(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    website_preferences: WebsitePreferences
    created_at: Optional[datetime] = None


class DashboardResponse(BaseModel):
    message: str
    user: DashboardUser
