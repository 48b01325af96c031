"""
Dashboard Service

Read-only aggregations over users, templates, subscriptions and revenue for
the dashboard charts. Metrics are global, not scoped to the requesting user.
"""

from models.dashboard import DashboardMetrics, MetricPoint


def monthly_pipeline(date_field: str, value_expression) -> list[dict]:
    """Group documents by calendar month of `date_field`, summing `value_expression`."""
    return [
        {"$match": {date_field: {"$exists": True, "$ne": None}}},
        {
            "$group": {
                "_id": {
                    "year": {"$year": f"${date_field}"},
                    "month": {"$month": f"${date_field}"}
                },
                "value": {"$sum": value_expression}
            }
        }
    ]


def revenue_by_source_pipeline() -> list[dict]:
    return [
        {"$group": {"_id": "$source", "value": {"$sum": "$amount"}}}
    ]


def total_revenue_pipeline() -> list[dict]:
    return [
        {"$group": {"_id": None, "total": {"$sum": "$amount"}}}
    ]


def _month_label(key: dict) -> str:
    return f"{key['year']:04d}-{key['month']:02d}"


class DashboardService:
    """Runs the dashboard aggregation pipelines against the backing collections."""

    def __init__(self, users, templates, subscriptions, revenues):
        self.users = users
        self.templates = templates
        self.subscriptions = subscriptions
        self.revenues = revenues

    async def _aggregate(self, collection, pipeline: list[dict]) -> list[dict]:
        return [doc async for doc in collection.aggregate(pipeline)]

    async def get_metrics(self) -> DashboardMetrics:
        totals = await self._aggregate(self.revenues, total_revenue_pipeline())
        return DashboardMetrics(
            total_users=await self.users.count_documents({}),
            total_templates=await self.templates.count_documents({}),
            total_subscriptions=await self.subscriptions.count_documents({}),
            active_subscriptions=await self.subscriptions.count_documents({"status": "active"}),
            total_revenue=totals[0]["total"] if totals else 0
        )

    async def subscriptions_by_month(self) -> list[MetricPoint]:
        rows = await self._aggregate(self.subscriptions, monthly_pipeline("created_at", 1))
        rows.sort(key=lambda row: (row["_id"]["year"], row["_id"]["month"]))
        return [MetricPoint(name=_month_label(row["_id"]), value=row["value"]) for row in rows]

    async def revenue_by_month(self) -> list[MetricPoint]:
        rows = await self._aggregate(self.revenues, monthly_pipeline("date", "$amount"))
        rows.sort(key=lambda row: (row["_id"]["year"], row["_id"]["month"]))
        return [MetricPoint(name=_month_label(row["_id"]), value=row["value"]) for row in rows]

    async def revenue_by_source(self) -> list[MetricPoint]:
        rows = await self._aggregate(self.revenues, revenue_by_source_pipeline())
        points = [MetricPoint(name=str(row["_id"]), value=row["value"]) for row in rows]
        return sorted(points, key=lambda point: point.name)
