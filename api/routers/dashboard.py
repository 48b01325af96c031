"""
Dashboard API Router

Provides the per-user dashboard summary and global aggregated metrics.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user_id, get_dashboard_service, get_user_store
from api.errors import NotFoundError
from config.logging_utils import log_debug
from models.dashboard import DashboardMetrics, DashboardResponse, DashboardUser, MetricPoint
from models.preferences import WebsitePreferences
from services.auth_service import UserStore
from services.dashboard_service import DashboardService


router = APIRouter(
    prefix="/api/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(get_current_user_id)]
)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store)
):
    """Get authenticated user's dashboard data."""
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User")

    return DashboardResponse(
        message="Dashboard data fetched successfully",
        user=DashboardUser(
            email=user["email"],
            website_preferences=WebsitePreferences(**user.get("website_preferences") or {}),
            created_at=user.get("created_at")
        )
    )


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(dashboard: DashboardService = Depends(get_dashboard_service)):
    """Headline totals across all users."""
    metrics = await dashboard.get_metrics()
    log_debug(f"Metrics: {metrics.model_dump()}", prefix="DASHBOARD")
    return metrics


@router.get("/subscriptions", response_model=list[MetricPoint])
async def get_subscriptions(dashboard: DashboardService = Depends(get_dashboard_service)):
    """New subscriptions per month."""
    return await dashboard.subscriptions_by_month()


@router.get("/revenue", response_model=list[MetricPoint])
async def get_revenue(dashboard: DashboardService = Depends(get_dashboard_service)):
    """Revenue per month."""
    return await dashboard.revenue_by_month()


@router.get("/revenue-source", response_model=list[MetricPoint])
async def get_revenue_by_source(dashboard: DashboardService = Depends(get_dashboard_service)):
    """Revenue per source, sorted by source name."""
    return await dashboard.revenue_by_source()
