import logging
from fastapi import APIRouter
from fastapi.responses import HTMLResponse, RedirectResponse
from config import settings
from jobs.scheduler import monitor_scheduler
from models.dashboard import DashboardData
from services.dashboard_service import DashboardService
from api.dashboard_page import render_dashboard

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dashboard"])


def get_dashboard_service() -> DashboardService:
    checker = monitor_scheduler.health_checker if settings.DASHBOARD_LIVE_PROBE else None
    return DashboardService(
        monitor_scheduler.store,
        monitor_scheduler.status,
        health_checker=checker,
        probe_max_age=settings.DASHBOARD_PROBE_MAX_AGE_S,
        restore_interval=monitor_scheduler.restore_interval,
        cache_interval=monitor_scheduler.cache_interval,
    )


# 📊 Dashboard
@router.get("/", response_class=HTMLResponse)
async def dashboard():
    """Live status, counters, activity chart and the rolling log."""
    data = await get_dashboard_service().get_dashboard_data()
    return HTMLResponse(render_dashboard(data))


@router.get("/api/status", response_model=DashboardData)
async def dashboard_status():
    """Same snapshot as the dashboard, as JSON."""
    return await get_dashboard_service().get_dashboard_data()


# 🔄 Manual triggers
@router.get("/run-now")
async def run_now():
    """Probe the site and restore it if it is down, then go back to the dashboard."""
    logger.info("🔄 Manual restore cycle requested")
    await monitor_scheduler.run_restore_cycle()
    return RedirectResponse(url="/", status_code=302)


@router.get("/clear-cache")
async def clear_cache():
    """Clear the remote cache, then go back to the dashboard."""
    logger.info("🔄 Manual cache cycle requested")
    await monitor_scheduler.run_cache_cycle()
    return RedirectResponse(url="/", status_code=302)
