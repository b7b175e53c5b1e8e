from fastapi import FastAPI
import logging
from config import settings
from api import dashboard as dashboard_api
from jobs.scheduler import monitor_scheduler

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Site Restore Monitor",
    description="Probes a site, restores it when it is down and clears its cache on a timer.",
    version="1.0.0"
)

@app.on_event("startup")
async def startup_event():
    """
    Event handler for application startup.
    Starts the restore and cache timers.
    """
    logger.info("Application starting up...")
    for name in settings.missing_urls():
        logger.warning(f"⚠️ {name} is not set; calls against it will be logged as errors")

    if settings.SCHEDULER_ENABLED:
        monitor_scheduler.start()
    else:
        logger.info("Scheduler disabled, only manual triggers will run")

@app.on_event("shutdown")
async def shutdown_event():
    if monitor_scheduler.running:
        monitor_scheduler.stop()

app.include_router(dashboard_api.router)

@app.get("/health")
def health_check():
    """
    Health check endpoint for deployment monitoring
    """
    return {"status": "healthy", "service": "site-restore-monitor"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
