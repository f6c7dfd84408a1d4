"""Background scheduler for periodic licence refreshes and seat watches."""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from seats.errors import LicenceQueryError
from web.services import get_monitor

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(daemon=True)


def init_scheduler(app):
    """Initialize and start the background scheduler."""
    from config.settings import REFRESH_INTERVAL_SECONDS

    if scheduler.running:
        return

    monitor = get_monitor(app)
    scheduler.add_job(
        func=run_refresh,
        args=[monitor],
        trigger="interval",
        seconds=REFRESH_INTERVAL_SECONDS,
        id="licence_refresh",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    scheduler.start()
    logger.info("Scheduler started: licence refresh every %d second(s)", REFRESH_INTERVAL_SECONDS)


def run_refresh(monitor) -> list[str]:
    """Refresh the published licences, then report newly free watched seats."""
    logger.debug("Running scheduled licence refresh...")

    try:
        monitor.refresh()
    except LicenceQueryError as exc:
        # Keep serving the previous aggregate; the next run retries.
        logger.warning("Scheduled refresh failed: %s", exc)
        return []
    except Exception:
        logger.exception("Scheduled licence refresh failed")
        return []

    return monitor.check_watches()
