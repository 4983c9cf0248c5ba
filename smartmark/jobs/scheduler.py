import logging
import os
from datetime import timedelta

from apscheduler.schedulers.background import BackgroundScheduler

from smartmark.models import utcnow
from smartmark.services.realtime import prune_changes

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def prune_change_feed(app):
    with app.app_context():
        cutoff = utcnow() - timedelta(hours=app.config["CHANGE_RETENTION_HOURS"])
        removed = prune_changes(cutoff)
        if removed:
            logger.info("pruned %s change feed rows older than %s", removed, cutoff)
        return removed


def start_scheduler(app):
    if not app.config.get("SCHEDULER_ENABLED", True):
        return
    if os.environ.get("WERKZEUG_RUN_MAIN") == "false":
        return

    if not scheduler.get_jobs():
        scheduler.add_job(
            prune_change_feed,
            "interval",
            minutes=app.config["CHANGE_PRUNE_INTERVAL_MINUTES"],
            kwargs={"app": app},
            id="prune_change_feed",
            replace_existing=True,
        )
        scheduler.start()
