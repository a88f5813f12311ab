from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


def start_scheduler(app):
    """
    Starts the background return reminder job.
    - Skipped when SCHEDULER_ENABLED is off (tests, one-off commands).
    - Skipped in the debug reloader's watcher process.
    """
    if not app.config.get("SCHEDULER_ENABLED", True):
        app.logger.info("[scheduler] disabled by config.")
        return None

    # the werkzeug reloader runs the app twice; only the real process has WERKZEUG_RUN_MAIN=true
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    from library_app.tasks.return_reminder import run_return_reminder_job

    minutes = app.config.get("REMINDER_INTERVAL_MINUTES", 60)
    scheduler = BackgroundScheduler(timezone="UTC")

    def _job_wrapper():
        try:
            run_return_reminder_job(app)
        except Exception as ex:
            app.logger.exception(f"[scheduler] return_reminder_job error: {ex}")

    try:
        scheduler.add_job(
            func=_job_wrapper,
            trigger=IntervalTrigger(minutes=minutes),
            id="return_reminder_job",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=120
        )
        scheduler.start()
    except Exception as e:
        app.logger.warning(f"[scheduler] could not start: {e}")
        return None

    app.logger.info(f"[scheduler] Return reminder job started (every {minutes} minutes).")
    app.extensions["apscheduler"] = scheduler
    atexit.register(lambda: scheduler.shutdown(wait=False) if scheduler.running else None)
    return scheduler
