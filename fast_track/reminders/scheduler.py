"""In-process dispatcher that runs the reminder evaluators on cron cadences."""
from __future__ import annotations

from typing import Callable, Mapping
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from fast_track.config import Settings, settings as default_settings
from fast_track.reminders.daily_goals import check_daily_goals
from fast_track.reminders.fasting import check_fasting_progress
from fast_track.reminders.meals import check_meal_reminders

Evaluator = Callable[[], object]

FASTING_JOB = "fasting-notifications"
MEAL_JOB = "meal-reminders"
DAILY_GOAL_JOB = "daily-goal-checker"

DEFAULT_EVALUATORS: dict[str, Evaluator] = {
    FASTING_JOB: check_fasting_progress,
    MEAL_JOB: check_meal_reminders,
    DAILY_GOAL_JOB: check_daily_goals,
}


class ReminderScheduler:
    """Owns the timer for each evaluator.

    Nothing runs until ``start()``; ``stop()`` cancels all timers and, by
    default, waits for in-flight runs to finish.
    """

    def __init__(
        self,
        config: Settings | None = None,
        evaluators: Mapping[str, Evaluator] | None = None,
        scheduler: BackgroundScheduler | None = None,
    ):
        self.settings = config or default_settings
        self.evaluators = dict(evaluators or DEFAULT_EVALUATORS)
        self._scheduler = scheduler

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def cadences(self) -> dict[str, str]:
        """Cron expression per job name."""

        return {
            FASTING_JOB: self.settings.FASTING_CHECK_CRON,
            MEAL_JOB: self.settings.MEAL_REMINDER_CRON,
            DAILY_GOAL_JOB: self.settings.DAILY_GOAL_CRON,
        }

    def start(self) -> bool:
        """Register every evaluator and start the timers.

        Returns False, without touching the database, when Web Push is not configured.
        """

        if not self.settings.push_configured:
            logger.info("Web push not configured - reminder scheduler disabled")
            return False
        if self.running:
            return True

        tz = ZoneInfo(self.settings.REMINDER_TIMEZONE)
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler(timezone=tz)

        for name, expression in self.cadences().items():
            if name not in self.evaluators:
                continue
            self._scheduler.add_job(
                self._run_guarded,
                CronTrigger.from_crontab(expression, timezone=tz),
                args=[name],
                id=name,
                name=name,
                coalesce=True,
                max_instances=self.settings.REMINDER_MAX_INSTANCES,
                replace_existing=True,
            )

        self._scheduler.start()
        logger.info(
            "Reminder scheduler started",
            jobs=sorted(self.evaluators),
            timezone=self.settings.REMINDER_TIMEZONE,
        )
        return True

    def stop(self, wait: bool = True) -> None:
        if not self.running:
            return
        self._scheduler.remove_all_jobs()
        self._scheduler.shutdown(wait=wait)
        logger.info("Reminder scheduler stopped")

    def run_now(self, name: str) -> object:
        """Run one evaluator immediately inside the failure boundary."""

        if name not in self.evaluators:
            raise KeyError(f"Unknown reminder job: {name}")
        return self._run_guarded(name)

    def _run_guarded(self, name: str) -> object:
        try:
            return self.evaluators[name]()
        except Exception:
            logger.exception("Reminder job failed", job=name)
            return None
