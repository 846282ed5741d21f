"""
Notification dispatch.

Hands NotificationPlans to an APScheduler BackgroundScheduler. Scheduler
failures never propagate: the first one flips the dispatcher to DEGRADED
and every later call returns a no-op result.
"""

from __future__ import annotations
import atexit
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

from ..utils.errors import log_error, log_info, log_warning
from .notification_plans import NotificationPlan

EXTENSION_KEY = "plant_agenda.notifications"


class DispatchStatus(str, Enum):
    AVAILABLE = "available"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    scheduled: bool = False
    job_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "scheduled": self.scheduled,
            "jobId": self.job_id,
            "error": self.error,
        }


def log_delivery(plan: NotificationPlan) -> None:
    """Default delivery hook: record the notification in the app log."""
    log_info("Delivering notification", id=plan.id, kind=plan.kind, title=plan.title)


class NotificationDispatcher:
    """
    Thin adapter over a BackgroundScheduler.

    Jobs are named after the plan kind so cancel_kind() can find them.
    Pass enabled=False to get a dispatcher that starts out DEGRADED.
    """

    def __init__(
        self,
        scheduler: Optional[Any] = None,
        deliver: Callable[[NotificationPlan], None] = log_delivery,
        enabled: bool = True,
    ):
        self._scheduler = scheduler if scheduler is not None else BackgroundScheduler()
        self._deliver = deliver
        self._lock = threading.Lock()
        self._status = DispatchStatus.AVAILABLE if enabled else DispatchStatus.DEGRADED
        self._last_error: Optional[str] = None if enabled else "disabled"

    @property
    def status(self) -> DispatchStatus:
        return self._status

    @property
    def available(self) -> bool:
        return self._status is DispatchStatus.AVAILABLE

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def _degrade(self, action: str, error: Exception) -> DispatchResult:
        with self._lock:
            first = self._status is DispatchStatus.AVAILABLE
            self._status = DispatchStatus.DEGRADED
            self._last_error = f"{action} failed: {type(error).__name__}"
        if first:
            log_error("Notification scheduler failed, dispatch disabled", action=action, error=str(error))
        return DispatchResult(DispatchStatus.DEGRADED, error=self._last_error)

    def _skipped(self) -> DispatchResult:
        return DispatchResult(DispatchStatus.DEGRADED, error=self._last_error)

    def start(self) -> None:
        if not self.available:
            return
        try:
            if not self._scheduler.running:
                self._scheduler.start()
        except Exception as e:
            self._degrade("start", e)

    def shutdown(self) -> None:
        try:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
        except Exception as e:
            log_warning("Notification scheduler did not shut down cleanly", error=str(e))

    def schedule(self, plan: NotificationPlan) -> DispatchResult:
        """Schedule (or replace) the job for a plan."""
        if not self.available:
            return self._skipped()

        if plan.daily_at is not None:
            trigger_args: Dict[str, Any] = {"trigger": "cron", "hour": plan.daily_at[0], "minute": plan.daily_at[1]}
        else:
            trigger_args = {"trigger": "date", "run_date": plan.at}

        try:
            self._scheduler.add_job(
                func=self._deliver,
                kwargs={"plan": plan},
                id=plan.id,
                name=plan.kind,
                replace_existing=True,
                **trigger_args,
            )
        except Exception as e:
            return self._degrade("schedule", e)
        return DispatchResult(DispatchStatus.AVAILABLE, scheduled=True, job_id=plan.id)

    def cancel(self, job_id: str) -> DispatchResult:
        if not self.available:
            return self._skipped()
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            return DispatchResult(DispatchStatus.AVAILABLE, job_id=job_id)
        except Exception as e:
            return self._degrade("cancel", e)
        return DispatchResult(DispatchStatus.AVAILABLE, job_id=job_id)

    def cancel_kind(self, kind: str) -> int:
        """Remove every job created for plans of `kind`; returns how many were removed."""
        if not self.available:
            return 0
        try:
            jobs = [job for job in self._scheduler.get_jobs() if job.name == kind]
            for job in jobs:
                self._scheduler.remove_job(job.id)
        except JobLookupError:
            return 0
        except Exception as e:
            self._degrade("cancel_kind", e)
            return 0
        return len(jobs)

    def list_scheduled(self) -> List[dict]:
        if not self.available:
            return []
        try:
            jobs = self._scheduler.get_jobs()
        except Exception as e:
            self._degrade("list", e)
            return []
        scheduled = []
        for job in jobs:
            # Pending jobs of a scheduler that never started have no next_run_time yet
            next_run = getattr(job, "next_run_time", None)
            scheduled.append({
                "id": job.id,
                "kind": job.name,
                "nextRunTime": next_run.isoformat() if next_run else None,
            })
        return scheduled


def init_notifications(app) -> NotificationDispatcher:
    """
    Create the app's dispatcher and store it in app.extensions.

    The scheduler is only started outside of tests and when
    NOTIFICATIONS_ENABLED is set; otherwise the dispatcher stays DEGRADED.
    """
    enabled = app.config.get("NOTIFICATIONS_ENABLED", True) and not app.config.get("TESTING", False)

    # APScheduler runs jobs in background threads without app context
    def deliver_in_context(plan: NotificationPlan) -> None:
        with app.app_context():
            log_delivery(plan)

    dispatcher = NotificationDispatcher(deliver=deliver_in_context, enabled=enabled)
    app.extensions[EXTENSION_KEY] = dispatcher

    if not enabled:
        app.logger.info("[Scheduler] Notifications disabled")
        return dispatcher

    dispatcher.start()
    if dispatcher.available:
        app.logger.info("[Scheduler] Notification dispatcher started")
        atexit.register(dispatcher.shutdown)
    else:
        app.logger.warning(f"[Scheduler] Failed to start notification dispatcher: {dispatcher.last_error}")
    return dispatcher
