"""
Task scheduler service.

Generic registry of scheduled jobs (name -> cron expression -> callable)
and the driver that runs them. Jobs hold the business logic; the driver
only invokes them, times them and records the outcome.

Default jobs (cron evaluated in ``SCHEDULER_TIMEZONE``):
- amc_reminders: AMC due-date reminders
- amc_penalties: AMC late-payment penalty sweep
- user_suspensions: lift expired suspensions
- kyc_reminders: KYC completion reminders
- stop_bookings_reconcile: force stop-bookings on exhausted cars
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import pytz
from celery.schedules import crontab
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.services.amc.amc_penalty_service import AMCPenaltyService
from app.services.amc.amc_reminder_service import AMCReminderService
from app.services.base.base_service import BaseService
from app.services.inventory.inventory_gate import InventoryGate
from app.services.users.kyc_reminder_service import KYCReminderService
from app.services.users.user_status_service import UserStatusService
from app.utils.datetime_utils import to_naive_utc, utcnow

JobFunc = Callable[[Session, datetime], Any]


class TaskStatus(str, Enum):
    """Job execution status."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class TaskPriority(int, Enum):
    """Job priority levels; higher runs first when several are due."""
    LOW = 1
    MEDIUM = 5
    HIGH = 10


def parse_cron(expression: str) -> crontab:
    """Build a celery ``crontab`` from a five-field cron expression."""
    fields = expression.split()
    if len(fields) != 5:
        raise ValueError(f"Cron expression must have 5 fields: {expression!r}")
    minute, hour, day_of_month, month_of_year, day_of_week = fields
    return crontab(
        minute=minute,
        hour=hour,
        day_of_month=day_of_month,
        month_of_year=month_of_year,
        day_of_week=day_of_week,
    )


def local_time(now: datetime, timezone: Optional[str] = None) -> datetime:
    """Convert a naive UTC instant to wall-clock time in the scheduler timezone."""
    tz = pytz.timezone(timezone or settings.SCHEDULER_TIMEZONE)
    return pytz.utc.localize(to_naive_utc(now)).astimezone(tz)


@dataclass
class ScheduledJob:
    """A named job and when it runs."""
    name: str
    cron: str
    func: JobFunc
    priority: TaskPriority = TaskPriority.MEDIUM
    description: str = ""

    def __post_init__(self) -> None:
        self.schedule = parse_cron(self.cron)

    def is_due(self, now: datetime, timezone: Optional[str] = None) -> bool:
        """Whether the job's cron matches the minute containing ``now``."""
        local = local_time(now, timezone)
        schedule = self.schedule
        return (
            local.minute in schedule.minute
            and local.hour in schedule.hour
            and local.day in schedule.day_of_month
            and local.month in schedule.month_of_year
            and local.isoweekday() % 7 in schedule.day_of_week
        )


@dataclass
class JobExecution:
    """Execution record for a scheduled job."""
    job_name: str
    status: TaskStatus
    duration_seconds: float = 0.0
    result: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    started_at: datetime = field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_name": self.job_name,
            "status": self.status.value,
            "duration_seconds": self.duration_seconds,
            "result": self.result,
            "error": self.error,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass
class SchedulerReport:
    """Report of one scheduler pass."""
    started_at: datetime
    completed_at: datetime
    total_duration_seconds: float
    tasks_executed: int
    tasks_succeeded: int
    tasks_failed: int
    tasks_skipped: int
    executions: List[JobExecution] = field(default_factory=list)


def _as_dict(result: Any) -> Dict[str, Any]:
    if result is None:
        return {}
    if hasattr(result, "to_dict"):
        return result.to_dict()
    if isinstance(result, dict):
        return result
    return {"value": result}


def default_jobs() -> List[ScheduledJob]:
    """The production job table."""
    return [
        ScheduledJob(
            name="amc_reminders",
            cron=settings.CRON_AMC_REMINDERS,
            func=lambda db, now: AMCReminderService(db).send(now),
            priority=TaskPriority.MEDIUM,
            description="AMC payment reminders for installments due soon",
        ),
        ScheduledJob(
            name="amc_penalties",
            cron=settings.CRON_AMC_PENALTIES,
            func=lambda db, now: AMCPenaltyService(db).sweep(now),
            priority=TaskPriority.HIGH,
            description="Late-payment penalties on overdue AMC installments",
        ),
        ScheduledJob(
            name="user_suspensions",
            cron=settings.CRON_USER_SUSPENSIONS,
            func=lambda db, now: UserStatusService(db).release_expired_suspensions(now),
            priority=TaskPriority.MEDIUM,
            description="Reactivate users whose suspension has ended",
        ),
        ScheduledJob(
            name="kyc_reminders",
            cron=settings.CRON_KYC_REMINDERS,
            func=lambda db, now: KYCReminderService(db).send(now),
            priority=TaskPriority.LOW,
            description="KYC completion reminders",
        ),
        ScheduledJob(
            name="stop_bookings_reconcile",
            cron=settings.CRON_STOP_BOOKINGS_RECONCILE,
            func=lambda db, now: InventoryGate(db).reconcile_all(),
            priority=TaskPriority.HIGH,
            description="Stop bookings on cars whose token pools are exhausted",
        ),
    ]


class TaskSchedulerService(BaseService):
    """
    Runs registered jobs.

    A job's exception is caught, logged and recorded as FAILED; it never
    escapes the driver, and one failing job does not stop the others.
    """

    def __init__(
        self,
        db_session: Session,
        jobs: Optional[List[ScheduledJob]] = None,
        timezone: Optional[str] = None,
    ):
        super().__init__(None, db_session)
        self.timezone = timezone or settings.SCHEDULER_TIMEZONE
        self._jobs: Dict[str, ScheduledJob] = {}
        self._running_jobs: set = set()
        for job in default_jobs() if jobs is None else jobs:
            self.register(job)

    @property
    def jobs(self) -> List[ScheduledJob]:
        return list(self._jobs.values())

    def register(self, job: ScheduledJob) -> None:
        """Add or replace a job."""
        self._jobs[job.name] = job
        self._logger.debug(f"Registered job {job.name} ({job.cron})")

    def get_job(self, name: str) -> ScheduledJob:
        try:
            return self._jobs[name]
        except KeyError:
            raise KeyError(f"Unknown scheduled job: {name}") from None

    def run_job(self, name: str, now: Optional[datetime] = None) -> JobExecution:
        """Run one job immediately and record the outcome."""
        job = self.get_job(name)
        now = to_naive_utc(now) or utcnow()
        execution = JobExecution(job_name=name, status=TaskStatus.SUCCESS, started_at=utcnow())

        if name in self._running_jobs:
            execution.status = TaskStatus.SKIPPED
            execution.completed_at = utcnow()
            self._logger.warning(f"Job {name} is already running; skipped")
            return execution

        self._running_jobs.add(name)
        start = time.perf_counter()
        try:
            self._logger.info(f"Running scheduled job: {name}", extra={"job": name})
            execution.result = _as_dict(job.func(self.db, now))
            self._logger.info(f"Job {name} completed: {execution.result}", extra={"job": name})
        except Exception as e:
            self._rollback()
            execution.status = TaskStatus.FAILED
            execution.error = str(e)
            self._logger.error(f"Job {name} failed: {e}", exc_info=True, extra={"job": name})
        finally:
            self._running_jobs.discard(name)
            execution.duration_seconds = time.perf_counter() - start
            execution.completed_at = utcnow()
        return execution

    def due_jobs(self, now: datetime) -> List[ScheduledJob]:
        due = [job for job in self._jobs.values() if job.is_due(now, self.timezone)]
        return sorted(due, key=lambda job: job.priority, reverse=True)

    def run_due(self, now: Optional[datetime] = None) -> SchedulerReport:
        """Run every job whose cron matches ``now``, highest priority first."""
        now = to_naive_utc(now) or utcnow()
        started_at = utcnow()
        start = time.perf_counter()

        executions = [self.run_job(job.name, now) for job in self.due_jobs(now)]

        report = SchedulerReport(
            started_at=started_at,
            completed_at=utcnow(),
            total_duration_seconds=time.perf_counter() - start,
            tasks_executed=len(executions),
            tasks_succeeded=sum(1 for e in executions if e.status == TaskStatus.SUCCESS),
            tasks_failed=sum(1 for e in executions if e.status == TaskStatus.FAILED),
            tasks_skipped=sum(1 for e in executions if e.status == TaskStatus.SKIPPED),
            executions=executions,
        )
        self._logger.info(
            f"Scheduler pass: {report.tasks_succeeded} succeeded, {report.tasks_failed} failed, "
            f"{report.tasks_skipped} skipped"
        )
        return report
