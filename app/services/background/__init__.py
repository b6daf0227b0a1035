"""Background job scheduling."""

from app.services.background.task_scheduler_service import (
    JobExecution,
    ScheduledJob,
    SchedulerReport,
    TaskPriority,
    TaskSchedulerService,
    TaskStatus,
    default_jobs,
    parse_cron,
)

__all__ = [
    "JobExecution",
    "ScheduledJob",
    "SchedulerReport",
    "TaskPriority",
    "TaskSchedulerService",
    "TaskStatus",
    "default_jobs",
    "parse_cron",
]
