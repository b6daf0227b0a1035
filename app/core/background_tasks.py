"""
Celery application for the scheduled jobs.

The beat schedule is generated from the scheduling driver's job table,
so adding a ``ScheduledJob`` there is enough to have it run on time.
Redis is the broker and result backend.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from celery import Celery

from app.config.logging import get_logger
from app.config.settings import settings
from app.db.session import SessionLocal
from app.services.background.task_scheduler_service import (
    TaskSchedulerService,
    TaskStatus,
    default_jobs,
)

logger = get_logger(__name__)


def create_celery_app() -> Celery:
    app = Celery(
        "fraction",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
    )
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone=settings.SCHEDULER_TIMEZONE,
        enable_utc=True,
        task_track_started=True,
        task_time_limit=30 * 60,
        task_soft_time_limit=25 * 60,
        worker_prefetch_multiplier=1,
        task_acks_late=True,
    )
    app.conf.beat_schedule = build_beat_schedule()
    return app


def build_beat_schedule() -> Dict[str, Dict[str, Any]]:
    """One beat entry per scheduled job, keyed by job name."""
    return {
        job.name: {
            "task": "fraction.run_scheduled_job",
            "schedule": job.schedule,
            "args": (job.name,),
        }
        for job in default_jobs()
    }


celery_app = create_celery_app()


@celery_app.task(name="fraction.run_scheduled_job")
def run_scheduled_job(job_name: str, now: Optional[str] = None) -> Dict[str, Any]:
    """Run one scheduled job in a fresh database session."""
    db = SessionLocal()
    try:
        moment = datetime.fromisoformat(now) if now else None
        execution = TaskSchedulerService(db).run_job(job_name, moment)
        if execution.status == TaskStatus.FAILED:
            logger.error(f"Scheduled job {job_name} failed: {execution.error}")
        return execution.to_dict()
    finally:
        db.close()


__all__ = ["celery_app", "create_celery_app", "build_beat_schedule", "run_scheduled_job"]
