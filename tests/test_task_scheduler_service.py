from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from app.core.background_tasks import build_beat_schedule
from app.services.background.task_scheduler_service import (
    ScheduledJob,
    TaskPriority,
    TaskSchedulerService,
    TaskStatus,
    default_jobs,
    parse_cron,
)

# 09:00 in Asia/Kolkata
NINE_IST = datetime(2025, 6, 15, 3, 30)


def recording_job(name, cron, calls, result=None, priority=TaskPriority.MEDIUM):
    def run(db, now):
        calls.append((name, now))
        return result
    return ScheduledJob(name=name, cron=cron, func=run, priority=priority)


def test_parse_cron_requires_five_fields():
    with pytest.raises(ValueError):
        parse_cron("0 9 * *")
    assert 9 in parse_cron("0 9 * * *").hour


def test_default_job_table():
    jobs = {job.name: job for job in default_jobs()}
    assert set(jobs) == {
        "amc_reminders",
        "amc_penalties",
        "user_suspensions",
        "kyc_reminders",
        "stop_bookings_reconcile",
    }
    assert jobs["amc_reminders"].is_due(NINE_IST)
    assert not jobs["amc_penalties"].is_due(NINE_IST)
    assert jobs["amc_penalties"].is_due(NINE_IST + timedelta(hours=1))
    assert jobs["stop_bookings_reconcile"].is_due(NINE_IST + timedelta(minutes=30))
    assert not jobs["stop_bookings_reconcile"].is_due(NINE_IST + timedelta(minutes=10))


def test_cron_is_evaluated_in_scheduler_timezone():
    job = ScheduledJob(name="j", cron="0 9 * * *", func=lambda db, now: None)
    assert job.is_due(datetime(2025, 6, 15, 9, 0), timezone="UTC")
    assert not job.is_due(datetime(2025, 6, 15, 9, 0), timezone="Asia/Kolkata")


def test_run_due_runs_matching_jobs_by_priority(db):
    calls = []
    scheduler = TaskSchedulerService(db, jobs=[
        recording_job("low", "30 3 * * *", calls, priority=TaskPriority.LOW),
        recording_job("high", "30 3 * * *", calls, priority=TaskPriority.HIGH),
        recording_job("later", "0 5 * * *", calls),
    ], timezone="UTC")

    report = scheduler.run_due(NINE_IST)

    assert [name for name, _ in calls] == ["high", "low"]
    assert report.tasks_executed == 2
    assert report.tasks_succeeded == 2
    assert report.tasks_failed == 0


def test_failing_job_is_recorded_and_does_not_stop_others(db):
    calls = []

    def explode(db, now):
        raise RuntimeError("boom")

    scheduler = TaskSchedulerService(db, jobs=[
        ScheduledJob(name="broken", cron="* * * * *", func=explode, priority=TaskPriority.HIGH),
        recording_job("healthy", "* * * * *", calls, result={"done": 1}),
    ])

    report = scheduler.run_due(NINE_IST)

    statuses = {e.job_name: e for e in report.executions}
    assert statuses["broken"].status == TaskStatus.FAILED
    assert statuses["broken"].error == "boom"
    assert statuses["healthy"].status == TaskStatus.SUCCESS
    assert statuses["healthy"].result == {"done": 1}
    assert report.tasks_failed == 1


def test_running_job_is_skipped(db):
    calls = []
    scheduler = TaskSchedulerService(db, jobs=[recording_job("busy", "* * * * *", calls)])
    scheduler._running_jobs.add("busy")

    execution = scheduler.run_job("busy", NINE_IST)

    assert execution.status == TaskStatus.SKIPPED
    assert calls == []


def test_unknown_job(db):
    with pytest.raises(KeyError):
        TaskSchedulerService(db, jobs=[]).run_job("nope")


def test_default_penalty_job_reports_counts(db, user, car, make_amc, now):
    make_amc(user, car, [(10000, now - timedelta(days=30), False)])

    execution = TaskSchedulerService(db).run_job("amc_penalties", now)

    assert execution.status == TaskStatus.SUCCESS
    assert execution.result["penalties_applied"] == 1
    assert execution.result["total_penalty_amount"] == Decimal("147.95")
    assert execution.to_dict()["status"] == "success"


def test_beat_schedule_mirrors_job_table():
    schedule = build_beat_schedule()
    assert set(schedule) == {job.name for job in default_jobs()}
    assert schedule["kyc_reminders"]["task"] == "fraction.run_scheduled_job"
    assert schedule["kyc_reminders"]["args"] == ("kyc_reminders",)
