import json
import logging
import os

from app.config.logging import CustomJsonFormatter, build_logging_config


def test_jobs_and_celery_loggers_write_to_jobs_log(tmp_path):
    config = build_logging_config(str(tmp_path))

    assert config["handlers"]["jobs_file"]["filename"] == os.path.join(str(tmp_path), "jobs.log")
    for name in ("app.services.background", "app.core.background_tasks", "celery"):
        assert "jobs_file" in config["loggers"][name]["handlers"]
    assert "jobs_file" not in config["loggers"]["app"]["handlers"]


def test_json_formatter_copies_request_and_job_context():
    formatter = CustomJsonFormatter("%(message)s")
    record = logging.LogRecord("app.test", logging.WARNING, __file__, 1, "Job failed", None, None)
    record.job = "amc_penalties"
    record.request_id = "req-1"

    payload = json.loads(formatter.format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "app.test"
    assert payload["job"] == "amc_penalties"
    assert payload["request_id"] == "req-1"
    assert payload["environment"] == "test"
