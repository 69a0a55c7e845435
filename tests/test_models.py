"""Tests for core models, results and settings"""
import logging
from datetime import datetime

import pytest

from src.core.application import Application, ApplicationStatus
from src.core.job import SalaryRange
from src.core.results import BulkOutcome, BulkResult, ErrorKind, OperationResult
from src.utils.config import LoggingConfig, PipelineConfig, Settings
from src.utils.logger import MemoryLogHandler, memory_handler, setup_logger

from tests.conftest import make_application, make_job


class TestApplication:
    def test_status_is_normalized(self):
        assert Application(id="a1", status="HIRED").status == "hired"
        assert Application(id="a1", status=None).status == "pending"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            Application(id="a1", status="archived")

    def test_parse(self):
        assert ApplicationStatus.parse(" Rejected ") is ApplicationStatus.REJECTED
        assert ApplicationStatus.parse(ApplicationStatus.HIRED) is ApplicationStatus.HIRED
        with pytest.raises(ValueError):
            ApplicationStatus.parse("maybe")

    def test_with_status_leaves_original(self):
        original = make_application("a1")
        updated = original.with_status(ApplicationStatus.HIRED)
        assert updated.status == "hired"
        assert original.status == "pending"

    def test_recency_fallback(self):
        created = datetime(2026, 1, 1)
        applied = datetime(2026, 1, 2)
        updated = datetime(2026, 1, 3)
        assert Application(id="a", created_at=created, applied_at=applied).recency == applied
        assert Application(id="a", created_at=created, updated_at=updated).recency == created
        assert Application(id="a", updated_at=updated).recency == updated
        assert Application(id="a").recency is None

    def test_effective_job_id(self):
        application = make_application("a1", make_job("j7")).model_copy(update={"job_id": None})
        assert application.effective_job_id == "j7"
        assert Application(id="a1").effective_job_id is None


class TestSalary:
    @pytest.mark.parametrize("salary, expected", [
        (SalaryRange(min=1, max=5), 5),
        (SalaryRange(min=3), 3),
        (SalaryRange(), 0),
    ])
    def test_sort_value(self, salary, expected):
        assert salary.sort_value == expected

    def test_job_without_salary(self):
        assert make_job().salary_value == 0


class TestResults:
    def test_operation_result_truthiness(self):
        assert OperationResult.success("done")
        assert not OperationResult.failure(ErrorKind.NOT_FOUND, "missing")

    @pytest.mark.parametrize("succeeded, failed, outcome", [
        ([], {}, BulkOutcome.EMPTY),
        (["a1"], {}, BulkOutcome.COMPLETE),
        (["a1"], {"a2": "x"}, BulkOutcome.PARTIAL),
        ([], {"a2": "x"}, BulkOutcome.FAILED),
    ])
    def test_bulk_outcome(self, succeeded, failed, outcome):
        result = BulkResult("j1", "hired", succeeded, failed)
        assert result.outcome == outcome
        assert result.ok == (outcome in (BulkOutcome.COMPLETE, BulkOutcome.EMPTY))


class TestSettings:
    def test_yaml_sections(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("pipeline:\n  display_base: 5\nexport:\n  directory: out\n")
        settings = Settings.load(path)
        assert settings.pipeline.display_base == 5
        assert settings.pipeline.display_batch == PipelineConfig().display_batch
        assert settings.get_export_dir().name == "out"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HIREFLOW_API_URL", "https://hiring.example.com/api")
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings.api_url == "https://hiring.example.com/api"


class TestLogging:
    def test_memory_handler_filters_by_level(self):
        handler = MemoryLogHandler(capacity=10)
        log = logging.getLogger("hireflow.tests.memory")
        log.addHandler(handler)
        log.setLevel(logging.INFO)
        try:
            log.info("loaded 3 applications")
            log.warning("interviews unavailable for j1")
        finally:
            log.removeHandler(handler)

        assert handler.get_logs() == ["loaded 3 applications", "interviews unavailable for j1"]
        assert handler.get_logs(min_level=logging.WARNING) == ["interviews unavailable for j1"]

    def test_ring_buffer_keeps_latest(self):
        handler = MemoryLogHandler(capacity=2)
        for n in range(5):
            handler.handle(logging.makeLogRecord({"msg": f"entry {n}", "levelno": logging.INFO}))
        assert handler.get_logs() == ["entry 3", "entry 4"]

    def test_setup_writes_rotating_file(self, tmp_path):
        config = LoggingConfig(file=str(tmp_path / "logs" / "pipeline.log"), level="DEBUG")
        log = setup_logger("hireflow.tests.file", config)
        log.debug("refresh job j1")
        for handler in list(log.handlers):
            handler.flush()
            log.removeHandler(handler)
            if handler is not memory_handler:
                handler.close()

        assert log.level == logging.DEBUG
        assert "refresh job j1" in (tmp_path / "logs" / "pipeline.log").read_text(encoding="utf-8")
