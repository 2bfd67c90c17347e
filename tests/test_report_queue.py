import pytest

from menu_reports import report_queue
from menu_reports.document import RenderFailure
from menu_reports.models import ExportOptions
from menu_reports.report_queue import ExportQueue


@pytest.fixture
def queue(tmp_path):
    q = ExportQueue(max_workers=2, report_dir=tmp_path)
    yield q
    q.shutdown()


def test_jobs_complete_and_land_on_disk(queue, analytics, tmp_path):
    ids = [
        queue.submit(analytics, None, "Test Cafe", "json"),
        queue.submit(analytics, ExportOptions(include_raw_data=False), "Blue Door", "csv"),
        queue.submit(analytics, ExportOptions(include_charts=False), "Test Cafe", "pdf"),
    ]
    queue.wait(timeout=60)
    jobs = [queue.get(job_id) for job_id in ids]
    assert [j.status for j in jobs] == ["completed"] * 3
    for job in jobs:
        assert job.error is None
        assert job.result_path.startswith(str(tmp_path))
    assert jobs[1].result_path.endswith(".csv")


def test_failed_job_records_error(queue, analytics, monkeypatch):
    def broken(*args, **kwargs):
        raise RenderFailure("canvas rejected rect")

    monkeypatch.setattr(report_queue, "export_analytics", broken)
    job_id = queue.submit(analytics, None, "Test Cafe")
    queue.wait(timeout=30)
    job = queue.get(job_id)
    assert job.status == "failed"
    assert job.error == "canvas rejected rect"
    assert job.result_path is None


def test_unknown_job_is_none(queue):
    assert queue.get("missing") is None


def test_subject_with_slash_completes(queue, analytics, tmp_path):
    job_id = queue.submit(analytics, None, "Fish/Chips", "csv")
    queue.wait(timeout=30)
    job = queue.get(job_id)
    assert job.status == "completed"
    assert job.result_path.startswith(str(tmp_path / "analytics-fish-chips-"))
