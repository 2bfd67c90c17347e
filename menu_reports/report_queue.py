import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .exporters import export_analytics
from .models import AnalyticsData, ExportOptions
from .report_store import save_artifact

logger = logging.getLogger(__name__)


@dataclass
class ExportJob:
    id: str
    subject_name: str
    fmt: str
    status: str = "submitted"
    result_path: Optional[str] = None
    error: Optional[str] = None
    future: Optional[Future] = field(default=None, repr=False)


class ExportQueue:
    """
    Threaded queue so several exports can render without blocking the page.
    Every job renders with its own data and options; nothing is shared.
    """

    def __init__(self, max_workers: int = 2, report_dir: Optional[Path] = None):
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="export")
        self.report_dir = report_dir
        self.jobs: Dict[str, ExportJob] = {}
        self.lock = threading.Lock()

    def submit(
        self,
        data: AnalyticsData,
        options: Optional[ExportOptions],
        subject_name: str,
        fmt: str = "pdf",
    ) -> str:
        job_id = uuid.uuid4().hex[:12]
        job = ExportJob(id=job_id, subject_name=subject_name, fmt=fmt, status="queued")
        with self.lock:
            self.jobs[job_id] = job
        # Each job gets its own options object.
        job_options = options if options is not None else ExportOptions.defaults()
        job.future = self.executor.submit(self._run_job, job_id, data, job_options)
        return job_id

    def _run_job(self, job_id: str, data: AnalyticsData, options: ExportOptions) -> None:
        with self.lock:
            job = self.jobs[job_id]
            job.status = "running"
        try:
            artifact = export_analytics(data, options, job.subject_name, job.fmt)
            path = save_artifact(artifact, self.report_dir)
            with self.lock:
                job.status = "completed"
                job.result_path = str(path)
        except Exception as exc:
            logger.error("export job %s failed", job_id, exc_info=True)
            with self.lock:
                job.status = "failed"
                job.error = str(exc)

    def get(self, job_id: str) -> Optional[ExportJob]:
        with self.lock:
            return self.jobs.get(job_id)

    def wait(self, timeout: Optional[float] = None) -> None:
        with self.lock:
            futures = [j.future for j in self.jobs.values() if j.future is not None]
        wait_futures(futures, timeout=timeout)

    def shutdown(self) -> None:
        self.executor.shutdown(wait=True)
