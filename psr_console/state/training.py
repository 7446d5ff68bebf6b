"""
Training workspace: uploaded documents, training jobs and the job poller.

The workspace owns one `JobPoller`. Every time the job list is reloaded the
poller is told about it, so it keeps polling while any job is queued,
initializing or running and goes quiet once they are all finished.

The poller's timer thread only touches this object, never Streamlit, so the
page simply re-renders from `training_jobs` on its own schedule.
"""
from datetime import datetime, timezone
from typing import Optional
import logging
import threading

from psr_console.config import settings
from psr_console.models import (
    FilePreview,
    JobStatus,
    TrainingConfig,
    TrainingJob,
    UploadedFile,
)
from psr_console.services.job_poller import JobPoller, has_active_jobs
from psr_console.services.notifications import Notifier, handle_api_response
from psr_console.services.optimistic import MutationKind, apply_optimistic_list_update
from psr_console.services.training_service import (
    TrainingService,
    UploadItem,
    split_supported_files,
)

logger = logging.getLogger(__name__)


class TrainingWorkspace:
    def __init__(
        self,
        training_service: TrainingService,
        notifier: Notifier,
        poll_interval_seconds: Optional[float] = None,
        timer_factory=threading.Timer,
    ):
        self.training_service = training_service
        self.notifier = notifier
        self.uploaded_files: list[UploadedFile] = []
        self.training_jobs: list[TrainingJob] = []
        self.last_jobs_refresh: Optional[datetime] = None
        self._jobs_lock = threading.Lock()
        self.poller = JobPoller(
            self._poll_jobs,
            poll_interval_seconds or settings.training_poll_interval_seconds,
            on_error=lambda e: notifier.report(e, "Could not refresh training jobs"),
            timer_factory=timer_factory,
            name="training-jobs",
        )

    @property
    def has_running_jobs(self) -> bool:
        return has_active_jobs(self.training_jobs)

    # ------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------

    def _set_jobs(self, jobs: list[TrainingJob]):
        with self._jobs_lock:
            self.training_jobs = jobs
            self.last_jobs_refresh = datetime.now()

    def _poll_jobs(self) -> list[TrainingJob]:
        jobs = self.training_service.list_training_jobs()
        self._set_jobs(jobs)
        return jobs

    def load_jobs(self) -> Optional[list[TrainingJob]]:
        """Fetch jobs now (skipped while a poll is in flight) and re-arm the poller."""
        jobs = self.poller.refresh_now()
        if jobs is None:
            self.poller.update(self.training_jobs)
        return jobs

    # ------------------------------------------------------------
    # Files
    # ------------------------------------------------------------

    def load_files(self) -> Optional[list[UploadedFile]]:
        files = handle_api_response(
            self.notifier,
            self.training_service.list_training_files,
            show_success=False,
            error_title="Could not load training files",
        )
        if files is not None:
            self.uploaded_files = files
        return files

    def upload(self, files: list[UploadItem]):
        accepted, rejected = split_supported_files(files)
        if rejected:
            names = ", ".join(name for name, _, _ in rejected)
            self.notifier.error(
                "Some files were rejected. Only PDF, DOC, DOCX, TXT, JSON, and CSV "
                f"files are supported. ({names})",
                "Unsupported files",
            )
        if not accepted:
            if not rejected:
                self.notifier.error("Please select files to upload")
            return None

        result = handle_api_response(
            self.notifier,
            lambda: self.training_service.upload_training_data(accepted),
            error_title="Upload failed",
            show_success=False,
        )
        if result is None:
            return None

        self.notifier.success(f"Successfully uploaded {result.files_processed} files")
        if self.load_files() is None and result.files:
            # listing failed; keep what the upload told us
            known = {f.id for f in self.uploaded_files}
            self.uploaded_files += [f for f in result.files if f.id not in known]
        return result

    def delete_file(self, file_id: str):
        self.uploaded_files = apply_optimistic_list_update(
            self.uploaded_files, file_id, MutationKind.REMOVE
        )
        result = handle_api_response(
            self.notifier,
            lambda: self.training_service.delete_training_file(file_id),
            success_message="File deleted",
            error_title="Delete failed",
        )
        self.load_files()
        return result

    def delete_files(self, file_ids: list[str]):
        if not file_ids:
            self.notifier.error("Please select files to delete")
            return None
        remaining = self.uploaded_files
        for file_id in file_ids:
            remaining = apply_optimistic_list_update(remaining, file_id, MutationKind.REMOVE)
        self.uploaded_files = remaining
        result = handle_api_response(
            self.notifier,
            lambda: self.training_service.delete_training_files(file_ids),
            success_message=f"Deleted {len(file_ids)} files",
            error_title="Delete failed",
        )
        self.load_files()
        return result

    def preview(self, file_id: str) -> Optional[FilePreview]:
        return handle_api_response(
            self.notifier,
            lambda: self.training_service.preview_training_file(file_id),
            show_success=False,
            error_title="Preview failed",
        )

    # ------------------------------------------------------------
    # Training
    # ------------------------------------------------------------

    def start_training(self, name: str, config: Optional[TrainingConfig] = None) -> Optional[TrainingJob]:
        name = (name or "").strip()
        if not name:
            self.notifier.error("Please enter a training name")
            return None
        if not self.uploaded_files:
            self.notifier.error("Please upload files before starting training")
            return None

        file_ids = [f.id for f in self.uploaded_files]
        response = handle_api_response(
            self.notifier,
            lambda: self.training_service.start_training(name, file_ids, config),
            success_message=f'Training job "{name}" started successfully',
            error_title="Failed to start training",
        )
        if response is None:
            return None

        job = TrainingJob(
            id=str(response.get("job_id") or response.get("id") or f"pending-{len(self.training_jobs) + 1}"),
            name=name,
            status=JobStatus.QUEUED,
            progress=0,
            file_count=len(file_ids),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._jobs_lock:
            self.training_jobs = self.training_jobs + [job]
        self.poller.update(self.training_jobs)
        return job

    def stop(self):
        self.poller.stop()

    def resume(self) -> bool:
        """Re-enable polling after stop() and reload jobs; False if it was never stopped."""
        if not self.poller.stopped:
            return False
        self.poller.resume()
        self.load_jobs()
        return True

    def close(self):
        self.stop()
