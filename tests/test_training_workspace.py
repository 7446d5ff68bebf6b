import pytest

from psr_console.models import ActionResult, JobStatus, TrainingJob, UploadedFile, UploadResult
from psr_console.services.api_client import APIError, ErrorCategory
from psr_console.services.notifications import Level
from psr_console.services.training_service import TrainingService
from psr_console.state import TrainingWorkspace


class FakeTrainingService:
    def __init__(self):
        self.files = [UploadedFile(id="f1", name="manual.pdf")]
        self.jobs = []
        self.started = []
        self.deleted = []
        self.uploaded = []

    def list_training_files(self):
        return list(self.files)

    def upload_training_data(self, files):
        self.uploaded.extend(files)
        new = [UploadedFile(id=f"f{len(self.files) + i + 1}", name=name)
               for i, (name, _, _) in enumerate(files)]
        self.files += new
        return UploadResult(files_processed=len(new), files=new)

    def delete_training_files(self, file_ids):
        self.deleted.append(list(file_ids))
        self.files = [f for f in self.files if f.id not in file_ids]
        return ActionResult(message="deleted")

    def start_training(self, name, file_ids, config=None):
        self.started.append((name, file_ids))
        return {"job_id": "job-1", "status": "queued"}

    def list_training_jobs(self):
        return list(self.jobs)


@pytest.fixture
def service():
    return FakeTrainingService()


@pytest.fixture
def workspace(service, notifier, timers):
    ws = TrainingWorkspace(service, notifier, poll_interval_seconds=10, timer_factory=timers)
    ws.load_files()
    return ws


def test_start_training_requires_name(workspace, service, notifier):
    assert workspace.start_training("   ") is None

    assert service.started == []
    assert notifier.drain()[0].message == "Please enter a training name"


def test_start_training_requires_files(workspace, service, notifier):
    workspace.uploaded_files = []

    assert workspace.start_training("Pumps") is None
    assert notifier.drain()[0].message == "Please upload files before starting training"


def test_start_training_adds_queued_job_and_polls_until_done(workspace, service, notifier, timers):
    job = workspace.start_training("Pumps")

    assert service.started == [("Pumps", ["f1"])]
    assert (job.id, job.status, job.file_count) == ("job-1", JobStatus.QUEUED, 1)
    assert workspace.has_running_jobs
    assert notifier.drain()[0].message == 'Training job "Pumps" started successfully'
    assert len(timers.armed) == 1

    service.jobs = [TrainingJob(id="job-1", name="Pumps", status=JobStatus.RUNNING, progress=50)]
    timers.fire()
    assert workspace.training_jobs[0].progress == 50
    assert len(timers.armed) == 1

    service.jobs = [TrainingJob(id="job-1", name="Pumps", status=JobStatus.COMPLETED, progress=100)]
    timers.fire()
    assert not workspace.has_running_jobs
    assert timers.armed == []
    assert workspace.last_jobs_refresh is not None


def test_load_jobs_failure_is_reported(workspace, service, notifier):
    def broken():
        raise APIError("Internal Server Error", 500, ErrorCategory.SERVER)

    service.list_training_jobs = broken

    assert workspace.load_jobs() is None
    note = notifier.drain()[0]
    assert note.title == "Could not refresh training jobs"
    assert note.category == "server"


def test_upload_rejects_unsupported_files(workspace, service, notifier):
    result = workspace.upload([
        ("notes.txt", b"hello", "text/plain"),
        ("photo.png", b"\x89PNG", "image/png"),
    ])

    assert result.files_processed == 1
    assert [name for name, _, _ in service.uploaded] == ["notes.txt"]
    assert [f.name for f in workspace.uploaded_files] == ["manual.pdf", "notes.txt"]
    rejected, uploaded = notifier.drain()
    assert rejected.level == Level.ERROR
    assert "photo.png" in rejected.message
    assert uploaded.message == "Successfully uploaded 1 files"


def test_upload_with_nothing_selected(workspace, service, notifier):
    assert workspace.upload([]) is None
    assert notifier.drain()[0].message == "Please select files to upload"


def test_delete_files_bulk(workspace, service, notifier):
    workspace.delete_files(["f1"])

    assert service.deleted == [["f1"]]
    assert workspace.uploaded_files == []
    assert notifier.drain()[0].message == "Deleted 1 files"


def test_close_stops_polling(workspace, timers):
    workspace.start_training("Pumps")
    workspace.close()

    assert timers.armed == []


def test_pdf_upload_then_training_over_http(client, adapter, notifier, timers):
    adapter.add("GET", "/ai/training-files", {"files": []})
    workspace = TrainingWorkspace(TrainingService(client), notifier, timer_factory=timers)
    workspace.load_files()
    assert workspace.uploaded_files == []

    adapter.add("POST", "/ai/upload-training-data", {"success": True, "files_processed": 1})
    adapter.add("GET", "/ai/training-files", {"files": [
        {"file_id": "f1", "filename": "pump.pdf", "size": 4, "content_type": "application/pdf"},
    ]})
    workspace.upload([("pump.pdf", b"%PDF", "application/pdf")])

    assert len(workspace.uploaded_files) == 1
    assert "pdf" in workspace.uploaded_files[0].type

    adapter.add("POST", "/ai/start-training", {"job_id": "job-7"})
    job = workspace.start_training("Pump manuals")

    starts = [r for r in adapter.requests if r.path_url.endswith("/ai/start-training")]
    assert len(starts) == 1
    assert job.status == JobStatus.QUEUED
    assert workspace.training_jobs[-1].id == "job-7"


def test_leaving_and_returning_to_training_page(workspace, service, timers):
    workspace.start_training("Pumps")
    workspace.stop()
    assert timers.armed == []
    assert not workspace.poller.active

    service.jobs = [TrainingJob(id="job-1", name="Pumps", status=JobStatus.RUNNING, progress=20)]
    assert workspace.resume()
    assert workspace.training_jobs[0].progress == 20
    assert len(timers.armed) == 1

    assert not workspace.resume()
    assert len(timers.armed) == 1
