"""
AI training endpoints: training documents, training jobs, service health and
the vector database.

Uploads go out as multipart (`files` field, one part per document). All
other calls are JSON.
"""
from pathlib import PurePath
from typing import BinaryIO, Iterable, Optional, Union
import logging

from psr_console.config import settings
from psr_console.models import (
    ActionResult,
    DatabaseHealth,
    FilePreview,
    StartTrainingRequest,
    SystemHealth,
    TrainingConfig,
    TrainingJob,
    UploadedFile,
    UploadResult,
    VectorDatabaseStatus,
)
from psr_console.results import validate_list, validate_model
from psr_console.services.api_client import ApiClient

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "application/json",
    "text/csv",
}

# (filename, content, content_type)
UploadItem = tuple[str, Union[bytes, BinaryIO], Optional[str]]


def is_supported_file(filename: str, content_type: Optional[str] = None) -> bool:
    if content_type in SUPPORTED_MIME_TYPES:
        return True
    return PurePath(filename).suffix.lower() in settings.allowed_upload_extensions


def split_supported_files(files: Iterable[UploadItem]) -> tuple[list[UploadItem], list[UploadItem]]:
    """Partition uploads into (accepted, rejected) by extension or MIME type."""
    accepted, rejected = [], []
    for item in files:
        name, _, content_type = item
        (accepted if is_supported_file(name, content_type) else rejected).append(item)
    return accepted, rejected


def _ack(payload) -> ActionResult:
    if payload is None:
        return ActionResult()
    return validate_model(ActionResult, payload).unwrap()


class TrainingService:
    def __init__(self, client: ApiClient):
        self.client = client

    # ------------------------------------------------------------
    # Health
    # ------------------------------------------------------------

    def get_health(self) -> SystemHealth:
        return validate_model(SystemHealth, self.client.get("/ai/health")).unwrap()

    def get_database_health(self) -> DatabaseHealth:
        return validate_model(DatabaseHealth, self.client.get("/database/health")).unwrap()

    # ------------------------------------------------------------
    # Training documents
    # ------------------------------------------------------------

    def upload_training_data(self, files: list[UploadItem]) -> UploadResult:
        if not files:
            raise ValueError("No files selected for upload")
        parts = [
            ("files", (name, content, content_type or "application/octet-stream"))
            for name, content, content_type in files
        ]
        logger.info(f"Uploading {len(parts)} training file(s)")
        payload = self.client.post(
            "/ai/upload-training-data",
            files=parts,
            timeout=settings.upload_timeout_seconds,
        )
        result = validate_model(UploadResult, payload or {}).unwrap()
        if not result.files_processed:
            result.files_processed = len(result.files) or len(files)
        return result

    def list_training_files(self) -> list[UploadedFile]:
        payload = self.client.get("/ai/training-files")
        return validate_list(UploadedFile, payload, envelope_keys=("files",)).unwrap()

    def delete_training_file(self, file_id: str) -> ActionResult:
        logger.info(f"Deleting training file {file_id}")
        return _ack(self.client.delete(f"/ai/training-files/{file_id}"))

    def delete_training_files(self, file_ids: list[str]) -> ActionResult:
        logger.info(f"Deleting {len(file_ids)} training files")
        return _ack(self.client.delete("/ai/training-files", json={"file_ids": list(file_ids)}))

    def preview_training_file(self, file_id: str) -> FilePreview:
        payload = self.client.get(f"/ai/training-files/{file_id}/preview")
        return validate_model(FilePreview, payload).unwrap()

    # ------------------------------------------------------------
    # Training jobs
    # ------------------------------------------------------------

    def start_training(self, name: str, file_ids: list[str],
                       config: Optional[TrainingConfig] = None) -> dict:
        request = StartTrainingRequest(
            name=name.strip(), file_ids=list(file_ids),
            config=config or TrainingConfig(),
        )
        logger.info(f"Starting training job {request.name!r} on {len(file_ids)} files")
        return self.client.post("/ai/start-training", json=request.model_dump()) or {}

    def list_training_jobs(self) -> list[TrainingJob]:
        payload = self.client.get("/ai/training-jobs")
        return validate_list(TrainingJob, payload, envelope_keys=("jobs",)).unwrap()

    # ------------------------------------------------------------
    # Vector database
    # ------------------------------------------------------------

    def get_vector_database_status(self) -> VectorDatabaseStatus:
        payload = self.client.get("/ai/vector-database/status")
        return validate_model(VectorDatabaseStatus, payload).unwrap()

    def clear_vector_database(self) -> ActionResult:
        logger.warning("Clearing the vector database")
        return _ack(self.client.delete("/ai/vector-database/clear"))

    def delete_collection(self, name: str) -> ActionResult:
        logger.warning(f"Deleting vector collection {name}")
        return _ack(self.client.delete(f"/ai/vector-database/collection/{name}"))
