"""
Data models for the PSR AI Console.

Typed views of what the backend sends and accepts:
- Training jobs, uploaded training files, service health
- Engineer applications and user accounts for the admin views
- Chat, knowledge search and chat history payloads
- Parsed forms of assistant replies (structured sections, layout blocks)

The backend is not consistent about field casing, so models that arrive in
both shapes accept either spelling through validation aliases.
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Optional
from enum import Enum


# ================================================================
# ENUMS
# ================================================================

class JobStatus(str, Enum):
    QUEUED = "queued"
    INITIALIZING = "initializing"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_JOB_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    ENGINEER = "engineer"
    CUSTOMER = "customer"


class UserStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


DEPARTMENTS = [
    "Engineering",
    "Operations",
    "Customer Support",
    "Sales",
    "Marketing",
    "Finance",
    "Human Resources",
    "IT & Technology",
    "Quality Assurance",
    "Research & Development",
]


# ================================================================
# TRAINING
# ================================================================

class TrainingJob(BaseModel):
    """A server-side ingestion job; the console only ever reads it."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(validation_alias=AliasChoices("id", "job_id"))
    name: str = ""
    status: JobStatus
    progress: float = Field(default=0, ge=0, le=100)
    file_count: int = Field(
        default=0, validation_alias=AliasChoices("file_count", "fileCount")
    )
    created_by: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("created_by", "createdBy")
    )
    created_at: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "created_at", "createdAt", "started_at", "startedAt"
        ),
    )
    completed_at: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("completed_at", "completedAt"),
    )
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES


class TrainingConfig(BaseModel):
    learning_rate: float = 0.001
    batch_size: int = 32
    epochs: int = 10
    max_tokens: int = 1024
    temperature: float = 0.7


class StartTrainingRequest(BaseModel):
    name: str = Field(..., min_length=1)
    file_ids: list[str]
    config: TrainingConfig = Field(default_factory=TrainingConfig)


class UploadedFile(BaseModel):
    """Metadata for a training document held by the backend."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(validation_alias=AliasChoices("id", "file_id"))
    name: str = Field(validation_alias=AliasChoices("name", "filename"))
    size: int = 0
    type: str = Field(
        default="", validation_alias=AliasChoices("type", "content_type")
    )
    uploaded_at: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("uploaded_at", "uploadedAt")
    )


class UploadResult(BaseModel):
    success: bool = True
    files_processed: int = 0
    files: list[UploadedFile] = []
    message: Optional[str] = None


class FilePreview(BaseModel):
    file_id: Optional[str] = None
    filename: Optional[str] = None
    content: str = Field(
        default="",
        validation_alias=AliasChoices("content", "preview", "text"),
    )
    total_characters: Optional[int] = None


class ServiceHealth(BaseModel):
    service: Optional[str] = None
    connected: Optional[bool] = None
    configured: Optional[bool] = None
    status: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_up(self) -> bool:
        return bool(self.connected or self.configured)


class SystemHealth(BaseModel):
    overall_status: str = "unknown"
    services: dict[str, ServiceHealth] = {}


class DatabaseHealth(BaseModel):
    service: str = "database"
    connected: bool = False
    version: Optional[str] = None
    database_name: Optional[str] = None
    uptime: Optional[str] = None
    total_connections: Optional[int] = None
    error: Optional[str] = None
    timestamp: Optional[str] = None

    @property
    def status(self) -> str:
        return "healthy" if self.connected else "unhealthy"


class VectorCollection(BaseModel):
    name: str
    object_count: int = Field(
        default=0, validation_alias=AliasChoices("object_count", "count")
    )


class VectorDatabaseStatus(BaseModel):
    connected: bool = False
    total_objects: int = 0
    collections: list[VectorCollection] = []
    error: Optional[str] = None


# ================================================================
# ADMIN
# ================================================================

class UserAccount(BaseModel):
    id: int
    email: str
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.CUSTOMER
    status: Optional[str] = None
    is_active: bool = True
    phone_number: Optional[str] = None
    department: Optional[str] = None
    state: Optional[str] = None
    created_at: Optional[str] = None
    last_login: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email


class PendingApplication(BaseModel):
    """An engineer registration awaiting review."""
    id: int
    status: ApplicationStatus = ApplicationStatus.PENDING
    user: UserAccount
    department: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[str] = None
    portfolio: Optional[str] = None
    cover_letter: Optional[str] = None
    review_notes: Optional[str] = None
    review_date: Optional[str] = None
    created_at: Optional[str] = None


class DashboardStats(BaseModel):
    total_users: int = 0
    total_admins: int = 0
    total_engineers: int = 0
    total_customers: int = 0
    pending_engineers: int = 0
    approved_engineers: int = 0
    rejected_engineers: int = 0
    active_users: int = 0
    inactive_users: int = 0
    active_customers: int = 0


class CreateAdminRequest(BaseModel):
    email: str = Field(..., pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone_number: Optional[str] = None
    department: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, min_length=8)


class ActionResult(BaseModel):
    """Generic acknowledgement for mutating endpoints."""
    model_config = ConfigDict(extra="allow")

    success: bool = True
    message: Optional[str] = None


# ================================================================
# CHAT
# ================================================================

class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    conversation_id: Optional[str] = None
    concise: bool = False


class ChatResponse(BaseModel):
    response: str
    conversation_id: Optional[str] = None
    timestamp: Optional[str] = None


class SearchResultMetadata(BaseModel):
    file_id: Optional[str] = None
    filename: Optional[str] = None
    chunk_index: Optional[int] = None
    file_type: Optional[str] = None
    source: Optional[str] = None


class SearchResult(BaseModel):
    content: str
    score: float = 0.0
    metadata: SearchResultMetadata = Field(default_factory=SearchResultMetadata)


class SearchResponse(BaseModel):
    results: list[SearchResult] = []
    query: str = ""
    total_results: int = 0
    timestamp: Optional[str] = None


class Source(BaseModel):
    id: str
    title: str
    url: str = "#"
    snippet: str = ""
    domain: str = "trained-data"
    relevance_score: Optional[float] = None


class Message(BaseModel):
    """A chat turn as the console holds it (server id is set once saved)."""
    id: Optional[int] = None
    role: str
    content: str
    timestamp: Optional[str] = None
    sources: list[Source] = []
    status: str = "sent"


class ChatMessage(BaseModel):
    id: int
    role: str
    content: str
    sources: Optional[list[Any]] = None
    message_metadata: Optional[Any] = None
    created_at: Optional[str] = None


class ChatConversation(BaseModel):
    id: Optional[int] = None
    conversation_id: str
    title: str = ""
    message_count: int = 0
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    messages: Optional[list[ChatMessage]] = None


class ChatHistoryResponse(BaseModel):
    success: bool = True
    conversations: list[ChatConversation] = []
    total_conversations: int = 0
    page: int = 1
    per_page: int = 20
    total_pages: int = 0


# ================================================================
# PARSED ASSISTANT REPLIES
# ================================================================

class ProcedureStep(BaseModel):
    step: str
    detail: str


class ParsedStructuredResponse(BaseModel):
    """Troubleshooting reply split into its named sections."""
    raw: str
    is_structured: bool = False
    action_required: Optional[list[str]] = None
    tools_needed: Optional[list[str]] = None
    procedure: Optional[list[ProcedureStep]] = None
    resolution: Optional[list[str]] = None


class BlockType(str, Enum):
    HEADER = "header"
    NUMBERED_LIST = "numbered_list"
    BULLET_LIST = "bullet_list"
    PARAGRAPH = "paragraph"


class ContentBlock(BaseModel):
    type: BlockType
    text: str = ""
    items: list[str] = []
