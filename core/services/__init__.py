# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageService
from .visibility_policy import AccessDecision, Denial, VisibilityPolicy
from .resource_directory import ResourceDirectory
from .delivery_broker import DeliveryBroker, DeliveryLink
from .ingestion_service import (
    IngestionService,
    IngestResult,
    ReplaceResult,
    UploadedFile,
    UploadForm,
)
from .resource_admin_service import DeleteResult, ResourceAdminService
from .member_service import MemberService

__all__ = [
    "StorageService",
    "AccessDecision",
    "Denial",
    "VisibilityPolicy",
    "ResourceDirectory",
    "DeliveryBroker",
    "DeliveryLink",
    "IngestionService",
    "IngestResult",
    "ReplaceResult",
    "UploadedFile",
    "UploadForm",
    "DeleteResult",
    "ResourceAdminService",
    "MemberService",
]
