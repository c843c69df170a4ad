# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# External handles (Supabase wrapper, storage) are built
# once in the app lifespan and kept on app.state. Services are cheap and
# built per request from those handles and the settings.
#
# Tests swap the handles through app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings, get_settings
from core.services.delivery_broker import DeliveryBroker
from core.services.ingestion_service import IngestionService
from core.services.member_service import MemberService
from core.services.resource_admin_service import ResourceAdminService
from core.services.resource_directory import ResourceDirectory
from core.services.storage_service import StorageService
from core.services.visibility_policy import VisibilityPolicy
from lib.supabase_client import SupabaseClient


# -----------------------------------------------------------------------------
# Handles built at startup
# -----------------------------------------------------------------------------

def get_supabase_client(request: Request) -> SupabaseClient:
    """Get the Supabase wrapper created in the lifespan."""
    return request.app.state.supabase


def get_storage(request: Request) -> StorageService:
    return request.app.state.storage


SettingsDep = Annotated[Settings, Depends(get_settings)]
SupabaseDep = Annotated[SupabaseClient, Depends(get_supabase_client)]
StorageDep = Annotated[StorageService, Depends(get_storage)]


# -----------------------------------------------------------------------------
# Services
# -----------------------------------------------------------------------------

def get_visibility_policy(settings: SettingsDep) -> VisibilityPolicy:
    return VisibilityPolicy(
        allow_anonymous_public_download=settings.ALLOW_ANONYMOUS_PUBLIC_DOWNLOAD
    )


PolicyDep = Annotated[VisibilityPolicy, Depends(get_visibility_policy)]


def get_resource_directory(
    db: SupabaseDep,
    policy: PolicyDep,
    settings: SettingsDep,
) -> ResourceDirectory:
    return ResourceDirectory(db, policy, list_limit=settings.RESOURCE_LIST_LIMIT)


def get_delivery_broker(
    db: SupabaseDep,
    storage: StorageDep,
    policy: PolicyDep,
    settings: SettingsDep,
) -> DeliveryBroker:
    return DeliveryBroker(db, storage, policy, signed_url_ttl=settings.SIGNED_URL_TTL_SECONDS)


def get_ingestion_service(
    db: SupabaseDep,
    storage: StorageDep,
    settings: SettingsDep,
) -> IngestionService:
    return IngestionService(db, storage, max_upload_bytes=settings.max_upload_size_bytes)


def get_resource_admin_service(db: SupabaseDep) -> ResourceAdminService:
    return ResourceAdminService(db)


def get_member_service(db: SupabaseDep) -> MemberService:
    return MemberService(db)
