"""
Shared dependencies for the Planning API.

This module provides:
- PocketBase client management (global instance, admin authentication)
- The record store and the engine services built on it
- In-memory registry of pending import sessions
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache

from fastapi import Depends
from pocketbase import PocketBase

from planning.data import PocketBaseRecordStore, RecordStore
from planning.importing import ImportSessionRegistry
from planning.insights import InsightService
from planning.payments import PaymentStatusResolver
from planning.records import ProjectService

from .settings import get_settings

logger = logging.getLogger(__name__)

# ========================================
# PocketBase Client
# ========================================

# A single admin-authenticated client shared by all endpoints. The SDK is
# synchronous; the record store drives it through asyncio.to_thread.
_settings = get_settings()
pb_url = _settings.pocketbase_url
pb = PocketBase(pb_url)


async def authenticate_pb() -> None:
    """Authenticate with PocketBase as admin."""
    settings = get_settings()
    try:
        await asyncio.to_thread(
            pb.collection("_superusers").auth_with_password,
            settings.pocketbase_admin_email,
            settings.pocketbase_admin_password,
        )
        logger.info("Successfully authenticated with PocketBase")
    except Exception as e:
        logger.error(f"Failed to authenticate with PocketBase: {e}")
        raise


# ========================================
# Record store and services
# ========================================


@lru_cache
def get_store() -> RecordStore:
    """FastAPI dependency for the PocketBase-backed record store."""
    settings = get_settings()
    return PocketBaseRecordStore(
        pb,
        projects_collection=settings.projects_collection,
        infra_collection=settings.infra_collection,
    )


def get_project_service(store: RecordStore = Depends(get_store)) -> ProjectService:
    return ProjectService(store)


def get_payment_resolver(store: RecordStore = Depends(get_store)) -> PaymentStatusResolver:
    return PaymentStatusResolver(store, chunk_size=get_settings().paid_status_chunk_size)


@lru_cache
def get_insight_service() -> InsightService:
    settings = get_settings()
    return InsightService(
        api_key=settings.openai_api_key,
        model=settings.insights_model,
        timeout=settings.insights_timeout_seconds,
    )


# ========================================
# Import Sessions
# ========================================

# Staged imports awaiting confirmation (in-process only; lost on restart)
import_sessions = ImportSessionRegistry(
    ttl_seconds=_settings.import_session_ttl_seconds,
    max_sessions=_settings.max_import_sessions,
)


def get_import_sessions() -> ImportSessionRegistry:
    return import_sessions


__all__ = [
    "pb",
    "pb_url",
    "authenticate_pb",
    "get_store",
    "get_project_service",
    "get_payment_resolver",
    "get_insight_service",
    "import_sessions",
    "get_import_sessions",
]
