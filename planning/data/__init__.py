"""Data access layer: record store protocol and the PocketBase adapter."""

from __future__ import annotations

from .pocketbase_store import INFRA_COLLECTION, PROJECTS_COLLECTION, PocketBaseRecordStore
from .pocketbase_wrapper import PocketBaseWrapper
from .record_store import RecordStore

__all__ = [
    "INFRA_COLLECTION",
    "PROJECTS_COLLECTION",
    "PocketBaseRecordStore",
    "PocketBaseWrapper",
    "RecordStore",
]
