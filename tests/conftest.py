"""
Root test configuration for the planning dashboard.

Everything under tests/unit runs against mocks or the in-memory record
store; no test talks to a real PocketBase or OpenAI endpoint unless
SKIP_MOCKING=true is set.
"""

from __future__ import annotations

import os
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from unittest.mock import Mock, patch

import pytest

# Tests import `planning`, `api` and `tests.fixtures` from the project root
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

FIXED_NOW = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)


def empty_page(per_page: int = 500) -> dict[str, Any]:
    """Raw PocketBase list response with no items."""
    return {"page": 1, "perPage": per_page, "totalItems": 0, "totalPages": 0, "items": []}


def create_mock_pocketbase() -> Mock:
    """PocketBase client stand-in covering the calls the record store makes.

    Listing and /api/batch go through `send`; single-record CRUD and the
    superuser login go through the collection service.
    """
    service = Mock()
    service.auth_with_password = Mock(return_value=True)
    service.get_one = Mock()
    service.create = Mock(return_value={"id": "mock-id"})
    service.update = Mock(return_value={"id": "mock-id"})
    service.delete = Mock(return_value=True)
    service.base_crud_path = Mock(return_value="/api/collections/mock/records")
    service.decode = Mock(side_effect=lambda data: data)

    client = Mock()
    client.collection = Mock(return_value=service)
    client.send = Mock(return_value=empty_page())
    client.auth_store = Mock(base_token="mock-token")
    service.client = client
    return client


@pytest.fixture
def mock_pocketbase() -> Mock:
    return create_mock_pocketbase()


@pytest.fixture(autouse=True)
def mock_all_external_services():
    """Patch the PocketBase client class so nothing opens a connection."""
    if os.environ.get("SKIP_MOCKING") == "true":
        yield {}
        return

    mock_pb = create_mock_pocketbase()
    with patch("pocketbase.PocketBase", return_value=mock_pb):
        yield {"pocketbase": mock_pb}


@pytest.fixture
def fixed_now():
    """Clock used for rows without a creation date."""
    return lambda: FIXED_NOW


@pytest.fixture
def sample_project_row() -> dict[str, Any]:
    """Spreadsheet row that stages as a new project."""
    return {
        "Title": "Villa 12 connection",
        "Status": "Site Visit",
        "Reference No.": "REF-001",
        "Plot Number": " 123A ",
        "Zone": "7",
        "Block": "712",
        "Creation Date": "2025-01-15",
    }


@pytest.fixture
def sample_infra_row() -> dict[str, Any]:
    """Spreadsheet row that stages as an infra-ledger entry."""
    return {
        "Status": "",
        "Plot": "55B",
        "Owner Name": "A. Hassan",
        "Application Number": "APP-9",
        "Initial Payment Date": "2025-02-01",
    }
