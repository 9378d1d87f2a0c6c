"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest
from unittest.mock import patch

from services.import_workflow_service import ImportWorkflowService
from services.scholar_store_service import InMemoryScholarStore
from tests.factories import ScholarCsvFactory


# ===================
# SAMPLE FILES
# ===================

STANDARD_HEADERS = [
    "Last Name",
    "First Name",
    "District",
    "Municipality",
    "Status",
    "University",
    "Course",
    "Email",
]


@pytest.fixture
def standard_headers() -> list[str]:
    """Headers that auto-map onto every required field plus email."""
    return list(STANDARD_HEADERS)


@pytest.fixture
def valid_row() -> list[str]:
    return ["Cruz", "Juan", "I", "Tarlac City", "Ongoing", "TSU", "BSIT", "juan@mail.com"]


@pytest.fixture
def bad_email_row() -> list[str]:
    return ["Cruz", "Juan", "I", "Tarlac City", "Ongoing", "TSU", "BSIT", "bad-email"]


@pytest.fixture
def mixed_csv(standard_headers) -> str:
    """Three rows: valid, missing first name, invalid email."""
    return ScholarCsvFactory.create(
        standard_headers,
        [
            ["Cruz", "Juan", "I", "Tarlac City", "Ongoing", "TSU", "BSIT", "juan@mail.com"],
            ["Santos", "", "II", "Capas", "Ongoing", "TAU", "BSA", ""],
            ["Reyes", "Ana", "III", "Paniqui", "Graduated", "TSU", "BSED", "ana@mail"],
        ],
    )


# ===================
# WORKFLOW
# ===================

@pytest.fixture
def store() -> InMemoryScholarStore:
    """Scholar store without the simulated write delay."""
    return InMemoryScholarStore(delay_seconds=0)


@pytest.fixture
def workflow(store) -> ImportWorkflowService:
    """Fresh import workflow at the Upload step."""
    return ImportWorkflowService(store=store, allowed_extension=".csv")


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(workflow):
    """
    FastAPI test client bound to a fresh import workflow.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/imports/session")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    with patch("routes.imports.get_import_workflow_service", return_value=workflow):
        yield TestClient(app)
