"""Shared fixtures: fake CRM connection, fake PDF producer and sample inputs."""

from __future__ import annotations

from pathlib import Path

import pytest

from .fakes import BOB, FakeConnection, FakePdfService

TESTS_DIR = Path(__file__).parent


@pytest.fixture
def contact_connection() -> FakeConnection:
    return FakeConnection({"Contact": [BOB]})


@pytest.fixture
def fake_pdf() -> FakePdfService:
    return FakePdfService()


@pytest.fixture
def templates_dir() -> Path:
    return TESTS_DIR / "templates"


@pytest.fixture
def queries_dir() -> Path:
    return TESTS_DIR / "queries"
