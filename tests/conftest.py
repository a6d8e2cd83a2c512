"""Pytest configuration and shared fixtures for dbchat tests."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from dbchat.engines.types import SchemaDescription  # noqa: E402
from dbchat.schema.models import (  # noqa: E402
    ColumnInfo,
    DatabaseStructure,
    EnumInfo,
    ForeignKeyInfo,
    IndexInfo,
    TableInfo,
)


@pytest.fixture
def sample_structure():
    """Small slice of the admin database structure."""
    return DatabaseStructure(
        tables={
            "students": TableInfo(
                columns=[
                    ColumnInfo(
                        column_name="id",
                        data_type="uuid",
                        is_nullable="NO",
                        column_default="gen_random_uuid()",
                    ),
                    ColumnInfo(
                        column_name="first_name",
                        data_type="character varying",
                        character_maximum_length=255,
                        is_nullable="NO",
                    ),
                    ColumnInfo(column_name="family_id", data_type="uuid"),
                ],
                primary_keys=["id"],
                foreign_keys=[
                    ForeignKeyInfo(
                        column_name="family_id",
                        foreign_table_name="families",
                        foreign_column_name="id",
                    )
                ],
                indexes=[
                    IndexInfo(
                        indexname="students_pkey",
                        indexdef="CREATE UNIQUE INDEX students_pkey ON public.students USING btree (id)",
                    )
                ],
            ),
            "belt_awards": TableInfo(
                columns=[
                    ColumnInfo(column_name="id", data_type="uuid", is_nullable="NO"),
                    ColumnInfo(column_name="student_id", data_type="uuid"),
                    ColumnInfo(
                        column_name="type",
                        data_type="USER-DEFINED",
                        udt_name="belt_rank_enum",
                    ),
                    ColumnInfo(column_name="awarded_date", data_type="date"),
                ],
                primary_keys=["id"],
            ),
        },
        enums=[
            EnumInfo(
                enum_name="belt_rank_enum",
                enum_values=["white", "yellow", "orange", "green"],
            )
        ],
    )


@pytest.fixture
def schema_description():
    """Schema description as handed to the generator and summarizer."""
    return SchemaDescription(text="# Database Structure\n\n## Tables\n\n### students\n")


@pytest.fixture
def mock_store(sample_structure):
    """RelationalStore double with async methods."""
    store = Mock()
    store.describe_schema = AsyncMock(return_value=sample_structure)
    store.plan_only = AsyncMock(return_value={"ok": True})
    store.execute_read_only = AsyncMock(return_value=[])
    return store


@pytest.fixture
def mock_llm():
    """TextGenerationClient double."""
    client = Mock()
    client.generate = AsyncMock(return_value="")
    return client


# Test markers for different test categories
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "postgres: Tests that require PostgreSQL database"
    )


def pytest_collection_modifyitems(config, items):
    """Mark every test without an explicit postgres marker as a unit test."""
    for item in items:
        if not any(marker.name == "postgres" for marker in item.iter_markers()):
            item.add_marker(pytest.mark.unit)
