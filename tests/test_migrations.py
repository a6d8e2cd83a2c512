"""Tests for the SQL installed by the db chat alembic migration."""

import importlib.util
from pathlib import Path
from unittest.mock import patch

import pytest

MIGRATION_PATH = (
    Path(__file__).parent.parent
    / "alembic"
    / "versions"
    / "3c9a1f2b7d40_add_db_chat_query_functions.py"
)


@pytest.fixture
def function_sql():
    """SQL of each CREATE FUNCTION statement, keyed by function name."""
    spec = importlib.util.spec_from_file_location("db_chat_migration", MIGRATION_PATH)
    migration = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(migration)

    with patch.object(migration, "op") as mock_op:
        migration.upgrade()

    statements = [call.args[0] for call in mock_op.execute.call_args_list]
    return {
        name: next(sql for sql in statements if f"FUNCTION {name}(" in sql)
        for name in ("execute_admin_query", "execute_explain_query")
    }


class TestQueryFunctionsMigration:
    """Test the server-side query functions."""

    def test_both_functions_reject_non_select(self, function_sql):
        """Execution and plan-only checks share the SELECT prefix rule."""
        for sql in function_sql.values():
            assert "!~ '^select\\s'" in sql

    def test_both_functions_reject_embedded_semicolons(self, function_sql):
        """Plan-only refuses what execution would refuse, so it fails validation."""
        for sql in function_sql.values():
            assert "position(';' IN cleaned) > 0" in sql
        assert "chr(59)" in function_sql["execute_explain_query"]

    def test_execution_sets_statement_timeout(self, function_sql):
        """Execution bounds its own runtime."""
        assert "statement_timeout" in function_sql["execute_admin_query"]
