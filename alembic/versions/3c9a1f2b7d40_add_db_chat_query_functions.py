"""
Add db chat query functions.

Revision ID: 3c9a1f2b7d40
Revises:
Create Date: 2026-10-18 09:12:44.201736

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c9a1f2b7d40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add read-only execution and plan-only check functions."""
    # Runs one SELECT and returns its rows as a JSON array (NULL for no rows)
    op.execute(
        """
        CREATE OR REPLACE FUNCTION execute_admin_query(query_text text)
        RETURNS json
        LANGUAGE plpgsql
        AS $$
        DECLARE
            cleaned text := rtrim(btrim(query_text), ';');
            result json;
        BEGIN
            IF lower(cleaned) !~ '^select\\s' THEN
                RAISE EXCEPTION 'Only SELECT statements are allowed'
                    USING ERRCODE = 'insufficient_privilege';
            END IF;

            -- Any remaining semicolon is refused, even inside a string literal such
            -- as WHERE note = 'a;b'. execute_explain_query and the application
            -- guardrail apply the same rule.
            IF position(';' IN cleaned) > 0 THEN
                RAISE EXCEPTION 'Only SELECT statements are allowed: multiple statements found'
                    USING ERRCODE = 'insufficient_privilege';
            END IF;

            PERFORM set_config('statement_timeout', '30s', true);

            EXECUTE format('SELECT json_agg(t) FROM (%s) t', cleaned) INTO result;
            RETURN result;
        END;
        $$;
        """
    )

    # Plans a query without running it; never raises for planner errors
    op.execute(
        """
        CREATE OR REPLACE FUNCTION execute_explain_query(query_text text)
        RETURNS json
        LANGUAGE plpgsql
        AS $$
        DECLARE
            cleaned text := rtrim(btrim(query_text), ';');
            plan json;
        BEGIN
            IF lower(cleaned) !~ '^select\\s' THEN
                RETURN json_build_object(
                    'ok', false,
                    'message', 'Only SELECT statements are allowed'
                );
            END IF;

            IF position(';' IN cleaned) > 0 THEN
                RETURN json_build_object(
                    'ok', false,
                    'message', 'Semicolons are not allowed inside the query, use chr(59) in string literals'
                );
            END IF;

            EXECUTE 'EXPLAIN (FORMAT JSON) ' || cleaned INTO plan;
            RETURN json_build_object('ok', true, 'plan', plan);
        EXCEPTION WHEN OTHERS THEN
            RETURN json_build_object('ok', false, 'message', SQLERRM);
        END;
        $$;
        """
    )


def downgrade() -> None:
    """Remove db chat query functions."""
    op.execute("DROP FUNCTION IF EXISTS execute_explain_query(text)")
    op.execute("DROP FUNCTION IF EXISTS execute_admin_query(text)")
