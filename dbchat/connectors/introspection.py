"""
PostgreSQL structure introspection.

Collects tables, views, stored functions and enumerated types of one schema
with their columns, keys and indexes. Runs on an already open async
connection that uses the dict_row factory.
"""

from typing import Any, Final

from loguru import logger
from psycopg import AsyncConnection

from dbchat.schema.models import (
    ColumnInfo,
    DatabaseStructure,
    EnumInfo,
    ForeignKeyInfo,
    FunctionInfo,
    IndexInfo,
    TableInfo,
    ViewInfo,
)

TABLES_QUERY: Final[str] = """
    SELECT tablename
    FROM pg_catalog.pg_tables
    WHERE schemaname = %s
    ORDER BY tablename
"""

VIEWS_QUERY: Final[str] = """
    SELECT viewname
    FROM pg_catalog.pg_views
    WHERE schemaname = %s
    ORDER BY viewname
"""

FUNCTIONS_QUERY: Final[str] = """
    SELECT p.proname AS function_name,
           pg_get_functiondef(p.oid) AS function_definition
    FROM pg_proc p
    JOIN pg_namespace n ON p.pronamespace = n.oid
    WHERE n.nspname = %s
      AND p.prokind = 'f'
    ORDER BY p.proname
"""

ENUMS_QUERY: Final[str] = """
    SELECT t.typname AS enum_name,
           array_agg(e.enumlabel ORDER BY e.enumsortorder) AS enum_values
    FROM pg_type t
    JOIN pg_enum e ON e.enumtypid = t.oid
    JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE n.nspname = %s
    GROUP BY t.typname
    ORDER BY t.typname
"""

COLUMNS_QUERY: Final[str] = """
    SELECT column_name,
           data_type,
           character_maximum_length,
           is_nullable,
           column_default,
           udt_name
    FROM information_schema.columns
    WHERE table_schema = %s
      AND table_name = %s
    ORDER BY ordinal_position
"""

PRIMARY_KEYS_QUERY: Final[str] = """
    SELECT kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON kcu.constraint_name = tc.constraint_name
     AND kcu.table_schema = tc.table_schema
    WHERE tc.constraint_type = 'PRIMARY KEY'
      AND tc.table_schema = %s
      AND tc.table_name = %s
    ORDER BY kcu.ordinal_position
"""

FOREIGN_KEYS_QUERY: Final[str] = """
    SELECT kcu.column_name,
           ccu.table_name AS foreign_table_name,
           ccu.column_name AS foreign_column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
     AND tc.table_schema = kcu.table_schema
    JOIN information_schema.constraint_column_usage ccu
      ON ccu.constraint_name = tc.constraint_name
    WHERE tc.constraint_type = 'FOREIGN KEY'
      AND tc.table_schema = %s
      AND tc.table_name = %s
"""

INDEXES_QUERY: Final[str] = """
    SELECT indexname, indexdef
    FROM pg_indexes
    WHERE schemaname = %s
      AND tablename = %s
    ORDER BY indexname
"""

VIEW_DEFINITION_QUERY: Final[str] = """
    SELECT pg_get_viewdef(to_regclass(%s), true) AS view_definition
"""


def to_str_list(value: Any) -> list[str]:
    """
    Normalize a PostgreSQL array to a list of strings.

    Accepts an already decoded list or the textual '{a,b}' form that is
    returned for arrays of types the driver does not know.
    """
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    if isinstance(value, str) and value.startswith("{") and value.endswith("}"):
        inner = value[1:-1]
        if not inner:
            return []
        return [item.strip().strip('"') for item in inner.split(",")]
    return []


async def _fetch_all(
    conn: AsyncConnection, query: str, params: tuple[Any, ...]
) -> list[dict[str, Any]]:
    cursor = await conn.execute(query, params)
    return list(await cursor.fetchall())


async def introspect_database(
    conn: AsyncConnection, schema: str = "public"
) -> DatabaseStructure:
    """
    Collect the structure of one schema.

    Args:
        conn: Open connection using the dict_row factory
        schema: Schema to describe

    Returns:
        DatabaseStructure with tables, views, functions and enums

    """
    table_names = [
        row["tablename"] for row in await _fetch_all(conn, TABLES_QUERY, (schema,))
    ]
    view_names = [
        row["viewname"] for row in await _fetch_all(conn, VIEWS_QUERY, (schema,))
    ]
    functions = [
        FunctionInfo(**row) for row in await _fetch_all(conn, FUNCTIONS_QUERY, (schema,))
    ]
    enums = [
        EnumInfo(enum_name=row["enum_name"], enum_values=to_str_list(row["enum_values"]))
        for row in await _fetch_all(conn, ENUMS_QUERY, (schema,))
    ]
    logger.debug(
        f"Found {len(table_names)} tables, {len(view_names)} views, "
        f"{len(functions)} functions, {len(enums)} enums in schema {schema}"
    )

    tables: dict[str, TableInfo] = {}
    for table_name in table_names:
        params = (schema, table_name)
        columns = await _fetch_all(conn, COLUMNS_QUERY, params)
        primary_keys = await _fetch_all(conn, PRIMARY_KEYS_QUERY, params)
        foreign_keys = await _fetch_all(conn, FOREIGN_KEYS_QUERY, params)
        indexes = await _fetch_all(conn, INDEXES_QUERY, params)
        tables[table_name] = TableInfo(
            columns=[ColumnInfo(**row) for row in columns],
            primary_keys=[row["column_name"] for row in primary_keys],
            foreign_keys=[ForeignKeyInfo(**row) for row in foreign_keys],
            indexes=[IndexInfo(**row) for row in indexes],
        )

    views: dict[str, ViewInfo] = {}
    for view_name in view_names:
        definition_rows = await _fetch_all(
            conn, VIEW_DEFINITION_QUERY, (f"{schema}.{view_name}",)
        )
        definition = definition_rows[0]["view_definition"] if definition_rows else ""
        columns = await _fetch_all(conn, COLUMNS_QUERY, (schema, view_name))
        views[view_name] = ViewInfo(
            definition=definition or "",
            columns=[ColumnInfo(**row) for row in columns],
        )

    return DatabaseStructure(
        tables=tables, views=views, functions=functions, enums=enums
    )
