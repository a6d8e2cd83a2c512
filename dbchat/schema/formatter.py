"""
Render a DatabaseStructure as the markdown description given to the models.

The rendering is deterministic for a given structure so that two cache
refreshes over an unchanged database produce the same text.
"""

from datetime import date

from .models import ColumnInfo, DatabaseStructure, TableInfo, ViewInfo


def format_schema_as_markdown(structure: DatabaseStructure) -> str:
    """
    Render tables, views, enums and functions as markdown.

    Args:
        structure: Introspected database structure

    Returns:
        Markdown text starting with "# Database Structure"

    """
    parts = ["# Database Structure\n\n", "## Tables\n\n"]

    for table_name, table in structure.tables.items():
        parts.append(_format_table(table_name, table))

    if structure.views:
        parts.append("## Views\n\n")
        for view_name, view in structure.views.items():
            parts.append(_format_view(view_name, view))

    if structure.enums:
        parts.append("## Enums\n\n")
        for enum in structure.enums:
            parts.append(f"### {enum.enum_name}\n\n")
            parts.append(f"Values: {', '.join(enum.enum_values)}\n\n")

    if structure.functions:
        parts.append("## Functions\n\n")
        for function in structure.functions:
            parts.append(f"### {function.function_name}\n\n")
            parts.append(f"```sql\n{function.function_definition}\n```\n\n")

    return "".join(parts)


def _format_table(table_name: str, table: TableInfo) -> str:
    lines = [
        f"### {table_name}\n",
        "#### Columns\n",
        "| Column Name | Data Type | Nullable | Default | Primary Key |",
        "|-------------|-----------|----------|---------|-------------|",
    ]
    for column in table.columns:
        is_pk = "Yes" if column.column_name in table.primary_keys else "No"
        lines.append(
            f"| {column.column_name} | {column.display_type} | "
            f"{_yes_no(column)} | {column.column_default or 'NULL'} | {is_pk} |"
        )

    if table.foreign_keys:
        lines += [
            "\n#### Foreign Keys\n",
            "| Column | References Table | References Column |",
            "|--------|------------------|-------------------|",
        ]
        for fk in table.foreign_keys:
            lines.append(
                f"| {fk.column_name} | {fk.foreign_table_name} | {fk.foreign_column_name} |"
            )

    if table.indexes:
        lines += [
            "\n#### Indexes\n",
            "| Name | Definition |",
            "|------|------------|",
        ]
        for index in table.indexes:
            lines.append(f"| {index.indexname} | {index.indexdef} |")

    return "\n".join(lines) + "\n\n"


def _format_view(view_name: str, view: ViewInfo) -> str:
    lines = [
        f"### {view_name}\n",
        "#### Definition\n",
        f"```sql\n{view.definition.strip()}\n```\n",
        "#### Columns\n",
        "| Column Name | Data Type | Nullable |",
        "|-------------|-----------|----------|",
    ]
    for column in view.columns:
        lines.append(
            f"| {column.column_name} | {column.display_type} | {_yes_no(column)} |"
        )
    return "\n".join(lines) + "\n\n"


def _yes_no(column: ColumnInfo) -> str:
    return "Yes" if column.nullable else "No"


def build_static_notes(today: date) -> str:
    """
    Domain notes appended after the generated description.

    Args:
        today: Date used for relative date calculations

    Returns:
        Notes block

    """
    return f"""
-- General Notes:
  - Assume PK/FK relationships exist where names suggest (e.g., family_id -> families.id).
  - Monetary amounts (amount, price) are stored in CENTS (integer). Divide by 100.0 for dollar values in SQL.
  - Dates are typically DATE or TIMESTAMPTZ.
  - Current Date for relative calculations: {today.isoformat()}

-- Important Logic Notes:
  - Belt Ranks: To find a student's *current* belt rank, join 'students' with 'belt_awards' on 'student_id' and select the 'type' associated with the most recent 'awarded_date' for that student (e.g., using ROW_NUMBER() OVER (PARTITION BY student_id ORDER BY awarded_date DESC) as rn WHERE rn = 1).
  - Payments & Orders: Payments of type 'store_purchase' are linked to an order via 'payments.order_id'. Other payment types likely have NULL for 'order_id'.
"""
