"""Pydantic models for the structure returned by database introspection."""

from pydantic import BaseModel, Field


class ColumnInfo(BaseModel):
    """One column of a table or view."""

    column_name: str
    data_type: str
    character_maximum_length: int | None = None
    is_nullable: str = "YES"
    column_default: str | None = None
    udt_name: str | None = None

    @property
    def display_type(self) -> str:
        """
        Data type with its length, e.g. character varying(255).

        Enum and other user-defined columns show their type name instead of
        USER-DEFINED.

        """
        if self.data_type == "USER-DEFINED" and self.udt_name:
            return self.udt_name
        if self.character_maximum_length:
            return f"{self.data_type}({self.character_maximum_length})"
        return self.data_type

    @property
    def nullable(self) -> bool:
        """Return True if the column accepts NULL."""
        return self.is_nullable.upper() == "YES"


class ForeignKeyInfo(BaseModel):
    """Foreign key from a column to a column of another table."""

    column_name: str
    foreign_table_name: str
    foreign_column_name: str


class IndexInfo(BaseModel):
    """Index name and its CREATE INDEX definition."""

    indexname: str
    indexdef: str


class TableInfo(BaseModel):
    """Columns, keys and indexes of one table."""

    columns: list[ColumnInfo] = Field(default_factory=list)
    primary_keys: list[str] = Field(default_factory=list)
    foreign_keys: list[ForeignKeyInfo] = Field(default_factory=list)
    indexes: list[IndexInfo] = Field(default_factory=list)


class ViewInfo(BaseModel):
    """View definition and its columns."""

    definition: str = ""
    columns: list[ColumnInfo] = Field(default_factory=list)


class FunctionInfo(BaseModel):
    """Stored function and its source."""

    function_name: str
    function_definition: str


class EnumInfo(BaseModel):
    """Enumerated type and its labels in sort order."""

    enum_name: str
    enum_values: list[str] = Field(default_factory=list)


class DatabaseStructure(BaseModel):
    """Everything introspection collects about one schema."""

    tables: dict[str, TableInfo] = Field(default_factory=dict)
    views: dict[str, ViewInfo] = Field(default_factory=dict)
    functions: list[FunctionInfo] = Field(default_factory=list)
    enums: list[EnumInfo] = Field(default_factory=list)
