"""SQL Security Guardrail - static checks that a candidate only reads data."""

from dataclasses import dataclass, field
from typing import Final

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError

BLOCKING_SEVERITIES: Final[frozenset[str]] = frozenset({"HIGH", "CRITICAL"})


@dataclass
class SecurityViolation:
    """Security violation details."""

    type: str
    severity: str  # LOW, MEDIUM, HIGH, CRITICAL
    description: str


@dataclass
class GuardrailResult:
    """Outcome of the static checks on one query."""

    violations: list[SecurityViolation] = field(default_factory=list)

    @property
    def is_safe(self) -> bool:
        """Return True if no HIGH or CRITICAL violation was found."""
        return not self.blocking

    @property
    def blocking(self) -> list[SecurityViolation]:
        """Violations that prevent the query from being run."""
        return [v for v in self.violations if v.severity in BLOCKING_SEVERITIES]

    def describe(self) -> str:
        """Join blocking violation descriptions into one message."""
        return "; ".join(v.description for v in self.blocking)


class SQLSecurityGuardrail:
    """
    Validates candidate SQL with sqlglot before it reaches the database.

    The database planner stays the authority on syntax: a statement sqlglot
    cannot parse is reported as LOW and left for the plan-only check.
    """

    ALLOWED_ROOTS: Final[tuple[type[exp.Expression], ...]] = (
        exp.Select,
        exp.Union,
        exp.Intersect,
        exp.Except,
        exp.Subquery,
    )

    FORBIDDEN_NODES: Final[tuple[type[exp.Expression], ...]] = (
        exp.Insert,
        exp.Update,
        exp.Delete,
        exp.Drop,
        exp.Create,
        exp.Alter,
        exp.TruncateTable,
        exp.Merge,
        exp.Command,
        exp.Into,
    )

    # Server functions that write state, sleep, touch files or reach other servers
    FORBIDDEN_FUNCTIONS: Final[frozenset[str]] = frozenset(
        {
            "nextval",
            "setval",
            "pg_advisory_lock",
            "pg_advisory_xact_lock",
            "pg_notify",
            "pg_sleep",
            "pg_sleep_for",
            "pg_sleep_until",
            "pg_read_file",
            "pg_read_binary_file",
            "pg_ls_dir",
            "pg_stat_file",
            "pg_terminate_backend",
            "pg_cancel_backend",
            "pg_reload_conf",
            "lo_import",
            "lo_export",
            "dblink",
            "dblink_exec",
            "set_config",
            "query_to_xml",
            "execute_admin_query",
            "execute_explain_query",
        }
    )

    SYSTEM_SCHEMAS: Final[frozenset[str]] = frozenset(
        {"pg_catalog", "information_schema", "pg_toast"}
    )

    def __init__(self, max_joins: int = 8):
        """
        Initialize guardrail.

        Args:
            max_joins: JOIN count above which a MEDIUM warning is reported

        """
        self.max_joins = max_joins

    def validate(self, sql: str) -> GuardrailResult:
        """
        Check a candidate query.

        Args:
            sql: Candidate SQL

        Returns:
            GuardrailResult listing every violation found

        """
        if not sql or not sql.strip():
            return GuardrailResult(
                [SecurityViolation("EMPTY_QUERY", "CRITICAL", "Empty query")]
            )

        try:
            statements = [s for s in sqlglot.parse(sql, read="postgres") if s is not None]
        except ParseError as e:
            return GuardrailResult(
                [SecurityViolation("PARSE_ERROR", "LOW", f"Failed to parse SQL: {e}")]
            )

        if len(statements) != 1:
            return GuardrailResult(
                [
                    SecurityViolation(
                        "STACKED_QUERIES",
                        "CRITICAL",
                        f"Exactly one statement is allowed, found {len(statements)}",
                    )
                ]
            )

        parsed = statements[0]
        violations: list[SecurityViolation] = []

        # The server functions refuse any semicolon left after trimming
        if ";" in sql.strip().rstrip(";"):
            violations.append(
                SecurityViolation(
                    "EMBEDDED_SEMICOLON",
                    "HIGH",
                    "Semicolons are not allowed inside the query, "
                    "use chr(59) in string literals",
                )
            )

        if not isinstance(parsed, self.ALLOWED_ROOTS):
            violations.append(
                SecurityViolation(
                    "FORBIDDEN_OPERATION",
                    "CRITICAL",
                    f"Only SELECT allowed, found {type(parsed).__name__}",
                )
            )

        violations.extend(self._check_forbidden_operations(parsed))
        violations.extend(self._check_forbidden_functions(parsed))
        violations.extend(self._check_system_tables(parsed))
        violations.extend(self._check_row_locks(parsed))
        violations.extend(self._check_complexity(parsed))

        return GuardrailResult(violations)

    def _check_forbidden_operations(
        self, parsed: exp.Expression
    ) -> list[SecurityViolation]:
        """Check for data-modifying or DDL nodes anywhere in the tree."""
        violations = []
        for node in parsed.walk():
            if isinstance(node, self.FORBIDDEN_NODES):
                name = "SELECT INTO" if isinstance(node, exp.Into) else type(node).__name__
                violations.append(
                    SecurityViolation(
                        "FORBIDDEN_OPERATION",
                        "CRITICAL",
                        f"{name} operation not allowed",
                    )
                )
        return violations

    def _check_forbidden_functions(
        self, parsed: exp.Expression
    ) -> list[SecurityViolation]:
        """Check for server functions with side effects."""
        violations = []
        for func in parsed.find_all(exp.Func):
            if isinstance(func, exp.Anonymous):
                func_name = func.name.lower()
            else:
                func_name = func.sql_name().lower()

            if func_name in self.FORBIDDEN_FUNCTIONS:
                violations.append(
                    SecurityViolation(
                        "FORBIDDEN_FUNCTION",
                        "HIGH",
                        f"Function {func_name} not allowed",
                    )
                )
        return violations

    def _check_system_tables(self, parsed: exp.Expression) -> list[SecurityViolation]:
        """Check for system catalog access."""
        violations = []
        for table in parsed.find_all(exp.Table):
            schema_name = (table.db or "").lower()
            table_name = table.name.lower()
            if schema_name in self.SYSTEM_SCHEMAS or table_name.startswith("pg_"):
                qualified = f"{schema_name}.{table_name}" if schema_name else table_name
                violations.append(
                    SecurityViolation(
                        "SYSTEM_TABLE",
                        "HIGH",
                        f"System table {qualified} access not allowed",
                    )
                )
        return violations

    def _check_row_locks(self, parsed: exp.Expression) -> list[SecurityViolation]:
        """Check for FOR UPDATE / FOR SHARE clauses, which take row locks."""
        if parsed.find(exp.Lock) is not None:
            return [
                SecurityViolation(
                    "ROW_LOCK", "HIGH", "Row locking clauses are not allowed"
                )
            ]
        return []

    def _check_complexity(self, parsed: exp.Expression) -> list[SecurityViolation]:
        """Warn about very wide or unconstrained joins."""
        violations = []
        joins = list(parsed.find_all(exp.Join))
        if len(joins) > self.max_joins:
            violations.append(
                SecurityViolation(
                    "EXCESSIVE_JOINS",
                    "MEDIUM",
                    f"Too many JOINs: {len(joins)} > {self.max_joins}",
                )
            )

        for join in joins:
            kind = (join.args.get("kind") or "").upper()
            if kind == "CROSS" or isinstance(join.this, (exp.Unnest, exp.Lateral)):
                continue
            if not join.args.get("on") and not join.args.get("using"):
                violations.append(
                    SecurityViolation(
                        "CARTESIAN_PRODUCT",
                        "MEDIUM",
                        "JOIN without condition creates cartesian product",
                    )
                )
        return violations
