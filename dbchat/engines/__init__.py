"""Pipeline result types and the query executor."""
