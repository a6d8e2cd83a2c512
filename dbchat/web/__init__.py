"""HTTP entry point for the query assistant."""
