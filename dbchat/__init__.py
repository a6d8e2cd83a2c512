"""
dbchat - natural-language query assistant for the admin database.

Turns a free-text question into a validated read-only PostgreSQL query, runs it
and summarizes the result in plain language.
"""

__version__ = "0.1.0"
