"""
Agents of the query assistant.

SQL agents turn a question into a validated query; the output agent turns the
query result into a short answer.
"""
