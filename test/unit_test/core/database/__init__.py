"""Unit tests for the database layer in adhd_todo/core/database.

Entities and repositories run against a real in-memory SQLite database so
foreign key cascades and the SQL the repositories build are exercised.
"""
