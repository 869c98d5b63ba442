"""ADHD Todo.

A personal task-management service with ADHD-oriented features layered on top
of ordinary task tracking.

Core subpackages
----------------

- ``adhd_todo.core``:

  - Logging and optional Logfire monitoring.
  - SQLModel entities and async repositories.
  - Pure recurrence calculation used for recurring tasks.
  - Password hashing and session-token helpers.

- ``adhd_todo.server``:

  - The FastAPI application, its routers and the service layer
    (authentication, task history, recurring generation, AI completion).

Typical workflow
----------------

1. A user signs up and logs in to obtain a session token.
2. Tasks are created directly or from templates, grouped by categories and goals.
3. Recurring schedules turn templates into concrete tasks when they fall due.
4. Focus sessions record time spent, optionally against a task.
"""
