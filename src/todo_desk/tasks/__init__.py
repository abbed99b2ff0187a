"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, TaskSort, QueryOutcome)
- errors.py: storage error taxonomy
- task_query.py: SQL builder for the paginated/filtered/sorted query
- task_store.py: SQLite-backed storage (CRUD + paginated query)
"""
