"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Category) and timestamp helpers
- task_store.py: SQLite-backed document store behind the REST API
"""
