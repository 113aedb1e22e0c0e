"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, TaskCounts)
- snapshot.py: JSON snapshot codec for local storage
- task_store.py: in-memory task list with write-through persistence
"""
