"""
Task subsystem.

Components:
- task_models.py: data structures (PendingTask, TaskStatus, Reminder) and thread links
- hash_store.py: Redis / SQLite hash backends
- task_store.py: pending-task CRUD over a hash store
- task_scheduler.py: one-shot reminder timers
"""
