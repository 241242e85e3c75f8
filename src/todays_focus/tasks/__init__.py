"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, Category) + JSON codec
- task_store.py: in-memory collection persisted as one blob, with change events
- task_views.py: pure derived views (today/week/category/overdue, weekly wins, stats)
"""
