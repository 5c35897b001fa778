"""
Task queue subsystem.

Components:
- task_models.py: data structures (Task, AttachmentType, Attachment)
- task_store.py: JSON-file backed ordered queue with atomic saves
- task_api.py: small high-level helpers used by the menu handlers
"""
