"""Collaborative task services."""

from rats.services.tasks.task_service import TaskService

__all__ = ["TaskService"]
