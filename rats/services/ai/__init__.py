"""AI assistant services."""

from rats.services.ai.assistant_service import AIAssistantService

__all__ = ["AIAssistantService"]
