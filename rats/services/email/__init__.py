"""Email services."""

from rats.services.email.email_service import EmailService

__all__ = ["EmailService"]
