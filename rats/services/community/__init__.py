"""Community post services."""

from rats.services.community.post_service import PostService

__all__ = ["PostService"]
