"""Engagement service - listings, likes and follows."""

from edqorta.services.engagement.service import EngagementService

__all__ = ["EngagementService"]
